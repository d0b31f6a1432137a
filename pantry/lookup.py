"""Barcode lookup against the local store and Open Food Facts."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import requests

from .db import InventoryDB
from .errors import StoreError, UpstreamError
from .models import ProductInfo

logger = logging.getLogger(__name__)


class ProductLookup:
    """Finds a product by barcode, creating it from the catalog if needed."""

    def __init__(
        self,
        store: InventoryDB,
        base_url: str = "https://world.openfoodfacts.org",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._store = store
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    async def lookup(self, barcode: str) -> ProductInfo | None:
        """Return the product for ``barcode`` or None if nobody knows it."""
        barcode = barcode.strip()
        if not barcode:
            return None

        known = self._store.find_product_by_barcode(barcode)
        if known is not None:
            return known

        # Only the network call leaves the event loop; SQLite work here is local
        off = await asyncio.to_thread(self._fetch_catalog, barcode)
        if off is None:
            return None

        product = self._store.create_product(
            _product_name(off), _category(off), _image_url(off)
        )
        try:
            self._store.link_barcode(barcode, product.id)
        except StoreError:
            # The product is still usable without the barcode link
            logger.warning("Failed to link barcode %s to product %d", barcode, product.id)
        return product

    def _fetch_catalog(self, barcode: str) -> dict[str, Any] | None:
        url = f"{self._base_url}/api/v2/product/{quote(barcode, safe='')}.json"
        try:
            resp = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            raise UpstreamError(f"Product catalog request failed: {e}") from e

        if not resp.ok:
            logger.info("Catalog returned %s for barcode %s", resp.status_code, barcode)
            return None
        try:
            data = resp.json()
        except ValueError:
            return None
        if not isinstance(data, dict) or data.get("status") != 1 or not data.get("product"):
            return None
        return data["product"]


def _product_name(off: dict[str, Any]) -> str:
    return off.get("product_name") or off.get("product_name_en") or "Unknown product"


def _category(off: dict[str, Any]) -> str | None:
    categories = off.get("categories")
    if isinstance(categories, str) and categories:
        return categories.split(",")[0].strip() or None
    return None


def _image_url(off: dict[str, Any]) -> str | None:
    return (
        off.get("image_url")
        or off.get("image_front_url")
        or off.get("image_front_small_url")
        or None
    )
