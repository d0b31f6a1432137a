"""Persist approved items as one batch."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Protocol

from .errors import ValidationError
from .models import InventoryItemInsert, Location, ParsedItem, ProductInfo

logger = logging.getLogger(__name__)


class InventoryStore(Protocol):
    def list_locations(self) -> list[Location]: ...

    def find_product_by_name(self, name: str) -> int | None: ...

    def create_product(
        self, name: str, category: str | None = None, image_url: str | None = None
    ) -> ProductInfo: ...

    def insert_inventory_items(self, rows: list[dict[str, Any]]) -> list[dict]: ...


class BatchCommitter:
    """Resolves product references and writes inventory rows in one call.

    Product resolution runs strictly in order so that a name appearing twice
    in one batch creates a single product. There is no transaction around
    product creation: if a later product insert fails, products created
    earlier in the same batch stay behind.
    """

    def __init__(self, store: InventoryStore) -> None:
        self._store = store

    def build_records(
        self, items: list[ParsedItem], added_date: str | None = None
    ) -> list[InventoryItemInsert]:
        """Map approved items to insert records, resolving location names.

        Raises:
            ValidationError: If an item names a location the store doesn't have.
        """
        added = added_date or date.today().isoformat()
        locations = {loc.name.lower(): loc.id for loc in self._store.list_locations()}

        records: list[InventoryItemInsert] = []
        for item in items:
            location_id = locations.get(item.location_name.lower())
            if location_id is None:
                raise ValidationError(f'Location "{item.location_name}" not found')
            records.append(
                InventoryItemInsert(
                    quantity=item.quantity,
                    quantity_type=item.quantity_type,
                    location_id=location_id,
                    added_date=added,
                    expiration_date=item.expiration_date,
                    opened_status=item.opened_status,
                    product_name=item.product_name,
                )
            )
        return records

    def commit(
        self, items: list[ParsedItem], added_date: str | None = None
    ) -> list[dict]:
        """Commit approved items and return the persisted rows."""
        if not items:
            return []
        return self.commit_records(self.build_records(items, added_date))

    def commit_records(self, records: list[InventoryItemInsert]) -> list[dict]:
        """Resolve product ids for ``records`` and insert them in one batch.

        Raises:
            StoreError: If a product insert or the batch insert fails. Nothing
                from the batch insert is persisted in that case.
        """
        if not records:
            return []

        resolved: dict[str, int] = {}
        created = 0
        for record in records:
            if record.product_id is not None or not record.product_name:
                continue
            name = record.product_name.strip()
            if name in resolved:
                record.product_id = resolved[name]
                continue

            product_id = self._store.find_product_by_name(name)
            if product_id is None:
                product_id = self._store.create_product(name).id
                created += 1
            resolved[name] = product_id
            record.product_id = product_id

        logger.debug(
            "Resolved %d product names (%d created)", len(resolved), created
        )
        return self._store.insert_inventory_items([r.row() for r in records])
