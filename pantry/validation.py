"""Validation of caller requests and model-extracted candidate records."""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from .errors import ValidationError
from .models import (
    DEFAULT_LOCATION,
    DEFAULT_QUANTITY_TYPE,
    QUANTITY_TYPES,
    ExpirationRequest,
    InventoryItemInsert,
    ParsedItem,
)

logger = logging.getLogger(__name__)

# Shape only; calendar validity is not checked.
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _non_blank(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_item(candidate: Any) -> ParsedItem | None:
    """Normalize one candidate record, or return None if it must be dropped."""
    if not isinstance(candidate, dict):
        return None

    name = candidate.get("productName")
    if not _non_blank(name):
        return None

    quantity = candidate.get("quantity")
    if not _is_number(quantity) or quantity <= 0:
        quantity = 1

    quantity_type = candidate.get("quantityType")
    if quantity_type not in QUANTITY_TYPES:
        quantity_type = DEFAULT_QUANTITY_TYPE

    location = candidate.get("locationName")
    if _non_blank(location):
        location = location.strip().lower()
    else:
        location = DEFAULT_LOCATION

    opened = candidate.get("openedStatus")
    if not isinstance(opened, bool):
        opened = False

    expiration = candidate.get("expirationDate")
    if not (isinstance(expiration, str) and _DATE_RE.fullmatch(expiration)):
        expiration = None

    return ParsedItem(
        product_name=name.strip(),
        quantity=quantity,
        quantity_type=quantity_type,
        location_name=location,
        expiration_date=expiration,
        opened_status=opened,
    )


def validate_items(candidates: list[Any]) -> list[ParsedItem]:
    """Filter and coerce extracted candidates into ParsedItems.

    Candidates that are not records or lack a usable ``productName`` are
    skipped. Every other field falls back to its default. Input order is
    preserved.
    """
    items: list[ParsedItem] = []
    for index, candidate in enumerate(candidates):
        item = validate_item(candidate)
        if item is None:
            logger.debug("Dropping candidate %d: %r", index, candidate)
            continue
        items.append(item)
    return items


def validate_parse_request(body: Any) -> str:
    if not isinstance(body, dict) or not _non_blank(body.get("text")):
        raise ValidationError(
            "Invalid request body. Required: text (string, non-empty)"
        )
    return body["text"]


def validate_expiration_request(body: Any) -> ExpirationRequest:
    ok = (
        isinstance(body, dict)
        and _non_blank(body.get("productName"))
        and _non_blank(body.get("locationName"))
        and isinstance(body.get("openedStatus"), bool)
        and (body.get("category") is None or isinstance(body.get("category"), str))
    )
    if not ok:
        raise ValidationError(
            "Invalid request body. Required: productName (string), "
            "locationName (string), openedStatus (boolean). "
            "Optional: category (string)"
        )
    return ExpirationRequest(
        product_name=body["productName"],
        location_name=body["locationName"],
        opened_status=body["openedStatus"],
        category=body.get("category"),
    )


def validate_barcode_request(body: Any) -> str:
    if not isinstance(body, dict) or not _non_blank(body.get("barcode")):
        raise ValidationError(
            "Invalid request body. Required: barcode (non-empty string)"
        )
    return body["barcode"].strip()


def validate_batch_request(body: Any, today: str) -> list[InventoryItemInsert]:
    """Validate insert-shaped records for the batch commit boundary.

    Each record needs a positive ``quantity``, a known ``quantity_type``, an
    integer ``location_id`` and either ``product_id`` or ``productName``.
    Unlike model output, a bad record fails the whole request.
    """
    if not isinstance(body, dict) or not isinstance(body.get("items"), list):
        raise ValidationError("Invalid request body. Required: items (array)")
    if not body["items"]:
        raise ValidationError("Invalid request body. items must not be empty")

    records: list[InventoryItemInsert] = []
    for index, raw in enumerate(body["items"]):
        if not isinstance(raw, dict):
            raise ValidationError(f"items[{index}] must be an object")

        quantity = raw.get("quantity")
        if not _is_number(quantity) or quantity <= 0:
            raise ValidationError(f"items[{index}].quantity must be a positive number")
        if raw.get("quantity_type") not in QUANTITY_TYPES:
            raise ValidationError(
                f"items[{index}].quantity_type must be one of {', '.join(QUANTITY_TYPES)}"
            )
        location_id = raw.get("location_id")
        if isinstance(location_id, bool) or not isinstance(location_id, int):
            raise ValidationError(f"items[{index}].location_id must be an integer")

        product_id = raw.get("product_id")
        product_name = raw.get("productName")
        if product_id is not None and (
            isinstance(product_id, bool) or not isinstance(product_id, int)
        ):
            raise ValidationError(f"items[{index}].product_id must be an integer")
        if product_id is None and not _non_blank(product_name):
            raise ValidationError(
                f"items[{index}] requires product_id or productName"
            )

        expiration = raw.get("expiration_date")
        if expiration is not None and not (
            isinstance(expiration, str) and _DATE_RE.fullmatch(expiration)
        ):
            raise ValidationError(f"items[{index}].expiration_date must be YYYY-MM-DD")

        added = raw.get("added_date") or today
        if not (isinstance(added, str) and _DATE_RE.fullmatch(added)):
            raise ValidationError(f"items[{index}].added_date must be YYYY-MM-DD")

        opened = raw.get("opened_status", False)
        if not isinstance(opened, bool):
            raise ValidationError(f"items[{index}].opened_status must be a boolean")

        records.append(
            InventoryItemInsert(
                quantity=quantity,
                quantity_type=raw["quantity_type"],
                location_id=location_id,
                added_date=added,
                expiration_date=expiration,
                opened_status=opened,
                product_id=product_id,
                product_name=product_name.strip() if _non_blank(product_name) else None,
            )
        )
    return records


_UPDATE_FIELDS = (
    "quantity",
    "quantity_type",
    "location_id",
    "expiration_date",
    "opened_status",
)


def validate_update_request(body: Any) -> dict[str, Any]:
    """Validate a partial inventory item update.

    Only the fields present are checked; ``expiration_date`` may be null to
    clear it.
    """
    if not isinstance(body, dict) or not body:
        raise ValidationError(
            f"Invalid request body. Provide one or more of: {', '.join(_UPDATE_FIELDS)}"
        )
    unknown = sorted(set(body) - set(_UPDATE_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown fields: {', '.join(unknown)}")

    if "quantity" in body:
        quantity = body["quantity"]
        if not _is_number(quantity) or quantity <= 0:
            raise ValidationError("quantity must be a positive number")
    if "quantity_type" in body and body["quantity_type"] not in QUANTITY_TYPES:
        raise ValidationError(
            f"quantity_type must be one of {', '.join(QUANTITY_TYPES)}"
        )
    if "location_id" in body:
        location_id = body["location_id"]
        if isinstance(location_id, bool) or not isinstance(location_id, int):
            raise ValidationError("location_id must be an integer")
    if "expiration_date" in body:
        expiration = body["expiration_date"]
        if expiration is not None and not (
            isinstance(expiration, str) and _DATE_RE.fullmatch(expiration)
        ):
            raise ValidationError("expiration_date must be YYYY-MM-DD or null")
    if "opened_status" in body and not isinstance(body["opened_status"], bool):
        raise ValidationError("opened_status must be a boolean")
    return dict(body)
