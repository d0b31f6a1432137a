"""Data models for parsed inventory items and store records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

QUANTITY_TYPES: tuple[str, ...] = ("units", "volume", "weight", "percentage")
CONFIDENCE_LEVELS: tuple[str, ...] = ("HIGH", "MEDIUM", "LOW")

DEFAULT_LOCATION = "pantry"
DEFAULT_QUANTITY_TYPE = "units"


@dataclass
class ParsedItem:
    """A validated, normalized item waiting for review."""

    product_name: str
    quantity: float = 1
    quantity_type: str = DEFAULT_QUANTITY_TYPE
    location_name: str = DEFAULT_LOCATION
    expiration_date: str | None = None
    opened_status: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase wire shape (no expirationDate when unset)."""
        data: dict[str, Any] = {
            "productName": self.product_name,
            "quantity": self.quantity,
            "quantityType": self.quantity_type,
            "locationName": self.location_name,
            "openedStatus": self.opened_status,
        }
        if self.expiration_date is not None:
            data["expirationDate"] = self.expiration_date
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ParsedItem:
        return cls(
            product_name=data["productName"],
            quantity=data.get("quantity", 1),
            quantity_type=data.get("quantityType", DEFAULT_QUANTITY_TYPE),
            location_name=data.get("locationName", DEFAULT_LOCATION),
            expiration_date=data.get("expirationDate"),
            opened_status=data.get("openedStatus", False),
        )


@dataclass
class InventoryItemInsert:
    """Insert-shaped inventory row.

    Either ``product_id`` or ``product_name`` identifies the product; the
    committer resolves names to ids before writing.
    """

    quantity: float
    quantity_type: str
    location_id: int
    added_date: str
    expiration_date: str | None = None
    opened_status: bool = False
    product_id: int | None = None
    product_name: str | None = None

    def row(self) -> dict[str, Any]:
        return {
            "quantity": self.quantity,
            "quantity_type": self.quantity_type,
            "location_id": self.location_id,
            "product_id": self.product_id,
            "added_date": self.added_date,
            "expiration_date": self.expiration_date,
            "opened_status": self.opened_status,
        }


@dataclass
class Location:
    id: int
    name: str
    display_order: int = 0


@dataclass
class ProductInfo:
    """Product as returned by the barcode lookup."""

    id: int
    name: str
    category: str | None = None
    image_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "image_url": self.image_url,
        }


@dataclass
class ExpirationRequest:
    product_name: str
    location_name: str
    opened_status: bool
    category: str | None = None


@dataclass
class ExpirationEstimate:
    expiration_date: str  # YYYY-MM-DD
    days_until_expiration: int
    confidence_level: str  # HIGH / MEDIUM / LOW

    def to_dict(self) -> dict[str, Any]:
        return {
            "expirationDate": self.expiration_date,
            "daysUntilExpiration": self.days_until_expiration,
            "confidenceLevel": self.confidence_level,
        }


@dataclass
class ReviewSummary:
    approved: list[ParsedItem] = field(default_factory=list)
    rejected: list[ParsedItem] = field(default_factory=list)
    pending: int = 0
