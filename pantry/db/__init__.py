"""SQLite store for locations, products and inventory items."""

from .inventory import InventoryDB
from .schema import ensure_schema

__all__ = [
    "InventoryDB",
    "ensure_schema",
]
