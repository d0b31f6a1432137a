"""Inventory, product and location storage operations."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

from ..errors import StoreError
from ..models import Location, ProductInfo
from .schema import ensure_schema

logger = logging.getLogger(__name__)

_ITEM_COLUMNS = (
    "product_id",
    "location_id",
    "quantity",
    "quantity_type",
    "added_date",
    "expiration_date",
    "opened_status",
)

# product_id and added_date are fixed once an item exists
_UPDATABLE_COLUMNS = (
    "location_id",
    "quantity",
    "quantity_type",
    "expiration_date",
    "opened_status",
)


class InventoryDB:
    """Manages the locations, products, product_barcodes and inventory_items tables."""

    def __init__(self, db_path: str | Path = "~/.config/pantry/inventory.db") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # -- locations -----------------------------------------------------

    def list_locations(self) -> list[Location]:
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT id, name, display_order FROM locations ORDER BY display_order"
        ).fetchall()
        return [Location(id=r["id"], name=r["name"], display_order=r["display_order"]) for r in rows]

    # -- products ------------------------------------------------------

    def find_product_by_name(self, name: str) -> int | None:
        """Return the id of the oldest product with exactly this name."""
        conn = self._get_conn()
        row = conn.execute(
            "SELECT id FROM products WHERE name = ? ORDER BY id LIMIT 1",
            (name,),
        ).fetchone()
        return row["id"] if row else None

    def create_product(
        self,
        name: str,
        category: str | None = None,
        image_url: str | None = None,
    ) -> ProductInfo:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "INSERT INTO products (name, category, image_url) VALUES (?, ?, ?)",
                (name, category, image_url),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError("Failed to create product", e) from e
        return ProductInfo(id=cur.lastrowid, name=name, category=category, image_url=image_url)

    def find_product_by_barcode(self, barcode: str) -> ProductInfo | None:
        conn = self._get_conn()
        row = conn.execute(
            """SELECT p.id, p.name, p.category, p.image_url
               FROM product_barcodes pb
               JOIN products p ON p.id = pb.product_id
               WHERE pb.barcode = ?""",
            (barcode,),
        ).fetchone()
        if row is None:
            return None
        return ProductInfo(
            id=row["id"],
            name=row["name"],
            category=row["category"],
            image_url=row["image_url"],
        )

    def link_barcode(self, barcode: str, product_id: int) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT INTO product_barcodes (barcode, product_id) VALUES (?, ?)",
                (barcode, product_id),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError("Failed to link barcode", e) from e

    # -- inventory items -----------------------------------------------

    def insert_inventory_items(self, rows: list[dict[str, Any]]) -> list[dict]:
        """Insert all rows in one transaction and return the persisted rows.

        Either every row is written or none is.

        Raises:
            StoreError: If any insert fails.
        """
        conn = self._get_conn()
        ids: list[int] = []
        placeholders = ", ".join("?" for _ in _ITEM_COLUMNS)
        sql = (
            f"INSERT INTO inventory_items ({', '.join(_ITEM_COLUMNS)}) "
            f"VALUES ({placeholders})"
        )
        try:
            with conn:
                for row in rows:
                    values = [row.get(col) for col in _ITEM_COLUMNS]
                    cur = conn.execute(sql, values)
                    ids.append(cur.lastrowid)
        except sqlite3.Error as e:
            raise StoreError("Failed to create inventory items", e) from e

        logger.info("Inserted %d inventory items", len(ids))
        return [self.get_item(item_id) for item_id in ids]

    def get_item(self, item_id: int) -> dict | None:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT * FROM inventory_items WHERE id = ?", (item_id,)
        ).fetchone()
        return _item_dict(row) if row else None

    def get_inventory(self, location_id: int | None = None) -> list[dict]:
        """Return inventory rows with product and location names, newest first."""
        conn = self._get_conn()
        sql = """SELECT i.*, p.name AS product_name, p.category AS product_category,
                        l.name AS location_name
                 FROM inventory_items i
                 LEFT JOIN products p ON p.id = i.product_id
                 JOIN locations l ON l.id = i.location_id"""
        params: tuple = ()
        if location_id is not None:
            sql += " WHERE i.location_id = ?"
            params = (location_id,)
        sql += " ORDER BY i.created_at DESC, i.id DESC"
        return [_item_dict(r) for r in conn.execute(sql, params).fetchall()]

    def update_item(self, item_id: int, fields: dict[str, Any]) -> dict | None:
        """Update the given columns of one item.

        Returns the updated row, or None if no item has this id.

        Raises:
            StoreError: If the update fails (e.g. an unknown location_id).
        """
        columns = [col for col in _UPDATABLE_COLUMNS if col in fields]
        if not columns:
            return self.get_item(item_id)

        conn = self._get_conn()
        assignments = ", ".join(f"{col} = ?" for col in columns)
        values = [fields[col] for col in columns]
        try:
            cur = conn.execute(
                f"UPDATE inventory_items SET {assignments}, "
                "updated_at = datetime('now') WHERE id = ?",
                (*values, item_id),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError("Failed to update inventory item", e) from e

        if cur.rowcount == 0:
            return None
        return self.get_item(item_id)

    def delete_item(self, item_id: int) -> bool:
        """Delete an inventory item by ID. Returns False if there was none."""
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM inventory_items WHERE id = ?", (item_id,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError("Failed to delete inventory item", e) from e
        return cur.rowcount > 0


def _item_dict(row: sqlite3.Row) -> dict:
    data = dict(row)
    data["opened_status"] = bool(data["opened_status"])
    return data
