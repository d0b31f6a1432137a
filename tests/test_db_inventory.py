"""Tests for InventoryDB storage operations."""

import pytest

from pantry.db.inventory import InventoryDB
from pantry.errors import StoreError


@pytest.fixture
def db(tmp_path):
    """Create a temporary InventoryDB."""
    inventory = InventoryDB(db_path=tmp_path / "test.db")
    yield inventory
    inventory.close()


def _row(location_id, product_id=None, **overrides):
    row = {
        "product_id": product_id,
        "location_id": location_id,
        "quantity": 1,
        "quantity_type": "units",
        "added_date": "2025-01-10",
        "expiration_date": None,
        "opened_status": False,
    }
    row.update(overrides)
    return row


class TestLocations:
    def test_default_locations(self, db):
        names = [loc.name for loc in db.list_locations()]
        assert names == ["pantry", "fridge", "freezer"]

    def test_locations_ordered_by_display_order(self, db):
        orders = [loc.display_order for loc in db.list_locations()]
        assert orders == sorted(orders)


class TestProducts:
    def test_create_and_find_by_name(self, db):
        product = db.create_product("apple", category="fruit")
        assert product.id is not None
        assert db.find_product_by_name("apple") == product.id

    def test_find_by_name_missing(self, db):
        assert db.find_product_by_name("unicorn") is None

    def test_find_by_name_returns_oldest(self, db):
        first = db.create_product("milk")
        db.create_product("milk")
        assert db.find_product_by_name("milk") == first.id

    def test_barcode_link(self, db):
        product = db.create_product("Nutella", "Spreads", "https://img/x.jpg")
        db.link_barcode("3017620422003", product.id)

        found = db.find_product_by_barcode("3017620422003")
        assert found == product

    def test_barcode_missing(self, db):
        assert db.find_product_by_barcode("000") is None

    def test_duplicate_barcode(self, db):
        product = db.create_product("tea")
        db.link_barcode("123", product.id)
        with pytest.raises(StoreError, match="Failed to link barcode"):
            db.link_barcode("123", product.id)


class TestInventoryItems:
    def test_insert_returns_persisted_rows(self, db):
        apple = db.create_product("apple")
        fridge = db.list_locations()[1]

        rows = db.insert_inventory_items([
            _row(fridge.id, apple.id, quantity=2),
            _row(fridge.id, apple.id, opened_status=True, expiration_date="2025-02-01"),
        ])

        assert len(rows) == 2
        assert rows[0]["quantity"] == 2
        assert rows[0]["location_id"] == fridge.id
        assert rows[0]["opened_status"] is False
        assert rows[1]["opened_status"] is True
        assert rows[1]["expiration_date"] == "2025-02-01"

    def test_insert_is_all_or_nothing(self, db):
        pantry = db.list_locations()[0]
        with pytest.raises(StoreError, match="Failed to create inventory items"):
            db.insert_inventory_items([
                _row(pantry.id),
                _row(9999),
            ])
        assert db.get_inventory() == []

    def test_get_inventory_joins_names(self, db):
        apple = db.create_product("apple")
        locations = db.list_locations()
        db.insert_inventory_items([
            _row(locations[0].id, apple.id),
            _row(locations[2].id, None),
        ])

        items = db.get_inventory()
        assert len(items) == 2
        by_location = {i["location_name"]: i for i in items}
        assert by_location["pantry"]["product_name"] == "apple"
        assert by_location["freezer"]["product_name"] is None

    def test_get_inventory_by_location(self, db):
        locations = db.list_locations()
        db.insert_inventory_items([_row(locations[0].id), _row(locations[1].id)])
        items = db.get_inventory(location_id=locations[1].id)
        assert len(items) == 1
        assert items[0]["location_name"] == "fridge"

    def test_delete_item(self, db):
        pantry = db.list_locations()[0]
        rows = db.insert_inventory_items([_row(pantry.id)])
        assert db.delete_item(rows[0]["id"]) is True
        assert db.get_item(rows[0]["id"]) is None

    def test_delete_missing_item(self, db):
        assert db.delete_item(12345) is False

    def test_update_item(self, db):
        locations = db.list_locations()
        rows = db.insert_inventory_items([_row(locations[0].id, quantity=3)])

        updated = db.update_item(rows[0]["id"], {
            "quantity": 1.5,
            "location_id": locations[1].id,
            "opened_status": True,
            "expiration_date": "2025-02-01",
        })

        assert updated["quantity"] == 1.5
        assert updated["location_id"] == locations[1].id
        assert updated["opened_status"] is True
        assert updated["expiration_date"] == "2025-02-01"
        assert updated["added_date"] == "2025-01-10"

    def test_update_clears_expiration(self, db):
        pantry = db.list_locations()[0]
        rows = db.insert_inventory_items([_row(pantry.id, expiration_date="2025-02-01")])
        updated = db.update_item(rows[0]["id"], {"expiration_date": None})
        assert updated["expiration_date"] is None

    def test_update_ignores_fixed_columns(self, db):
        apple = db.create_product("apple")
        pantry = db.list_locations()[0]
        rows = db.insert_inventory_items([_row(pantry.id, apple.id)])
        updated = db.update_item(rows[0]["id"], {"product_id": 999, "added_date": "2000-01-01"})
        assert updated["product_id"] == apple.id
        assert updated["added_date"] == "2025-01-10"

    def test_update_missing_item(self, db):
        assert db.update_item(12345, {"quantity": 2}) is None

    def test_update_unknown_location(self, db):
        pantry = db.list_locations()[0]
        rows = db.insert_inventory_items([_row(pantry.id)])
        with pytest.raises(StoreError, match="Failed to update inventory item"):
            db.update_item(rows[0]["id"], {"location_id": 9999})
        assert db.get_item(rows[0]["id"])["location_id"] == pantry.id

    def test_empty_insert(self, db):
        assert db.insert_inventory_items([]) == []
