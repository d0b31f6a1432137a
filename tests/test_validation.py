"""Tests for candidate and request validation."""

import json

import pytest

from pantry.errors import ValidationError
from pantry.models import QUANTITY_TYPES, ParsedItem
from pantry.validation import (
    validate_barcode_request,
    validate_batch_request,
    validate_expiration_request,
    validate_item,
    validate_items,
    validate_parse_request,
    validate_update_request,
)

GROCERY_REPLY = json.loads(
    '[{"productName":"apple","quantity":2,"quantityType":"units",'
    '"locationName":"pantry","openedStatus":false},'
    '{"productName":"milk","quantity":1,"quantityType":"volume",'
    '"locationName":"fridge","openedStatus":false},'
    '{"productName":"pickles","quantity":1,"quantityType":"units",'
    '"locationName":"pantry","openedStatus":true}]'
)


class TestValidateItems:
    def test_grocery_scenario_preserved(self):
        items = validate_items(GROCERY_REPLY)
        assert len(items) == 3
        assert [i.to_dict() for i in items] == GROCERY_REPLY

    def test_drops_missing_and_blank_names(self):
        candidates = [
            {"productName": "eggs"},
            {"quantity": 3},
            {"productName": "   "},
            {"productName": 42},
            {"productName": "bread"},
        ]
        items = validate_items(candidates)
        assert len(items) == len(candidates) - 3
        assert [i.product_name for i in items] == ["eggs", "bread"]

    def test_drops_non_records(self):
        items = validate_items(["apple", None, 3, ["x"], {"productName": "kiwi"}])
        assert [i.product_name for i in items] == ["kiwi"]

    def test_trims_product_name(self):
        assert validate_items([{"productName": "  oats "}])[0].product_name == "oats"

    @pytest.mark.parametrize("value", ["bags", "", None, 3, "UNITS"])
    def test_invalid_quantity_type_falls_back_to_units(self, value):
        item = validate_item({"productName": "rice", "quantityType": value})
        assert item.quantity_type == "units"

    def test_quantity_type_always_known(self):
        candidates = [
            {"productName": f"p{i}", "quantityType": qt}
            for i, qt in enumerate(["weight", "litres", "percentage", None, "volume"])
        ]
        assert all(i.quantity_type in QUANTITY_TYPES for i in validate_items(candidates))

    @pytest.mark.parametrize("value", [0, -2, "3", None, True, float("nan")])
    def test_quantity_defaults_to_one(self, value):
        item = validate_item({"productName": "tuna", "quantity": value})
        assert item.quantity == 1

    def test_fractional_quantity_kept(self):
        assert validate_item({"productName": "flour", "quantity": 2.5}).quantity == 2.5

    def test_location_lowercased_and_defaulted(self):
        assert validate_item({"productName": "a", "locationName": " Freezer "}).location_name == "freezer"
        assert validate_item({"productName": "a", "locationName": "  "}).location_name == "pantry"
        assert validate_item({"productName": "a"}).location_name == "pantry"

    def test_opened_status_requires_bool(self):
        assert validate_item({"productName": "a", "openedStatus": True}).opened_status is True
        assert validate_item({"productName": "a", "openedStatus": "yes"}).opened_status is False

    @pytest.mark.parametrize(
        "value", ["2024/01/05", "next week", "24-01-05", "2024-1-5", "2024-01-05\n", 20240105]
    )
    def test_bad_expiration_dropped(self, value):
        item = validate_item({"productName": "yogurt", "expirationDate": value})
        assert item.expiration_date is None
        assert "expirationDate" not in item.to_dict()

    def test_expiration_shape_only(self):
        """Calendar-invalid dates with the right shape are accepted."""
        item = validate_item({"productName": "yogurt", "expirationDate": "2024-02-31"})
        assert item.expiration_date == "2024-02-31"
        assert item.to_dict()["expirationDate"] == "2024-02-31"

    def test_order_preserved(self):
        names = ["c", "a", "b"]
        items = validate_items([{"productName": n} for n in names])
        assert [i.product_name for i in items] == names


class TestRequestValidation:
    def test_parse_request(self):
        assert validate_parse_request({"text": "2 apples"}) == "2 apples"

    @pytest.mark.parametrize("body", [None, [], {"text": ""}, {"text": "  "}, {"text": 5}, {}])
    def test_parse_request_invalid(self, body):
        with pytest.raises(ValidationError, match="text"):
            validate_parse_request(body)

    def test_expiration_request(self):
        req = validate_expiration_request(
            {"productName": "milk", "locationName": "fridge", "openedStatus": False}
        )
        assert req.product_name == "milk"
        assert req.category is None

    @pytest.mark.parametrize(
        "body",
        [
            {"productName": "milk", "locationName": "fridge"},
            {"productName": "milk", "locationName": "", "openedStatus": True},
            {"productName": "milk", "locationName": "fridge", "openedStatus": "no"},
            {"productName": "milk", "locationName": "fridge", "openedStatus": True, "category": 1},
        ],
    )
    def test_expiration_request_invalid(self, body):
        with pytest.raises(ValidationError):
            validate_expiration_request(body)

    def test_barcode_request_trims(self):
        assert validate_barcode_request({"barcode": " 0123 "}) == "0123"

    def test_barcode_request_invalid(self):
        with pytest.raises(ValidationError, match="barcode"):
            validate_barcode_request({"barcode": " "})


class TestBatchRequest:
    def _item(self, **overrides):
        item = {
            "quantity": 2,
            "quantity_type": "units",
            "location_id": 1,
            "productName": "apple",
        }
        item.update(overrides)
        return item

    def test_valid_batch(self):
        records = validate_batch_request({"items": [self._item()]}, today="2025-01-10")
        assert len(records) == 1
        assert records[0].product_name == "apple"
        assert records[0].added_date == "2025-01-10"
        assert records[0].opened_status is False

    def test_product_id_instead_of_name(self):
        records = validate_batch_request(
            {"items": [self._item(productName=None, product_id=7)]}, today="2025-01-10"
        )
        assert records[0].product_id == 7
        assert records[0].product_name is None

    @pytest.mark.parametrize(
        "overrides",
        [
            {"quantity": 0},
            {"quantity_type": "bags"},
            {"location_id": "1"},
            {"productName": None},
            {"expiration_date": "soon"},
            {"opened_status": "yes"},
        ],
    )
    def test_bad_record_rejects_whole_batch(self, overrides):
        with pytest.raises(ValidationError, match=r"items\[1\]"):
            validate_batch_request(
                {"items": [self._item(), self._item(**overrides)]}, today="2025-01-10"
            )

    def test_empty_batch(self):
        with pytest.raises(ValidationError):
            validate_batch_request({"items": []}, today="2025-01-10")


def test_parsed_item_round_trip_dict():
    item = ParsedItem(product_name="milk", quantity=1, quantity_type="volume",
                      location_name="fridge", expiration_date="2025-02-01")
    assert ParsedItem.from_dict(item.to_dict()) == item


class TestUpdateRequest:
    def test_partial_update(self):
        fields = validate_update_request({"quantity": 0.5, "opened_status": True})
        assert fields == {"quantity": 0.5, "opened_status": True}

    def test_clear_expiration(self):
        assert validate_update_request({"expiration_date": None}) == {"expiration_date": None}

    @pytest.mark.parametrize(
        "body, message",
        [
            ({}, "Provide one or more"),
            ([], "Provide one or more"),
            ({"product_id": 3}, "Unknown fields: product_id"),
            ({"quantity": 0}, "quantity"),
            ({"quantity": True}, "quantity"),
            ({"quantity_type": "cups"}, "quantity_type"),
            ({"location_id": "2"}, "location_id"),
            ({"expiration_date": "tomorrow"}, "expiration_date"),
            ({"opened_status": "yes"}, "opened_status"),
        ],
    )
    def test_rejects_bad_fields(self, body, message):
        with pytest.raises(ValidationError, match=message):
            validate_update_request(body)
