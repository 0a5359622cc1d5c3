"""
Tests for the line item taxonomy
"""
from decimal import Decimal

import pytest

from tireshop.pricing import (
    FlatDiscountItem,
    ItemType,
    ItemValidationError,
    MerchandiseItem,
    PercentageDiscountItem,
    accept_editor_item,
    levy_defaults,
    parse_line_item,
    parse_line_items,
)


class TestParseLineItem:

    def test_merchandise_types_parse_to_merchandise_item(self):
        for item_type in ("TIRE", "SERVICE", "PART", "OTHER", "LEVY"):
            item = parse_line_item({"item_type": item_type, "description": "x", "quantity": 2, "unit_price": "10.00"})
            assert isinstance(item, MerchandiseItem)
            assert item.kind is ItemType(item_type)
            assert not item.is_discount

    def test_unit_price_from_float_has_no_float_artifacts(self):
        item = parse_line_item({"item_type": "TIRE", "description": "Tire", "unit_price": 0.1})
        assert item.unit_price == Decimal("0.1")

    def test_quantity_defaults_to_one(self):
        item = parse_line_item({"item_type": "SERVICE", "description": "Alignment", "unit_price": 89})
        assert item.quantity == 1

    def test_item_type_is_case_insensitive(self):
        item = parse_line_item({"item_type": " tire ", "description": "Tire", "unit_price": 120})
        assert item.item_type == "TIRE"

    def test_cached_total_is_ignored(self):
        item = parse_line_item(
            {"item_type": "TIRE", "description": "Tire", "quantity": 2, "unit_price": 50, "total": 9999}
        )
        assert item.to_dict() == {
            "item_type": "TIRE",
            "description": "Tire",
            "quantity": 2,
            "unit_price": Decimal("50"),
            "reference_id": None,
        }

    def test_flat_discount_stored_negative(self):
        item = parse_line_item({"item_type": "DISCOUNT", "description": "Promo", "unit_price": "-15"})
        assert isinstance(item, FlatDiscountItem)
        assert item.amount_off == Decimal("15")
        assert item.is_discount

    def test_percentage_discount(self):
        item = parse_line_item({"item_type": "DISCOUNT_PERCENTAGE", "description": "10% off", "unit_price": 10})
        assert isinstance(item, PercentageDiscountItem)
        assert item.percentage == Decimal("10")
        assert item.is_discount

    def test_validated_item_passes_through(self):
        item = parse_line_item({"item_type": "PART", "description": "Valve stem", "unit_price": 4})
        assert parse_line_item(item) is item

    @pytest.mark.parametrize("data", [
        {"item_type": "TIRE", "description": "Tire", "unit_price": 0},
        {"item_type": "TIRE", "description": "Tire", "unit_price": -5},
        {"item_type": "TIRE", "description": "Tire", "quantity": 0, "unit_price": 5},
        {"item_type": "TIRE", "description": "   ", "unit_price": 5},
        {"item_type": "DISCOUNT", "description": "Promo", "unit_price": 15},
        {"item_type": "DISCOUNT_PERCENTAGE", "description": "Too much", "unit_price": 101},
        {"item_type": "DISCOUNT_PERCENTAGE", "description": "Negative", "unit_price": -1},
        {"item_type": "GIFT_CARD", "description": "Unknown", "unit_price": 5},
        {"item_type": "TIRE", "description": "Tire", "unit_price": "abc"},
    ])
    def test_invalid_items_rejected(self, data):
        with pytest.raises(ItemValidationError):
            parse_line_item(data)

    def test_error_names_item_and_field(self):
        with pytest.raises(ItemValidationError) as exc_info:
            parse_line_items([
                {"item_type": "TIRE", "description": "Tire", "unit_price": 100},
                {"item_type": "TIRE", "description": "Tire", "quantity": 0, "unit_price": 100},
            ])
        err = exc_info.value
        assert err.message.startswith("Item 2 is invalid")
        assert [e["field"] for e in err.errors] == ["quantity"]

    def test_percentage_bounds_inclusive(self):
        assert parse_line_item({"item_type": "DISCOUNT_PERCENTAGE", "description": "none", "unit_price": 0}).percentage == 0
        assert parse_line_item({"item_type": "DISCOUNT_PERCENTAGE", "description": "all", "unit_price": 100}).percentage == 100


class TestAcceptEditorItem:

    def test_positive_flat_discount_is_negated(self):
        item = accept_editor_item({"item_type": "DISCOUNT", "description": "Loyalty", "unit_price": "15"})
        assert item.unit_price == Decimal("-15")

    def test_already_negative_flat_discount_stays_negative(self):
        item = accept_editor_item({"item_type": "DISCOUNT", "description": "Loyalty", "unit_price": "-15"})
        assert item.unit_price == Decimal("-15")

    def test_other_types_untouched(self):
        item = accept_editor_item({"item_type": "DISCOUNT_PERCENTAGE", "description": "10%", "unit_price": 10})
        assert item.unit_price == Decimal("10")


class TestLevyDefaults:

    def test_defaults_without_config(self):
        levy = levy_defaults()
        assert levy["item_type"] == "LEVY"
        assert levy["description"] == "ECO Fee"
        assert levy["unit_price"] == Decimal("6.50")

    def test_defaults_from_config(self):
        levy = levy_defaults({"LEVY_DEFAULT_DESCRIPTION": "Tire levy", "LEVY_DEFAULT_UNIT_PRICE": "5.00"})
        assert levy["description"] == "Tire levy"
        assert levy["unit_price"] == Decimal("5.00")
