"""
Tests for the totals assembler
"""
import random
from decimal import Decimal

import pytest

from tireshop.pricing import Totals, base_from_total, compute_totals, format_tax_breakdown, parse_line_items
from tireshop.pricing.totals import EMPTY_TOTALS


def items(*rows):
    return parse_line_items([
        {"item_type": t, "description": t.lower(), "quantity": q, "unit_price": p} for t, q, p in rows
    ])


class TestComputeTotals:

    def test_tax_computation(self):
        totals = compute_totals(items(("SERVICE", 1, 100), ("TIRE", 2, 50)), "0.05", "0.07")
        assert totals.subtotal == 200
        assert totals.gst_amount == 10
        assert totals.pst_amount == 14
        assert totals.total_tax == 24
        assert totals.total == 224

    def test_no_discount_additivity(self):
        doc = items(("TIRE", 4, "129.99"), ("SERVICE", 1, "89.95"), ("LEVY", 4, "6.50"), ("PART", 3, "4.25"))
        expected = sum(item.quantity * item.unit_price for item in doc)
        assert compute_totals(doc, 0, 0).subtotal == expected

    def test_single_percentage_discount(self):
        assert compute_totals(items(("SERVICE", 1, 100), ("DISCOUNT_PERCENTAGE", 1, 10)), 0, 0).subtotal == 90

    def test_percentage_discounts_do_not_compound(self):
        doc = items(("SERVICE", 1, 100), ("DISCOUNT_PERCENTAGE", 1, 10), ("DISCOUNT_PERCENTAGE", 1, 10))
        assert compute_totals(doc, 0, 0).subtotal == 80

    def test_flat_discount(self):
        assert compute_totals(items(("SERVICE", 1, 100), ("DISCOUNT", 1, -15)), 0, 0).subtotal == 85

    def test_empty_list(self):
        assert compute_totals([], "0.05", "0.07") == EMPTY_TOTALS

    def test_idempotent(self):
        doc = items(("TIRE", 4, "129.99"), ("DISCOUNT_PERCENTAGE", 1, "7.5"), ("DISCOUNT", 1, "-20"))
        assert compute_totals(doc, "0.05", "0.07") == compute_totals(doc, "0.05", "0.07")

    def test_order_independent(self):
        doc = items(
            ("TIRE", 4, "129.99"),
            ("DISCOUNT_PERCENTAGE", 1, "7.5"),
            ("SERVICE", 1, "89.95"),
            ("DISCOUNT", 1, "-20"),
            ("LEVY", 4, "6.50"),
        )
        expected = compute_totals(doc, "0.05", "0.07")
        shuffled = list(doc)
        random.Random(7).shuffle(shuffled)
        assert compute_totals(shuffled, "0.05", "0.07") == expected

    def test_over_discount_gives_negative_totals(self):
        totals = compute_totals(items(("SERVICE", 1, 50), ("DISCOUNT", 1, -80)), "0.05", "0.07")
        assert totals.subtotal == -30
        assert totals.gst_amount == Decimal("-1.5")
        assert totals.total < 0

    def test_zero_rates(self):
        totals = compute_totals(items(("TIRE", 2, 50)), 0, 0)
        assert totals.total_tax == 0
        assert totals.total == totals.subtotal

    def test_rates_accept_floats_without_artifacts(self):
        totals = compute_totals(items(("SERVICE", 1, 100)), 0.05, 0.07)
        assert totals.gst_amount == Decimal("5.00")
        assert totals.pst_amount == Decimal("7.00")


class TestRoundedTotals:

    def test_parts_rounded_independently(self):
        totals = compute_totals(items(("PART", 1, "10.05")), "0.05", "0.07").rounded()
        # 0.5025 -> 0.50, 0.7035 -> 0.70
        assert totals.gst_amount == Decimal("0.50")
        assert totals.pst_amount == Decimal("0.70")
        assert totals.total_tax == Decimal("1.20")
        assert totals.total == Decimal("11.25")

    def test_half_cent_rounds_up(self):
        totals = compute_totals(items(("PART", 1, "0.10")), "0.05", "0")
        assert totals.rounded().gst_amount == Decimal("0.01")

    def test_rounded_totals_add_up(self):
        doc = items(("TIRE", 3, "133.33"), ("DISCOUNT_PERCENTAGE", 1, "12.5"))
        totals = compute_totals(doc, "0.05", "0.07").rounded()
        assert totals.total_tax == totals.gst_amount + totals.pst_amount
        assert totals.total == totals.subtotal + totals.total_tax


class TestDifferences:

    def test_matching_totals(self):
        totals = Totals.from_parts(Decimal("200.00"), Decimal("10.00"), Decimal("14.00"))
        assert totals.differences({"subtotal": "200", "total": 224.0}) == {}

    def test_one_cent_tolerance(self):
        totals = Totals.from_parts(Decimal("200.00"), Decimal("10.00"), Decimal("14.00"))
        assert totals.differences({"total": "224.01"}) == {}
        assert "total" in totals.differences({"total": "224.02"})

    def test_missing_fields_are_skipped(self):
        totals = Totals.from_parts(Decimal("200.00"), Decimal("10.00"), Decimal("14.00"))
        assert totals.differences({"subtotal": None}) == {}


class TestHelpers:

    @pytest.mark.parametrize("total, expected", [
        ("224.00", Decimal("200.00")),
        ("112", Decimal("100.00")),
        (0, Decimal("0.00")),
    ])
    def test_base_from_total(self, total, expected):
        assert base_from_total(total, "0.05", "0.07") == expected

    def test_format_tax_breakdown(self):
        totals = compute_totals(items(("SERVICE", 1, 100), ("TIRE", 2, 50)), "0.05", "0.07")
        assert format_tax_breakdown(totals, Decimal("0.05"), Decimal("0.07")) == (
            "Subtotal: $200.00\n"
            "GST (5%): $10.00\n"
            "PST (7%): $14.00\n"
            "Total: $224.00"
        )

    def test_format_tax_breakdown_without_pst(self):
        totals = compute_totals(items(("SERVICE", 1, 1000)), "0.05", "0")
        assert format_tax_breakdown(totals, "0.05") == "Subtotal: $1,000.00\nGST (5%): $50.00\nTotal: $1,050.00"
