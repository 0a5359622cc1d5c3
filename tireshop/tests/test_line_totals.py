"""
Tests for the gross base and per-line contributions
"""
from decimal import Decimal

from tireshop.pricing import gross_base, line_total, line_totals, parse_line_items


def items(*rows):
    return parse_line_items([
        {"item_type": t, "description": t.lower(), "quantity": q, "unit_price": p} for t, q, p in rows
    ])


class TestGrossBase:

    def test_empty_list(self):
        assert gross_base([]) == Decimal("0")

    def test_sums_merchandise_only(self):
        doc = items(("TIRE", 4, "120.00"), ("LEVY", 4, "6.50"), ("DISCOUNT", 1, "-20"), ("DISCOUNT_PERCENTAGE", 1, "10"))
        assert gross_base(doc) == Decimal("506.00")

    def test_discount_only_document_has_zero_base(self):
        doc = items(("DISCOUNT_PERCENTAGE", 1, "10"), ("DISCOUNT", 1, "-5"))
        assert gross_base(doc) == Decimal("0")


class TestLineTotal:

    def test_merchandise_is_quantity_times_price(self):
        doc = items(("TIRE", 2, "50.00"))
        assert line_total(doc[0], doc) == Decimal("100.00")

    def test_flat_discount_is_negative(self):
        doc = items(("SERVICE", 1, "100"), ("DISCOUNT", 1, "-15"))
        assert line_total(doc[1], doc) == Decimal("-15")

    def test_percentage_discount_measured_against_gross_base(self):
        doc = items(("SERVICE", 1, "100"), ("DISCOUNT", 1, "-40"), ("DISCOUNT_PERCENTAGE", 1, "10"))
        # the flat discount does not shrink the base
        assert line_total(doc[2], doc) == Decimal("-10")

    def test_percentage_discount_on_empty_base_is_zero(self):
        doc = items(("DISCOUNT_PERCENTAGE", 1, "25"))
        assert line_total(doc[0], doc) == Decimal("0")

    def test_percentage_discount_ignores_quantity(self):
        doc = items(("SERVICE", 1, "100"), ("DISCOUNT_PERCENTAGE", 3, "10"))
        assert line_total(doc[1], doc) == Decimal("-10")

    def test_line_totals_in_list_order(self):
        doc = items(("SERVICE", 1, "100"), ("DISCOUNT_PERCENTAGE", 1, "10"), ("DISCOUNT_PERCENTAGE", 1, "10"))
        assert line_totals(doc) == [Decimal("100"), Decimal("-10"), Decimal("-10")]
