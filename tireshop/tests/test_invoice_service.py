"""
Tests for invoice persistence: totals are always recomputed on the server
"""
from decimal import Decimal

import pytest

from tireshop.models.invoice import Invoice, InvoiceStatus
from tireshop.pricing import ItemValidationError
from tireshop.services.errors import InvalidStateError, NotFoundError, TotalsMismatchError
from tireshop.services.invoice_service import InvoiceService
from tireshop.utils.timezone_utils import display_date, utc_now

LINES = [
    {"item_type": "SERVICE", "description": "Mount and balance", "quantity": 1, "unit_price": Decimal("100")},
    {"item_type": "TIRE", "description": "Winter tire", "quantity": 2, "unit_price": Decimal("50")},
]


def invoice_data(**overrides):
    data = {"customer_name": "Jordan Lee", "items": [dict(line) for line in LINES]}
    data.update(overrides)
    return data


class TestCreateInvoice:

    def test_totals_are_computed_server_side(self, app):
        invoice = InvoiceService.create(invoice_data())
        assert invoice.subtotal == Decimal("200.00")
        assert invoice.gst_amount == Decimal("10.00")
        assert invoice.pst_amount == Decimal("14.00")
        assert invoice.tax_amount == Decimal("24.00")
        assert invoice.total == Decimal("224.00")
        assert [item.total for item in invoice.items] == [Decimal("100.00"), Decimal("100.00")]
        assert invoice.status == InvoiceStatus.PENDING.value

    def test_client_row_totals_are_ignored(self, app):
        data = invoice_data()
        data["items"][0]["total"] = Decimal("1.00")
        invoice = InvoiceService.create(data)
        assert invoice.items[0].total == Decimal("100.00")

    def test_matching_client_totals_accepted(self, app):
        invoice = InvoiceService.create(invoice_data(totals={"subtotal": "200.00", "total": "224.00"}))
        assert invoice.total == Decimal("224.00")

    def test_mismatching_client_totals_rejected(self, app):
        with pytest.raises(TotalsMismatchError) as exc_info:
            InvoiceService.create(invoice_data(totals={"total": "230.00"}))
        assert exc_info.value.mismatches["total"] == {"expected": "224.00", "submitted": "230.00"}
        assert Invoice.query.count() == 0

    def test_invalid_item_rejected(self, app):
        data = invoice_data()
        data["items"].append({"item_type": "DISCOUNT", "description": "Promo", "unit_price": Decimal("15")})
        with pytest.raises(ItemValidationError):
            InvoiceService.create(data)
        assert Invoice.query.count() == 0

    def test_cash_invoice_is_untaxed_and_paid(self, app):
        invoice = InvoiceService.create(invoice_data(payment_method="CASH", gst_rate=Decimal("0.05")))
        assert invoice.gst_rate == 0 and invoice.pst_rate == 0
        assert invoice.total == Decimal("200.00")
        assert invoice.status == InvoiceStatus.PAID.value
        assert invoice.paid_at is not None

    def test_draft_status_kept(self, app):
        invoice = InvoiceService.create(invoice_data(status="DRAFT"))
        assert invoice.status == InvoiceStatus.DRAFT.value

    def test_invoice_numbers_are_sequential(self, app):
        first = InvoiceService.create(invoice_data())
        second = InvoiceService.create(invoice_data())
        prefix, sequence = first.invoice_number.rsplit("-", 1)
        assert first.invoice_number.startswith("INV-")
        assert second.invoice_number == f"{prefix}-{int(sequence) + 1:04d}"


class TestUpdateInvoice:

    def test_replacing_items_recomputes(self, app):
        invoice = InvoiceService.create(invoice_data())
        items = [dict(line) for line in LINES] + [
            {"item_type": "DISCOUNT_PERCENTAGE", "description": "10% off", "unit_price": Decimal("10")}
        ]
        invoice = InvoiceService.update(invoice.id, {"items": items})
        assert invoice.subtotal == Decimal("180.00")
        assert invoice.items[2].total == Decimal("-20.00")

    def test_rate_change_recomputes(self, app):
        invoice = InvoiceService.create(invoice_data())
        invoice = InvoiceService.update(invoice.id, {"pst_rate": Decimal("0")})
        assert invoice.total == Decimal("210.00")

    def test_switch_to_cash_and_back(self, app):
        invoice = InvoiceService.create(invoice_data(status="DRAFT", gst_rate=Decimal("0.06")))
        invoice = InvoiceService.update(invoice.id, {"payment_method": "CASH"})
        assert invoice.total == Decimal("200.00")
        invoice = InvoiceService.update(invoice.id, {"payment_method": "CREDIT_CARD"})
        assert invoice.gst_rate == Decimal("0.05")
        assert invoice.total == Decimal("224.00")

    def test_rates_sent_while_leaving_cash_are_kept(self, app):
        invoice = InvoiceService.create(invoice_data(payment_method="CASH", status="PENDING"))
        invoice = InvoiceService.update(invoice.id, {
            "payment_method": "CREDIT_CARD",
            "gst_rate": Decimal("0.06"),
            "pst_rate": Decimal("0"),
        })
        assert invoice.gst_rate == Decimal("0.06")
        assert invoice.pst_rate == 0
        assert invoice.total == Decimal("212.00")

    def test_rates_sent_on_cash_invoice_are_ignored(self, app):
        invoice = InvoiceService.create(invoice_data(payment_method="CASH", status="PENDING"))
        invoice = InvoiceService.update(invoice.id, {"gst_rate": Decimal("0.05")})
        assert invoice.total == Decimal("200.00")

    def test_status_paid_requires_payment(self, app):
        invoice = InvoiceService.create(invoice_data())
        with pytest.raises(InvalidStateError):
            InvoiceService.update(invoice.id, {"status": "PAID"})
        assert InvoiceService.get_by_id(invoice.id).status == InvoiceStatus.PENDING.value

    def test_paid_invoice_is_locked(self, app):
        invoice = InvoiceService.create(invoice_data(payment_method="DEBIT_CARD"))
        with pytest.raises(InvalidStateError):
            InvoiceService.update(invoice.id, {"notes": "late edit"})

    def test_unknown_invoice(self, app):
        with pytest.raises(NotFoundError):
            InvoiceService.update(999, {"notes": "x"})


class TestInvoiceStatus:

    def test_mark_paid_with_cash_zeroes_tax(self, app):
        invoice = InvoiceService.create(invoice_data())
        invoice = InvoiceService.mark_paid(invoice.id, "CASH")
        assert invoice.status == InvoiceStatus.PAID.value
        assert invoice.payment_method == "CASH"
        assert invoice.total == Decimal("200.00")

    def test_mark_paid_twice_rejected(self, app):
        invoice = InvoiceService.create(invoice_data())
        InvoiceService.mark_paid(invoice.id, "CREDIT_CARD")
        with pytest.raises(InvalidStateError):
            InvoiceService.mark_paid(invoice.id, "CREDIT_CARD")

    def test_cancel_pending(self, app):
        invoice = InvoiceService.create(invoice_data())
        assert InvoiceService.cancel(invoice.id).status == InvoiceStatus.CANCELLED.value

    def test_cancel_paid_rejected(self, app):
        invoice = InvoiceService.create(invoice_data(payment_method="CASH"))
        with pytest.raises(InvalidStateError):
            InvoiceService.cancel(invoice.id)

    def test_refund_only_paid(self, app):
        pending = InvoiceService.create(invoice_data())
        with pytest.raises(InvalidStateError):
            InvoiceService.refund(pending.id)
        paid = InvoiceService.create(invoice_data(payment_method="CREDIT_CARD"))
        assert InvoiceService.refund(paid.id).status == InvoiceStatus.REFUNDED.value


class TestSearchAndReports:

    def test_search_by_status_and_name(self, app):
        InvoiceService.create(invoice_data(customer_name="Sam Patel"))
        InvoiceService.create(invoice_data(customer_name="Alex Kim", payment_method="CASH"))
        assert [i.customer_name for i in InvoiceService.search(status="PAID")] == ["Alex Kim"]
        assert [i.customer_name for i in InvoiceService.search(customer_name="pat")] == ["Sam Patel"]

    def test_daily_cash_report_uses_stored_totals(self, app):
        InvoiceService.create(invoice_data(payment_method="CASH"))
        InvoiceService.create(invoice_data(payment_method="CASH", items=[dict(LINES[0])]))
        InvoiceService.create(invoice_data(payment_method="CREDIT_CARD"))
        InvoiceService.create(invoice_data())

        report = InvoiceService.daily_cash_report(display_date(utc_now()))
        assert report["count"] == 2
        assert report["total"] == Decimal("300.00")
