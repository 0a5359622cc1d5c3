import logging
from tireshop.pricing import PercentageDiscountItem, compute_totals, line_totals
from tireshop.pricing.money import format_rate, quantize_cents
from tireshop.utils.timezone_utils import display_date
from .models import DocumentKind, PrintableDocument, PrintableLine

logger = logging.getLogger(__name__)


def _printable_lines(items):
    lines = []
    # percentage discounts are re-derived: quantity x unit_price would print the percentage
    for item, amount in zip(items, line_totals(items)):
        is_percentage = isinstance(item, PercentageDiscountItem)
        lines.append(PrintableLine(
            item_type=item.item_type,
            description=item.description,
            quantity=item.quantity,
            unit_price=None if is_percentage else item.unit_price,
            percentage=item.percentage if is_percentage else None,
            amount=quantize_cents(amount),
        ))
    return lines


def _build(document, kind, number, **extra):
    items = document.line_items()
    totals = compute_totals(items, document.gst_rate, document.pst_rate).rounded()
    if totals.total != document.total:
        # stored figures are stale or were written outside PricingService
        logger.warning(
            f"{kind.value} {number}: stored total {document.total} differs from recomputed {totals.total}"
        )
    return PrintableDocument(
        kind=kind,
        number=number,
        issued_on=display_date(document.created_at),
        status=document.status,
        customer_name=document.customer_name,
        vehicle_ref=document.vehicle_ref,
        notes=document.notes,
        lines=_printable_lines(items),
        gst_rate=document.gst_rate,
        pst_rate=document.pst_rate,
        gst_label=f"GST ({format_rate(document.gst_rate)})",
        pst_label=f"PST ({format_rate(document.pst_rate)})",
        **totals.as_dict(),
        **extra,
    )


def build_printable_invoice(invoice):
    return _build(
        invoice,
        DocumentKind.INVOICE,
        invoice.invoice_number,
        payment_method=invoice.payment_method,
    )


def build_printable_quotation(quotation):
    return _build(
        quotation,
        DocumentKind.QUOTATION,
        quotation.quotation_number,
        business_name=quotation.business_name,
        valid_until=display_date(quotation.valid_until),
    )
