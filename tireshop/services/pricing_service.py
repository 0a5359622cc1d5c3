import logging
from flask import current_app
from tireshop.pricing import (
    PricingSession,
    TaxRatePolicy,
    TaxRates,
    compute_totals,
    levy_defaults,
    line_totals,
    parse_line_items,
)
from tireshop.pricing.money import quantize_cents, quantize_storage
from tireshop.services.errors import TotalsMismatchError

logger = logging.getLogger(__name__)


class PricingService:
    """Glue between the pricing engine, the app config and the ORM models.

    Every path that stores or shows document totals comes through here, so
    the editor preview, the saved record and the printed document are all
    priced by the same functions.
    """

    @staticmethod
    def get_policy() -> TaxRatePolicy:
        return TaxRatePolicy.from_config(current_app.config)

    @staticmethod
    def defaults():
        policy = PricingService.get_policy()
        return {
            'gst_rate': policy.defaults.gst_rate,
            'pst_rate': policy.defaults.pst_rate,
            'levy': levy_defaults(current_app.config),
        }

    @staticmethod
    def preview(data):
        """Price an editor's current state without saving anything.

        ``previous_payment_method`` is what the editor had selected before
        this change; the cash rule needs it to decide whether to restore
        default rates.
        """
        policy = PricingService.get_policy()
        rates = TaxRates.of(
            quantize_storage(data['gst_rate'] if data.get('gst_rate') is not None else policy.defaults.gst_rate),
            quantize_storage(data['pst_rate'] if data.get('pst_rate') is not None else policy.defaults.pst_rate),
        )
        rates = policy.on_payment_method_change(
            data.get('previous_payment_method'), data.get('payment_method'), rates
        )
        session = PricingSession(
            policy=policy,
            items=parse_line_items(PricingService.at_storage_precision(data.get('items'))),
            gst_rate=rates.gst_rate,
            pst_rate=rates.pst_rate,
        )
        # rates were already resolved above; keep the method for the response only
        snapshot = session.snapshot()
        snapshot['payment_method'] = data.get('payment_method')
        return snapshot

    @staticmethod
    def at_storage_precision(rows):
        """Copies of ``rows`` with unit prices rounded to what the item column keeps."""
        normalized = []
        for row in rows or []:
            row = dict(row)
            if row.get('unit_price') is not None:
                try:
                    row['unit_price'] = quantize_storage(row['unit_price'])
                except (ValueError, ArithmeticError):
                    # not a number; the taxonomy reports it against the field
                    pass
            normalized.append(row)
        return normalized

    @staticmethod
    def replace_items(document, item_model, rows):
        """Swap a document's lines for freshly validated ones (stored form)."""
        validated = parse_line_items(PricingService.at_storage_precision(rows))
        document.items.clear()
        for position, item in enumerate(validated):
            document.items.append(item_model(position=position, **item.to_dict()))
        return validated

    @staticmethod
    def recompute(document, submitted_totals=None):
        """Re-price ``document`` from its own items and rates and store the result.

        Raises TotalsMismatchError when the caller also sent totals and they
        do not match what the server computed.
        """
        # price exactly what the columns hand back after a reload
        document.gst_rate = quantize_storage(document.gst_rate)
        document.pst_rate = quantize_storage(document.pst_rate)
        for row in document.items:
            row.unit_price = quantize_storage(row.unit_price)

        items = document.line_items()
        totals = compute_totals(items, document.gst_rate, document.pst_rate).rounded()

        if submitted_totals:
            mismatches = totals.differences(submitted_totals)
            if mismatches:
                logger.warning(f"Submitted totals do not match recomputation: {mismatches}")
                raise TotalsMismatchError(
                    "Submitted totals do not match the server calculation.",
                    mismatches={k: {kk: str(vv) for kk, vv in v.items()} for k, v in mismatches.items()},
                )

        for row, amount in zip(document.items, line_totals(items)):
            row.total = quantize_cents(amount)
        document.subtotal = totals.subtotal
        document.gst_amount = totals.gst_amount
        document.pst_amount = totals.pst_amount
        document.tax_amount = totals.total_tax
        document.total = totals.total
        logger.debug(
            f"Recomputed {document.__class__.__name__} totals: subtotal={totals.subtotal} "
            f"gst={totals.gst_amount} pst={totals.pst_amount} total={totals.total}"
        )
        return totals
