import logging
from decimal import Decimal
from sqlalchemy.exc import SQLAlchemyError
from tireshop.extensions import db
from tireshop.models.invoice import Invoice, InvoiceItem, InvoiceStatus
from tireshop.pricing import ItemValidationError, PaymentMethod, TaxRates, coerce_payment_method
from tireshop.services.errors import InvalidStateError, NotFoundError, ServiceError
from tireshop.services.pricing_service import PricingService
from tireshop.utils.timezone_utils import convert_utc_to_display, display_day_bounds_utc, utc_now

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('customer_name', 'customer_ref', 'vehicle_ref', 'notes')


class InvoiceService:
    @staticmethod
    def get_all():
        try:
            return Invoice.query.order_by(Invoice.created_at.desc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching invoices: {e}", exc_info=True)
            raise ServiceError("Could not fetch invoices. Please try again later.")

    @staticmethod
    def get_by_id(invoice_id):
        try:
            invoice = db.session.get(Invoice, invoice_id)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching invoice: {e}", exc_info=True)
            raise ServiceError("Could not fetch invoice. Please try again later.")
        if not invoice:
            raise NotFoundError(f"Invoice with ID {invoice_id} not found")
        return invoice

    @staticmethod
    def search(status=None, customer_name=None, invoice_number=None, payment_method=None,
               start_date=None, end_date=None):
        try:
            query = Invoice.query
            if status:
                query = query.filter(Invoice.status == status)
            if payment_method:
                query = query.filter(Invoice.payment_method == payment_method)
            if customer_name:
                query = query.filter(Invoice.customer_name.ilike(f"%{customer_name}%"))
            if invoice_number:
                query = query.filter(Invoice.invoice_number.ilike(f"%{invoice_number}%"))
            if start_date:
                query = query.filter(Invoice.created_at >= display_day_bounds_utc(start_date)[0])
            if end_date:
                query = query.filter(Invoice.created_at < display_day_bounds_utc(end_date)[1])
            return query.order_by(Invoice.created_at.desc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Error searching invoices: {e}", exc_info=True)
            raise ServiceError("Could not search invoices. Please try again later.")

    @staticmethod
    def generate_invoice_number():
        """INV-YYYYMM-NNNN, sequence restarting every month."""
        prefix = f"INV-{convert_utc_to_display(utc_now()):%Y%m}-"
        last = (
            Invoice.query.filter(Invoice.invoice_number.like(f"{prefix}%"))
            .order_by(Invoice.invoice_number.desc())
            .first()
        )
        sequence = 1
        if last:
            try:
                sequence = int(last.invoice_number.rsplit('-', 1)[-1]) + 1
            except ValueError:
                logger.warning(f"Unparseable invoice number {last.invoice_number}, restarting sequence")
        return f"{prefix}{sequence:04d}"

    @staticmethod
    def _apply_payment_method(invoice, payment_method):
        """Switch the payment method, letting the cash rule adjust the stored rates."""
        policy = PricingService.get_policy()
        current = TaxRates.of(invoice.gst_rate, invoice.pst_rate)
        rates = policy.on_payment_method_change(invoice.payment_method, payment_method, current)
        new_method = coerce_payment_method(payment_method)
        invoice.gst_rate = rates.gst_rate
        invoice.pst_rate = rates.pst_rate
        invoice.payment_method = new_method.value if new_method else None

    @staticmethod
    def build(data, items=None):
        """New invoice with priced lines, added to the session but not committed."""
        policy = PricingService.get_policy()
        payment_method = coerce_payment_method(data.get('payment_method'))
        rates = policy.initial_rates(payment_method, data.get('gst_rate'), data.get('pst_rate'))

        status = data.get('status')
        if not status:
            status = InvoiceStatus.PAID.value if payment_method else InvoiceStatus.PENDING.value

        invoice = Invoice(
            invoice_number=InvoiceService.generate_invoice_number(),
            customer_name=data['customer_name'],
            customer_ref=data.get('customer_ref'),
            vehicle_ref=data.get('vehicle_ref'),
            notes=data.get('notes'),
            status=status,
            payment_method=payment_method.value if payment_method else None,
            gst_rate=rates.gst_rate,
            pst_rate=rates.pst_rate,
            quotation_id=data.get('quotation_id'),
        )
        if status == InvoiceStatus.PAID.value:
            invoice.paid_at = utc_now()

        PricingService.replace_items(invoice, InvoiceItem, items if items is not None else data['items'])
        PricingService.recompute(invoice, data.get('totals'))
        db.session.add(invoice)
        return invoice

    @staticmethod
    def create(data):
        try:
            invoice = InvoiceService.build(data)
            db.session.commit()
            logger.info(f"Invoice {invoice.invoice_number} created: status={invoice.status} total={invoice.total}")
            return invoice
        except (ServiceError, ItemValidationError):
            db.session.rollback()
            raise
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error creating invoice: {e}", exc_info=True)
            raise ServiceError("Could not create invoice. Please try again later.")

    @staticmethod
    def update(invoice_id, data):
        invoice = InvoiceService.get_by_id(invoice_id)
        if invoice.is_locked:
            raise InvalidStateError(f"Cannot update invoice with status {invoice.status}")
        if data.get('status') == InvoiceStatus.PAID.value:
            raise InvalidStateError("Invoices are marked paid with a payment method, not by status")
        try:
            logger.info(f"Updating invoice {invoice_id} with data: {list(data.keys())}")
            for key in EDITABLE_FIELDS:
                if key in data:
                    setattr(invoice, key, data[key])
            if data.get('items') is not None:
                PricingService.replace_items(invoice, InvoiceItem, data['items'])
            if 'payment_method' in data:
                InvoiceService._apply_payment_method(invoice, data['payment_method'])
            # explicit rates land after the policy; cash sales stay untaxed
            if invoice.payment_method != PaymentMethod.CASH.value:
                if data.get('gst_rate') is not None:
                    invoice.gst_rate = data['gst_rate']
                if data.get('pst_rate') is not None:
                    invoice.pst_rate = data['pst_rate']
            if data.get('status'):
                invoice.status = data['status']

            # always re-price the whole document, whatever changed
            PricingService.recompute(invoice, data.get('totals'))
            db.session.commit()
            logger.info(f"Invoice {invoice.invoice_number} updated: total={invoice.total}")
            return invoice
        except (ServiceError, ItemValidationError):
            db.session.rollback()
            raise
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error updating invoice: {e}", exc_info=True)
            raise ServiceError("Could not update invoice. Please try again later.")

    @staticmethod
    def _set_status(invoice, status, action):
        try:
            invoice.status = status
            db.session.commit()
            logger.info(f"Invoice {invoice.invoice_number} {action}")
            return invoice
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error updating invoice status: {e}", exc_info=True)
            raise ServiceError("Could not update invoice. Please try again later.")

    @staticmethod
    def cancel(invoice_id):
        """Invoices are cancelled, never deleted."""
        invoice = InvoiceService.get_by_id(invoice_id)
        if invoice.status == InvoiceStatus.PAID.value:
            raise InvalidStateError("Cannot cancel a paid invoice")
        if invoice.status == InvoiceStatus.CANCELLED.value:
            return invoice
        return InvoiceService._set_status(invoice, InvoiceStatus.CANCELLED.value, "cancelled")

    @staticmethod
    def refund(invoice_id):
        invoice = InvoiceService.get_by_id(invoice_id)
        if invoice.status != InvoiceStatus.PAID.value:
            raise InvalidStateError("Only paid invoices can be refunded")
        return InvoiceService._set_status(invoice, InvoiceStatus.REFUNDED.value, "refunded")

    @staticmethod
    def mark_paid(invoice_id, payment_method):
        invoice = InvoiceService.get_by_id(invoice_id)
        if invoice.status == InvoiceStatus.PAID.value:
            raise InvalidStateError("Invoice is already paid")
        if invoice.is_locked:
            raise InvalidStateError(f"Cannot pay invoice with status {invoice.status}")
        try:
            InvoiceService._apply_payment_method(invoice, payment_method)
            PricingService.recompute(invoice)
            invoice.status = InvoiceStatus.PAID.value
            invoice.paid_at = utc_now()
            db.session.commit()
            logger.info(
                f"Invoice {invoice.invoice_number} paid by {invoice.payment_method}: total={invoice.total}"
            )
            return invoice
        except (ServiceError, ItemValidationError):
            db.session.rollback()
            raise
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error marking invoice paid: {e}", exc_info=True)
            raise ServiceError("Could not mark invoice as paid. Please try again later.")

    @staticmethod
    def daily_cash_report(day):
        """Paid cash invoices for one local calendar day, from stored totals."""
        start, end = display_day_bounds_utc(day)
        try:
            invoices = (
                Invoice.query.filter(
                    Invoice.status == InvoiceStatus.PAID.value,
                    Invoice.payment_method == PaymentMethod.CASH.value,
                    Invoice.paid_at >= start,
                    Invoice.paid_at < end,
                )
                .order_by(Invoice.paid_at)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error generating cash report: {e}", exc_info=True)
            raise ServiceError("Could not generate cash report. Please try again later.")

        return {
            'date': day.isoformat(),
            'count': len(invoices),
            'total': sum((inv.total for inv in invoices), Decimal("0.00")),
            'invoices': [
                {
                    'id': inv.id,
                    'invoice_number': inv.invoice_number,
                    'customer_name': inv.customer_name,
                    'total': inv.total,
                }
                for inv in invoices
            ],
        }
