import logging
import secrets
import string
import time
from datetime import timedelta
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from tireshop.extensions import db
from tireshop.models.invoice import InvoiceStatus
from tireshop.models.quotation import Quotation, QuotationItem, QuotationStatus
from tireshop.pricing import ItemValidationError
from tireshop.services.errors import InvalidStateError, NotFoundError, ServiceError
from tireshop.services.invoice_service import InvoiceService
from tireshop.services.pricing_service import PricingService
from tireshop.utils.timezone_utils import display_day_bounds_utc, utc_now

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('customer_name', 'business_name', 'phone', 'email', 'vehicle_ref', 'notes', 'status', 'valid_until')


class QuotationService:
    @staticmethod
    def get_all():
        try:
            return Quotation.query.order_by(Quotation.created_at.desc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching quotations: {e}", exc_info=True)
            raise ServiceError("Could not fetch quotations. Please try again later.")

    @staticmethod
    def get_by_id(quotation_id):
        try:
            quotation = db.session.get(Quotation, quotation_id)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching quotation: {e}", exc_info=True)
            raise ServiceError("Could not fetch quotation. Please try again later.")
        if not quotation:
            raise NotFoundError(f"Quotation with ID {quotation_id} not found")
        return quotation

    @staticmethod
    def search(customer_name=None, quotation_number=None, status=None, start_date=None, end_date=None):
        try:
            query = Quotation.query
            if customer_name:
                query = query.filter(Quotation.customer_name.ilike(f"%{customer_name}%"))
            if quotation_number:
                query = query.filter(Quotation.quotation_number.ilike(f"%{quotation_number}%"))
            if status:
                query = query.filter(Quotation.status == status)
            if start_date:
                query = query.filter(Quotation.created_at >= display_day_bounds_utc(start_date)[0])
            if end_date:
                query = query.filter(Quotation.created_at < display_day_bounds_utc(end_date)[1])
            return query.order_by(Quotation.created_at.desc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Error searching quotations: {e}", exc_info=True)
            raise ServiceError("Could not search quotations. Please try again later.")

    @staticmethod
    def generate_quotation_number():
        """Q + last 8 digits of the epoch millis + 4 random characters, e.g. Q12345678-AB3Z."""
        stamp = str(int(time.time() * 1000))[-8:]
        suffix = ''.join(secrets.choice(string.ascii_uppercase + string.digits) for _ in range(4))
        return f"Q{stamp}-{suffix}"

    @staticmethod
    def create(data):
        try:
            policy = PricingService.get_policy()
            # quotations carry no payment method, so the cash rule never applies here
            rates = policy.initial_rates(None, data.get('gst_rate'), data.get('pst_rate'))
            valid_until = data.get('valid_until') or (
                utc_now() + timedelta(days=current_app.config.get('QUOTATION_VALID_DAYS', 30))
            )
            quotation = Quotation(
                quotation_number=QuotationService.generate_quotation_number(),
                customer_name=data['customer_name'],
                business_name=data.get('business_name'),
                phone=data.get('phone'),
                email=data.get('email'),
                vehicle_ref=data.get('vehicle_ref'),
                notes=data.get('notes'),
                status=data.get('status') or QuotationStatus.DRAFT.value,
                valid_until=valid_until,
                gst_rate=rates.gst_rate,
                pst_rate=rates.pst_rate,
            )
            PricingService.replace_items(quotation, QuotationItem, data['items'])
            PricingService.recompute(quotation, data.get('totals'))
            db.session.add(quotation)
            db.session.commit()
            logger.info(f"Quotation {quotation.quotation_number} created: total={quotation.total}")
            return quotation
        except (ServiceError, ItemValidationError):
            db.session.rollback()
            raise
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error creating quotation: {e}", exc_info=True)
            raise ServiceError("Could not create quotation. Please try again later.")

    @staticmethod
    def update(quotation_id, data):
        quotation = QuotationService.get_by_id(quotation_id)
        if quotation.status == QuotationStatus.CONVERTED.value:
            raise InvalidStateError("Cannot update a quotation that has been converted to an invoice")
        try:
            logger.info(f"Updating quotation {quotation_id} with data: {list(data.keys())}")
            for key in EDITABLE_FIELDS:
                if key in data:
                    setattr(quotation, key, data[key])
            if data.get('items') is not None:
                PricingService.replace_items(quotation, QuotationItem, data['items'])
            if data.get('gst_rate') is not None:
                quotation.gst_rate = data['gst_rate']
            if data.get('pst_rate') is not None:
                quotation.pst_rate = data['pst_rate']

            PricingService.recompute(quotation, data.get('totals'))
            db.session.commit()
            logger.info(f"Quotation {quotation.quotation_number} updated: total={quotation.total}")
            return quotation
        except (ServiceError, ItemValidationError):
            db.session.rollback()
            raise
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error updating quotation: {e}", exc_info=True)
            raise ServiceError("Could not update quotation. Please try again later.")

    @staticmethod
    def delete(quotation_id):
        quotation = QuotationService.get_by_id(quotation_id)
        try:
            db.session.delete(quotation)
            db.session.commit()
            logger.info(f"Quotation {quotation.quotation_number} deleted")
            return True
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error deleting quotation: {e}", exc_info=True)
            raise ServiceError("Could not delete quotation. Please try again later.")

    @staticmethod
    def convert_to_invoice(quotation_id, data=None):
        """Turn a quotation into a PENDING invoice; lines are copied and re-priced."""
        data = data or {}
        quotation = QuotationService.get_by_id(quotation_id)
        if quotation.status == QuotationStatus.CONVERTED.value:
            raise InvalidStateError("Quotation has already been converted to an invoice")
        try:
            invoice = InvoiceService.build(
                {
                    'customer_name': quotation.customer_name,
                    'customer_ref': data.get('customer_ref'),
                    'vehicle_ref': data.get('vehicle_ref') or quotation.vehicle_ref,
                    'notes': quotation.notes,
                    'status': InvoiceStatus.PENDING.value,
                    'gst_rate': quotation.gst_rate,
                    'pst_rate': quotation.pst_rate,
                    'quotation_id': quotation.id,
                },
                items=[item.as_pricing_input() for item in quotation.items],
            )
            db.session.flush()
            quotation.status = QuotationStatus.CONVERTED.value
            quotation.converted_invoice_id = invoice.id
            db.session.commit()
            logger.info(f"Quotation {quotation.quotation_number} converted to invoice {invoice.invoice_number}")
            return invoice
        except (ServiceError, ItemValidationError):
            db.session.rollback()
            raise
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error converting quotation: {e}", exc_info=True)
            raise ServiceError("Could not convert quotation. Please try again later.")
