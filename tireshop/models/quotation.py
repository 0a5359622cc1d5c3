from enum import Enum
from tireshop.extensions import db
from tireshop.models.priced_document import PricedDocumentMixin, PricedItemMixin


class QuotationStatus(Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"
    CONVERTED = "CONVERTED"


class Quotation(PricedDocumentMixin, db.Model):
    __tablename__ = 'quotation'
    id = db.Column(db.Integer, primary_key=True)
    quotation_number = db.Column(db.String(32), unique=True, nullable=False, index=True)
    customer_name = db.Column(db.String(255), nullable=False, index=True)
    business_name = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(32), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    vehicle_ref = db.Column(db.String(64), nullable=True)
    status = db.Column(db.String(16), nullable=False, default=QuotationStatus.DRAFT.value, index=True)
    valid_until = db.Column(db.DateTime(timezone=True), nullable=True)
    converted_invoice_id = db.Column(db.Integer, db.ForeignKey('invoice.id', ondelete='SET NULL'), nullable=True)

    items = db.relationship(
        "QuotationItem",
        back_populates="quotation",
        cascade="all, delete-orphan",
        order_by="QuotationItem.position",
    )


class QuotationItem(PricedItemMixin, db.Model):
    __tablename__ = 'quotation_item'
    id = db.Column(db.Integer, primary_key=True)
    quotation_id = db.Column(db.Integer, db.ForeignKey('quotation.id', ondelete='CASCADE'), nullable=False, index=True)

    quotation = db.relationship("Quotation", back_populates="items")
