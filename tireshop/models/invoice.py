from enum import Enum
from tireshop.extensions import db
from tireshop.models.priced_document import PricedDocumentMixin, PricedItemMixin


class InvoiceStatus(Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


# statuses that freeze an invoice against edits
LOCKED_STATUSES = {InvoiceStatus.PAID.value, InvoiceStatus.CANCELLED.value, InvoiceStatus.REFUNDED.value}


class Invoice(PricedDocumentMixin, db.Model):
    __tablename__ = 'invoice'
    id = db.Column(db.Integer, primary_key=True)
    invoice_number = db.Column(db.String(32), unique=True, nullable=False, index=True)
    customer_name = db.Column(db.String(255), nullable=False, index=True)
    customer_ref = db.Column(db.String(64), nullable=True, index=True)
    vehicle_ref = db.Column(db.String(64), nullable=True)
    status = db.Column(db.String(16), nullable=False, default=InvoiceStatus.PENDING.value, index=True)
    payment_method = db.Column(db.String(32), nullable=True, index=True)
    paid_at = db.Column(db.DateTime(timezone=True), nullable=True, index=True)
    quotation_id = db.Column(db.Integer, nullable=True)

    items = db.relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position",
    )

    @property
    def is_locked(self):
        return self.status in LOCKED_STATUSES


class InvoiceItem(PricedItemMixin, db.Model):
    __tablename__ = 'invoice_item'
    id = db.Column(db.Integer, primary_key=True)
    invoice_id = db.Column(db.Integer, db.ForeignKey('invoice.id', ondelete='CASCADE'), nullable=False, index=True)

    invoice = db.relationship("Invoice", back_populates="items")
