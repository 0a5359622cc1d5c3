from decimal import Decimal
from sqlalchemy import Numeric
from tireshop.extensions import db
from tireshop.pricing import parse_line_item
from tireshop.utils.timezone_utils import utc_now


class PricedDocumentMixin:
    """Tax rates and stored totals shared by invoices and quotations.

    The money columns are written only by PricingService.recompute; nothing
    else assigns them.
    """
    gst_rate = db.Column(Numeric(precision=6, scale=4), nullable=False, default=Decimal("0.05"))
    pst_rate = db.Column(Numeric(precision=6, scale=4), nullable=False, default=Decimal("0.07"))
    subtotal = db.Column(Numeric(precision=12, scale=2), nullable=False, default=Decimal("0"))
    gst_amount = db.Column(Numeric(precision=12, scale=2), nullable=False, default=Decimal("0"))
    pst_amount = db.Column(Numeric(precision=12, scale=2), nullable=False, default=Decimal("0"))
    tax_amount = db.Column(Numeric(precision=12, scale=2), nullable=False, default=Decimal("0"))
    total = db.Column(Numeric(precision=12, scale=2), nullable=False, default=Decimal("0"))
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    @property
    def tax_rate(self):
        return (self.gst_rate or 0) + (self.pst_rate or 0)

    def line_items(self):
        """Validated pricing items, in display order."""
        return [parse_line_item(item.as_pricing_input(), index) for index, item in enumerate(self.items)]


class PricedItemMixin:
    item_type = db.Column(db.String(32), nullable=False)
    description = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    # percentage for DISCOUNT_PERCENTAGE lines, negative amount for DISCOUNT lines
    unit_price = db.Column(Numeric(precision=12, scale=4), nullable=False)
    total = db.Column(Numeric(precision=12, scale=2), nullable=False, default=Decimal("0"))
    reference_id = db.Column(db.String(64), nullable=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    def as_pricing_input(self):
        return {
            "item_type": self.item_type,
            "description": self.description,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "reference_id": self.reference_id,
        }
