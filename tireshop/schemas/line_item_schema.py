from marshmallow import EXCLUDE, Schema, fields, validate
from tireshop.pricing import ItemType

RATE_RANGE = validate.Range(min=0, max=1)


class LineItemInputSchema(Schema):
    """Shape of one line as sent by a client. Value rules per item type
    (positive prices, negative flat discounts, 0-100 percentages) are
    enforced by the pricing taxonomy, not here."""

    class Meta:
        unknown = EXCLUDE

    item_type = fields.Str(required=True, validate=validate.OneOf([t.value for t in ItemType]))
    description = fields.Str(required=True)
    quantity = fields.Int(load_default=1)
    unit_price = fields.Decimal(required=True)
    reference_id = fields.Str(allow_none=True, load_default=None)


class TotalsInputSchema(Schema):
    """Totals a client computed for itself; checked, never stored."""

    class Meta:
        unknown = EXCLUDE

    subtotal = fields.Decimal(allow_none=True)
    gst_amount = fields.Decimal(allow_none=True)
    pst_amount = fields.Decimal(allow_none=True)
    total_tax = fields.Decimal(allow_none=True)
    total = fields.Decimal(allow_none=True)


class LineItemResultSchema(Schema):
    item_type = fields.Str()
    description = fields.Str()
    quantity = fields.Int()
    unit_price = fields.Decimal(as_string=True)
    reference_id = fields.Str(allow_none=True)
    total = fields.Decimal(as_string=True)
