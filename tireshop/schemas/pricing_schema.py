from marshmallow import EXCLUDE, Schema, fields, validate
from tireshop.pricing import PaymentMethod
from tireshop.schemas.line_item_schema import RATE_RANGE, LineItemInputSchema, LineItemResultSchema

PAYMENT_METHODS = [m.value for m in PaymentMethod]


class PricingPreviewSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    items = fields.List(fields.Nested(LineItemInputSchema), load_default=list)
    gst_rate = fields.Decimal(allow_none=True, load_default=None, validate=RATE_RANGE)
    pst_rate = fields.Decimal(allow_none=True, load_default=None, validate=RATE_RANGE)
    payment_method = fields.Str(allow_none=True, load_default=None, validate=validate.OneOf(PAYMENT_METHODS))
    previous_payment_method = fields.Str(allow_none=True, load_default=None, validate=validate.OneOf(PAYMENT_METHODS))


class PricingPreviewResultSchema(Schema):
    items = fields.List(fields.Nested(LineItemResultSchema))
    gst_rate = fields.Decimal(as_string=True)
    pst_rate = fields.Decimal(as_string=True)
    payment_method = fields.Str(allow_none=True)
    subtotal = fields.Decimal(as_string=True)
    gst_amount = fields.Decimal(as_string=True)
    pst_amount = fields.Decimal(as_string=True)
    total_tax = fields.Decimal(as_string=True)
    total = fields.Decimal(as_string=True)


class PricingDefaultsSchema(Schema):
    gst_rate = fields.Decimal(as_string=True)
    pst_rate = fields.Decimal(as_string=True)
    levy = fields.Nested(LineItemResultSchema(exclude=('total', 'reference_id')))
