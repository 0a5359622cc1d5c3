from marshmallow import EXCLUDE, Schema, fields, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema, auto_field
from tireshop.models.quotation import Quotation, QuotationItem, QuotationStatus
from tireshop.schemas.line_item_schema import RATE_RANGE, LineItemInputSchema, TotalsInputSchema

# CONVERTED is only ever set by the convert endpoint
SETTABLE_STATUSES = [s.value for s in QuotationStatus if s is not QuotationStatus.CONVERTED]


class QuotationItemSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = QuotationItem
    id = auto_field()
    item_type = auto_field()
    description = auto_field()
    quantity = auto_field()
    unit_price = fields.Decimal(as_string=True)
    total = fields.Decimal(as_string=True)
    reference_id = auto_field()
    position = auto_field()


class QuotationSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = Quotation
        include_fk = True
    id = auto_field()
    quotation_number = auto_field()
    customer_name = auto_field()
    business_name = auto_field()
    phone = auto_field()
    email = auto_field()
    vehicle_ref = auto_field()
    status = auto_field()
    valid_until = auto_field()
    converted_invoice_id = auto_field()
    notes = auto_field()
    created_at = auto_field()
    updated_at = auto_field()
    gst_rate = fields.Decimal(as_string=True)
    pst_rate = fields.Decimal(as_string=True)
    tax_rate = fields.Decimal(as_string=True, dump_only=True)
    subtotal = fields.Decimal(as_string=True)
    gst_amount = fields.Decimal(as_string=True)
    pst_amount = fields.Decimal(as_string=True)
    tax_amount = fields.Decimal(as_string=True)
    total = fields.Decimal(as_string=True)

    items = fields.Nested(QuotationItemSchema, many=True, dump_only=True)


class QuotationCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    customer_name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    business_name = fields.Str(allow_none=True)
    phone = fields.Str(allow_none=True)
    email = fields.Email(allow_none=True)
    vehicle_ref = fields.Str(allow_none=True)
    items = fields.List(fields.Nested(LineItemInputSchema), required=True, validate=validate.Length(min=1))
    gst_rate = fields.Decimal(allow_none=True, validate=RATE_RANGE)
    pst_rate = fields.Decimal(allow_none=True, validate=RATE_RANGE)
    status = fields.Str(validate=validate.OneOf(SETTABLE_STATUSES))
    notes = fields.Str(allow_none=True)
    valid_until = fields.DateTime(allow_none=True)
    totals = fields.Nested(TotalsInputSchema, allow_none=True)


class QuotationUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    customer_name = fields.Str(validate=validate.Length(min=1, max=255))
    business_name = fields.Str(allow_none=True)
    phone = fields.Str(allow_none=True)
    email = fields.Email(allow_none=True)
    vehicle_ref = fields.Str(allow_none=True)
    items = fields.List(fields.Nested(LineItemInputSchema), validate=validate.Length(min=1))
    gst_rate = fields.Decimal(allow_none=True, validate=RATE_RANGE)
    pst_rate = fields.Decimal(allow_none=True, validate=RATE_RANGE)
    status = fields.Str(validate=validate.OneOf(SETTABLE_STATUSES))
    notes = fields.Str(allow_none=True)
    valid_until = fields.DateTime(allow_none=True)
    totals = fields.Nested(TotalsInputSchema, allow_none=True)


class ConvertQuotationSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    customer_ref = fields.Str(allow_none=True)
    vehicle_ref = fields.Str(allow_none=True)


class QuotationSearchSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    status = fields.Str(validate=validate.OneOf([s.value for s in QuotationStatus]))
    customer_name = fields.Str()
    quotation_number = fields.Str()
    start_date = fields.Date()
    end_date = fields.Date()
