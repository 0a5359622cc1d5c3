from marshmallow import EXCLUDE, Schema, fields, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema, auto_field
from tireshop.models.invoice import Invoice, InvoiceItem, InvoiceStatus
from tireshop.schemas.line_item_schema import RATE_RANGE, LineItemInputSchema, TotalsInputSchema
from tireshop.schemas.pricing_schema import PAYMENT_METHODS

# CANCELLED and REFUNDED have their own endpoints
SETTABLE_STATUSES = [InvoiceStatus.DRAFT.value, InvoiceStatus.PENDING.value, InvoiceStatus.PAID.value]
# an existing invoice is paid through the pay endpoint
UPDATE_STATUSES = [InvoiceStatus.DRAFT.value, InvoiceStatus.PENDING.value]


class InvoiceItemSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = InvoiceItem
    id = auto_field()
    item_type = auto_field()
    description = auto_field()
    quantity = auto_field()
    unit_price = fields.Decimal(as_string=True)
    total = fields.Decimal(as_string=True)
    reference_id = auto_field()
    position = auto_field()


class InvoiceSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = Invoice
    id = auto_field()
    invoice_number = auto_field()
    customer_name = auto_field()
    customer_ref = auto_field()
    vehicle_ref = auto_field()
    status = auto_field()
    payment_method = auto_field()
    paid_at = auto_field()
    quotation_id = auto_field()
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

    items = fields.Nested(InvoiceItemSchema, many=True, dump_only=True)


class InvoiceCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    customer_name = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    customer_ref = fields.Str(allow_none=True)
    vehicle_ref = fields.Str(allow_none=True)
    items = fields.List(fields.Nested(LineItemInputSchema), required=True, validate=validate.Length(min=1))
    gst_rate = fields.Decimal(allow_none=True, validate=RATE_RANGE)
    pst_rate = fields.Decimal(allow_none=True, validate=RATE_RANGE)
    payment_method = fields.Str(allow_none=True, validate=validate.OneOf(PAYMENT_METHODS))
    status = fields.Str(validate=validate.OneOf(SETTABLE_STATUSES))
    notes = fields.Str(allow_none=True)
    totals = fields.Nested(TotalsInputSchema, allow_none=True)


class InvoiceUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    customer_name = fields.Str(validate=validate.Length(min=1, max=255))
    customer_ref = fields.Str(allow_none=True)
    vehicle_ref = fields.Str(allow_none=True)
    items = fields.List(fields.Nested(LineItemInputSchema), validate=validate.Length(min=1))
    gst_rate = fields.Decimal(allow_none=True, validate=RATE_RANGE)
    pst_rate = fields.Decimal(allow_none=True, validate=RATE_RANGE)
    payment_method = fields.Str(allow_none=True, validate=validate.OneOf(PAYMENT_METHODS))
    status = fields.Str(validate=validate.OneOf(UPDATE_STATUSES))
    notes = fields.Str(allow_none=True)
    totals = fields.Nested(TotalsInputSchema, allow_none=True)


class MarkPaidSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    payment_method = fields.Str(required=True, validate=validate.OneOf(PAYMENT_METHODS))


class InvoiceSearchSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    status = fields.Str(validate=validate.OneOf([s.value for s in InvoiceStatus]))
    customer_name = fields.Str()
    invoice_number = fields.Str()
    payment_method = fields.Str(validate=validate.OneOf(PAYMENT_METHODS))
    start_date = fields.Date()
    end_date = fields.Date()


class CashReportSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    date = fields.Date(required=True)


class CashReportInvoiceSchema(Schema):
    id = fields.Int()
    invoice_number = fields.Str()
    customer_name = fields.Str()
    total = fields.Decimal(as_string=True)


class CashReportResultSchema(Schema):
    date = fields.Str()
    count = fields.Int()
    total = fields.Decimal(as_string=True)
    invoices = fields.List(fields.Nested(CashReportInvoiceSchema))
