from flask import Blueprint, jsonify, request
from tireshop.schemas.invoice_schema import (
    CashReportResultSchema,
    CashReportSchema,
    InvoiceCreateSchema,
    InvoiceSchema,
    InvoiceSearchSchema,
    InvoiceUpdateSchema,
    MarkPaidSchema,
)
from tireshop.services.document_render.builder import build_printable_invoice
from tireshop.api.errors import error_response
from tireshop.services.invoice_service import InvoiceService

invoice_bp = Blueprint('invoice', __name__)
schema = InvoiceSchema()
schema_many = InvoiceSchema(many=True)
create_schema = InvoiceCreateSchema()
update_schema = InvoiceUpdateSchema()
mark_paid_schema = MarkPaidSchema()
search_schema = InvoiceSearchSchema()
cash_report_schema = CashReportSchema()
cash_report_result_schema = CashReportResultSchema()


@invoice_bp.route('/invoices', methods=['GET'])
def list_invoices():
    try:
        filters = search_schema.load(request.args.to_dict())
        if filters:
            invoices = InvoiceService.search(**filters)
        else:
            invoices = InvoiceService.get_all()
        return jsonify(schema_many.dump(invoices)), 200
    except Exception as e:
        return error_response(e, 'list_invoices')


@invoice_bp.route('/invoices/<int:invoice_id>', methods=['GET'])
def get_invoice(invoice_id):
    try:
        invoice = InvoiceService.get_by_id(invoice_id)
        return jsonify(schema.dump(invoice)), 200
    except Exception as e:
        return error_response(e, 'get_invoice')


@invoice_bp.route('/invoices', methods=['POST'])
def create_invoice():
    try:
        data = create_schema.load(request.get_json(silent=True) or {})
        invoice = InvoiceService.create(data)
        return jsonify(schema.dump(invoice)), 201
    except Exception as e:
        return error_response(e, 'create_invoice')


@invoice_bp.route('/invoices/<int:invoice_id>', methods=['PUT'])
def update_invoice(invoice_id):
    try:
        data = update_schema.load(request.get_json(silent=True) or {})
        invoice = InvoiceService.update(invoice_id, data)
        return jsonify(schema.dump(invoice)), 200
    except Exception as e:
        return error_response(e, 'update_invoice')


@invoice_bp.route('/invoices/<int:invoice_id>', methods=['DELETE'])
def cancel_invoice(invoice_id):
    """Invoices are never deleted; DELETE cancels."""
    try:
        invoice = InvoiceService.cancel(invoice_id)
        return jsonify(schema.dump(invoice)), 200
    except Exception as e:
        return error_response(e, 'cancel_invoice')


@invoice_bp.route('/invoices/<int:invoice_id>/pay', methods=['POST'])
def pay_invoice(invoice_id):
    try:
        data = mark_paid_schema.load(request.get_json(silent=True) or {})
        invoice = InvoiceService.mark_paid(invoice_id, data['payment_method'])
        return jsonify(schema.dump(invoice)), 200
    except Exception as e:
        return error_response(e, 'pay_invoice')


@invoice_bp.route('/invoices/<int:invoice_id>/refund', methods=['POST'])
def refund_invoice(invoice_id):
    try:
        invoice = InvoiceService.refund(invoice_id)
        return jsonify(schema.dump(invoice)), 200
    except Exception as e:
        return error_response(e, 'refund_invoice')


@invoice_bp.route('/invoices/<int:invoice_id>/document', methods=['GET'])
def invoice_document(invoice_id):
    try:
        invoice = InvoiceService.get_by_id(invoice_id)
        document = build_printable_invoice(invoice)
        return jsonify(document.model_dump(mode='json')), 200
    except Exception as e:
        return error_response(e, 'invoice_document')


@invoice_bp.route('/invoices/cash-report', methods=['GET'])
def cash_report():
    try:
        args = cash_report_schema.load(request.args.to_dict())
        report = InvoiceService.daily_cash_report(args['date'])
        return jsonify(cash_report_result_schema.dump(report)), 200
    except Exception as e:
        return error_response(e, 'cash_report')
