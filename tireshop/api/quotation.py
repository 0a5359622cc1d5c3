from flask import Blueprint, jsonify, request
from tireshop.api.errors import error_response
from tireshop.schemas.invoice_schema import InvoiceSchema
from tireshop.schemas.quotation_schema import (
    ConvertQuotationSchema,
    QuotationCreateSchema,
    QuotationSchema,
    QuotationSearchSchema,
    QuotationUpdateSchema,
)
from tireshop.services.document_render.builder import build_printable_quotation
from tireshop.services.quotation_service import QuotationService

quotation_bp = Blueprint('quotation', __name__)
schema = QuotationSchema()
schema_many = QuotationSchema(many=True)
create_schema = QuotationCreateSchema()
update_schema = QuotationUpdateSchema()
convert_schema = ConvertQuotationSchema()
search_schema = QuotationSearchSchema()
invoice_schema = InvoiceSchema()


@quotation_bp.route('/quotations', methods=['GET'])
def list_quotations():
    try:
        filters = search_schema.load(request.args.to_dict())
        if filters:
            quotations = QuotationService.search(**filters)
        else:
            quotations = QuotationService.get_all()
        return jsonify(schema_many.dump(quotations)), 200
    except Exception as e:
        return error_response(e, 'list_quotations')


@quotation_bp.route('/quotations/<int:quotation_id>', methods=['GET'])
def get_quotation(quotation_id):
    try:
        quotation = QuotationService.get_by_id(quotation_id)
        return jsonify(schema.dump(quotation)), 200
    except Exception as e:
        return error_response(e, 'get_quotation')


@quotation_bp.route('/quotations', methods=['POST'])
def create_quotation():
    try:
        data = create_schema.load(request.get_json(silent=True) or {})
        quotation = QuotationService.create(data)
        return jsonify(schema.dump(quotation)), 201
    except Exception as e:
        return error_response(e, 'create_quotation')


@quotation_bp.route('/quotations/<int:quotation_id>', methods=['PUT'])
def update_quotation(quotation_id):
    try:
        data = update_schema.load(request.get_json(silent=True) or {})
        quotation = QuotationService.update(quotation_id, data)
        return jsonify(schema.dump(quotation)), 200
    except Exception as e:
        return error_response(e, 'update_quotation')


@quotation_bp.route('/quotations/<int:quotation_id>', methods=['DELETE'])
def delete_quotation(quotation_id):
    try:
        QuotationService.delete(quotation_id)
        return jsonify({'message': 'Quotation deleted successfully'}), 200
    except Exception as e:
        return error_response(e, 'delete_quotation')


@quotation_bp.route('/quotations/<int:quotation_id>/convert', methods=['POST'])
def convert_quotation(quotation_id):
    try:
        data = convert_schema.load(request.get_json(silent=True) or {})
        invoice = QuotationService.convert_to_invoice(quotation_id, data)
        return jsonify(invoice_schema.dump(invoice)), 201
    except Exception as e:
        return error_response(e, 'convert_quotation')


@quotation_bp.route('/quotations/<int:quotation_id>/document', methods=['GET'])
def quotation_document(quotation_id):
    try:
        quotation = QuotationService.get_by_id(quotation_id)
        document = build_printable_quotation(quotation)
        return jsonify(document.model_dump(mode='json')), 200
    except Exception as e:
        return error_response(e, 'quotation_document')
