from flask import Blueprint, current_app, jsonify, request
from tireshop.api.errors import error_response
from tireshop.extensions import limiter
from tireshop.schemas.pricing_schema import (
    PricingDefaultsSchema,
    PricingPreviewResultSchema,
    PricingPreviewSchema,
)
from tireshop.services.pricing_service import PricingService

pricing_bp = Blueprint('pricing', __name__)
preview_schema = PricingPreviewSchema()
result_schema = PricingPreviewResultSchema()
defaults_schema = PricingDefaultsSchema()


@pricing_bp.route('/pricing/preview', methods=['POST'])
@limiter.limit(lambda: current_app.config.get('PREVIEW_RATE_LIMIT', '120 per minute'))
def preview():
    """Price the editor's current lines, rates and payment method without saving."""
    try:
        data = preview_schema.load(request.get_json(silent=True) or {})
        return jsonify(result_schema.dump(PricingService.preview(data))), 200
    except Exception as e:
        return error_response(e, 'preview')


@pricing_bp.route('/pricing/defaults', methods=['GET'])
def defaults():
    try:
        return jsonify(defaults_schema.dump(PricingService.defaults())), 200
    except Exception as e:
        return error_response(e, 'defaults')
