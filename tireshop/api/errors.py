import logging
from flask import jsonify
from marshmallow import ValidationError
from tireshop.pricing import ItemValidationError
from tireshop.services.errors import ServiceError, TotalsMismatchError


def error_response(e, action):
    """JSON error body and status code for an exception raised inside a view."""
    if isinstance(e, ValidationError):
        return jsonify({'error': 'Invalid request', 'details': e.messages}), 400
    if isinstance(e, ItemValidationError):
        return jsonify({'error': e.message, 'details': e.errors}), 400
    if isinstance(e, TotalsMismatchError):
        return jsonify({'error': e.message, 'mismatches': e.mismatches}), e.status_code
    if isinstance(e, ServiceError):
        return jsonify({'error': e.message}), e.status_code
    logging.error(f"Unhandled error in {action}: {e}", exc_info=True)
    return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500
