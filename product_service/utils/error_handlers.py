from flask import jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
import logging

from product_service.exceptions import ProductServiceError

logger = logging.getLogger(__name__)


def validation_error_body(error):
    """Body for a marshmallow validation failure"""
    return {
        'error': 'Validation failed',
        'message': 'Request data validation failed',
        'details': error.messages
    }


def service_error_response(error):
    """(body, status) pair for a ProductServiceError"""
    if error.status_code >= 500:
        logger.error(f"Service error: {error.message}")
    return error.to_dict(), error.status_code


def register_error_handlers(app):
    """Register application error handlers"""

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'error': 'Not Found',
            'message': 'The requested resource was not found'
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'error': 'Method Not Allowed',
            'message': 'The method is not allowed for the requested URL'
        }), 405

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}")
        return jsonify({
            'error': 'Internal Server Error',
            'message': 'An unexpected error occurred'
        }), 500

    @app.errorhandler(ValidationError)
    def validation_error(error):
        return jsonify(validation_error_body(error)), 400

    @app.errorhandler(ProductServiceError)
    def product_service_error(error):
        body, status = service_error_response(error)
        return jsonify(body), status

    @app.errorhandler(HTTPException)
    def http_exception(error):
        return jsonify({
            'error': error.name,
            'message': error.description
        }), error.code
