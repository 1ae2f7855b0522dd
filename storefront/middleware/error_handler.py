from flask import jsonify, request
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from storefront.models.database import db
from storefront.services.errors import InvalidInput, StoreError


def validation_failed(errors):
    """Response for a payload rejected by a marshmallow schema."""
    error = InvalidInput(errors=errors)
    return jsonify(error.to_dict()), error.status_code


def register_error_handlers(app):
    """Turn service errors and unexpected failures into JSON responses."""

    @app.errorhandler(StoreError)
    def handle_store_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return validation_failed(error.messages)

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({
            "success": False,
            "error": error.name.replace(" ", ""),
            "message": error.description,
        }), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({
            "success": False,
            "error": "ServerError",
            "message": "Internal server error",
        }), 500
