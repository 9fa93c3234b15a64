"""
error_handler.py — Centralized error handling for the Flask app.
"""
import logging
import sqlite3
import traceback

from flask import jsonify
from marshmallow import ValidationError

from api.schemas.common import ErrorSchema
from data.csv_loader import CsvFormatError
from scoring.valuation import InvalidStatisticsError
from services.errors import FantasyError

logger = logging.getLogger("fantasy")

_error_schema = ErrorSchema()


def _error(status_code, error, message, errors=None):
    body = {"error": error, "message": message}
    if errors is not None:
        body["errors"] = errors
    return jsonify(_error_schema.dump(body)), status_code


def register_error_handlers(app):
    """Register all error handlers on the Flask app."""

    @app.errorhandler(ValidationError)
    def validation_error(e):
        return _error(400, "Bad Request", "Invalid input", e.messages)

    @app.errorhandler(InvalidStatisticsError)
    def invalid_statistics(e):
        return _error(400, "Bad Request", str(e), {e.field: [str(e)]})

    @app.errorhandler(CsvFormatError)
    def csv_format_error(e):
        return _error(400, "Bad Request", str(e))

    @app.errorhandler(FantasyError)
    def domain_error(e):
        if e.status_code >= 500:
            logger.error(f"{type(e).__name__}: {e.message}")
        return _error(e.status_code, e.error, e.message)

    @app.errorhandler(sqlite3.Error)
    def storage_error(e):
        logger.error(f"Storage error: {e}\n{traceback.format_exc()}")
        return _error(500, "Internal Server Error",
                      "The data store could not complete the request.")

    @app.errorhandler(400)
    def bad_request(e):
        return _error(400, "Bad Request", str(e))

    @app.errorhandler(401)
    def unauthorized(e):
        return _error(401, "Unauthorized", str(e))

    @app.errorhandler(403)
    def forbidden(e):
        return _error(403, "Forbidden", str(e))

    @app.errorhandler(404)
    def not_found(e):
        return _error(404, "Not Found", str(e))

    @app.errorhandler(405)
    def method_not_allowed(e):
        return _error(405, "Method Not Allowed", str(e))

    @app.errorhandler(413)
    def too_large(e):
        return _error(413, "Payload Too Large", "Uploaded file exceeds the size limit.")

    @app.errorhandler(429)
    def rate_limited(e):
        return _error(429, "Rate Limited", "Too many requests. Please slow down.")

    @app.errorhandler(500)
    def internal_error(e):
        logger.error(f"Internal error: {e}\n{traceback.format_exc()}")
        return _error(500, "Internal Server Error", "Something went wrong.")
