"""
utils/errors.py
-----------------
Error types raised by controllers and the single place that turns
them into JSON responses.
"""

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = 400


class AuthenticationError(ApiError):
    status_code = 401


class PermissionDenied(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


def error_response(message, status_code):
    return jsonify({"status": "error", "message": message}), status_code


def register_error_handlers(app):

    @app.errorhandler(ApiError)
    def handle_api_error(e):
        return error_response(e.message, e.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return error_response(e.description, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        current_app.logger.exception(f"Unhandled error: {e}")
        return error_response("Internal server error", 500)
