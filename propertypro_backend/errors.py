# propertypro_backend/errors.py
from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from .extensions import db


class DomainError(Exception):
    """Base for user-facing failures raised by the services."""

    status_code = 400
    error = "bad_request"

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"error": self.error, "message": self.message}


class ValidationError(DomainError):
    error = "validation_error"


class NotOwned(DomainError):
    error = "not_owned"


class UnitConflict(DomainError):
    error = "unit_conflict"


class InvalidTransition(DomainError):
    error = "invalid_transition"

    def __init__(self, from_status, to_status):
        self.from_status = str(getattr(from_status, "value", from_status))
        self.to_status = str(getattr(to_status, "value", to_status))
        super().__init__(f"Cannot change status from '{self.from_status}' to '{self.to_status}'.")

    def to_dict(self):
        payload = super().to_dict()
        payload.update({"from": self.from_status, "to": self.to_status})
        return payload


class NotFound(DomainError):
    status_code = 404
    error = "not_found"


def register_error_handlers(app):
    @app.errorhandler(DomainError)
    def domain_error(e):
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(400)
    def bad_request(e):
        msg = getattr(e, "description", "Bad Request")
        return jsonify({"error": "bad_request", "message": msg}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "not_found", "path": request.path}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "method_not_allowed"}), 405

    @app.errorhandler(Exception)
    def server_error(e):
        if isinstance(e, HTTPException):
            return e
        db.session.rollback()
        app.logger.exception("Unhandled exception: %s", e)
        return jsonify({"error": "Internal Server Error"}), 500
