from flask import jsonify, g, current_app, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .extensions import db
from .ledger.exceptions import LedgerError


def _payload(code: str, message: str, details=None, status=400):
    return (
        jsonify({
            "success": False,
            "error": {
                "code": code,
                "message": message,
                "details": details or None,
            },
            "request_id": getattr(g, "request_id", None),
        }),
        status,
    )


def register_error_handlers(app):
    @app.errorhandler(LedgerError)
    def handle_ledger_error(e: LedgerError):
        return _payload(code=e.code, message=e.message, details=e.details, status=e.status_code)

    # Generic HTTP errors (404, 403, 401, etc.)
    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        desc = e.description

        # Structured error info passed via abort(description=dict)
        if isinstance(desc, dict):
            code = desc.get("code") or e.name.replace(" ", "_").upper()
            message = desc.get("message") or e.name
            details = desc.get("errors") or desc.get("details")
            return _payload(code=code, message=message, details=details, status=e.code or 400)

        return _payload(
            code=e.name.replace(" ", "_").upper(),
            message=desc or e.name,
            details=None,
            status=e.code or 400
        )

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(e: SQLAlchemyError):
        db.session.rollback()
        current_app.logger.exception(
            "Database error request_id=%s path=%s", getattr(g, "request_id", None), request.path
        )
        return _payload("INTERNAL_SERVER_ERROR", "A storage error occurred. Please retry.", status=500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        # Don't leak internals
        current_app.logger.exception(
            "Unhandled exception request_id=%s path=%s", getattr(g, "request_id", None), request.path
        )
        return _payload("INTERNAL_SERVER_ERROR", "An unexpected error occurred", status=500)
