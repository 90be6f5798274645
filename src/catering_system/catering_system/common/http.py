from __future__ import annotations

from flask import Flask, jsonify, request

from ..core.enums import ErrorKind
from ..core.exceptions import DomainError

_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONCURRENCY_CONFLICT: 409,
    ErrorKind.PAST_CUTOFF: 409,
    ErrorKind.HAS_ENROLLED_STUDENTS: 409,
}


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def status_for(error: DomainError) -> int:
    return _STATUS_BY_KIND.get(error.kind, 422)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify(e.to_dict()), status_for(e)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        # Let Flask render its own HTTP errors (404 for unknown routes, 405, ...).
        code = getattr(e, "code", None)
        if isinstance(code, int) and 400 <= code < 500:
            return jsonify({"kind": "HttpError", "message": str(e)}), code

        app.logger.exception("unhandled error on %s %s", request.method, request.path)
        message = str(e) if app.config.get("DEBUG") else "Internal server error"
        return jsonify({"kind": "InternalError", "message": message}), 500
