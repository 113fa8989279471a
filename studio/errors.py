"""Domain error system + JSON handler registration.

Every domain failure is a ``DomainError`` carrying an HTTP status, a short
machine code and a human-readable detail. Handlers render the envelope
``{"ok": false, "error": <detail>, "code": <code>}``.
"""
from __future__ import annotations

import logging
import traceback
from typing import Any

from flask import g, jsonify, request
from werkzeug.exceptions import HTTPException
from werkzeug.wrappers.response import Response

log = logging.getLogger("studio.errors")


class DomainError(Exception):
    status = 400
    code = "bad_request"

    def __init__(self, detail: str | None = None, *, status: int | None = None, **extra: Any):
        self.detail = detail or self.code
        if status is not None:
            self.status = status
        self.extra = extra
        super().__init__(self.detail)


class ValidationError(DomainError):
    status = 400
    code = "validation_error"


class AuthenticationError(DomainError):
    # Same message whichever credential was wrong
    status = 401
    code = "invalid_credentials"

    def __init__(self, detail: str = "Invalid credentials", **extra: Any):
        super().__init__(detail, **extra)


class SessionError(DomainError):
    """Signals a 401 unauthorized due to missing/expired session."""

    status = 401
    code = "unauthorized"

    def __init__(self, detail: str = "Unauthorized. Please log in.", **extra: Any):
        super().__init__(detail, **extra)


class NotFoundError(DomainError):
    status = 404
    code = "not_found"


class ConflictError(DomainError):
    status = 400
    code = "conflict"


class StorageFault(DomainError):
    status = 500
    code = "internal"


def make_error(detail: str, code: str, status: int, **extra: Any) -> Response:
    payload: dict[str, Any] = {"ok": False, "error": detail, "code": code}
    for k, v in extra.items():
        if v is not None:
            payload[k] = v
    resp = jsonify(payload)
    resp.status_code = status
    return resp


def register_error_handlers(app: Any) -> None:
    @app.errorhandler(StorageFault)
    def _h_storage(err: StorageFault) -> Response:
        # Details stay server side
        log.error(
            "storage fault request_id=%s path=%s detail=%s\n%s",
            getattr(g, "request_id", "-"),
            request.path,
            err.detail,
            traceback.format_exc(),
        )
        return make_error("Server error. Please try again later.", err.code, err.status)

    @app.errorhandler(DomainError)
    def _h_domain(err: DomainError) -> Response:
        return make_error(err.detail, err.code, err.status, **err.extra)

    @app.errorhandler(HTTPException)
    def _h_http(ex: HTTPException) -> Response:
        status = ex.code or 500
        code = (ex.name or "error").lower().replace(" ", "_")
        return make_error(str(ex.description or code), code, status)

    @app.errorhandler(Exception)
    def _h_exception(ex: Exception) -> Response:
        app.logger.error(
            "Unhandled exception request_id=%s path=%s\n%s",
            getattr(g, "request_id", "-"),
            request.path,
            traceback.format_exc(),
        )
        return make_error("Server error. Please try again later.", "internal", 500)


__all__ = [
    "DomainError",
    "ValidationError",
    "AuthenticationError",
    "SessionError",
    "NotFoundError",
    "ConflictError",
    "StorageFault",
    "make_error",
    "register_error_handlers",
]
