from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, UpstreamError, ValidationError, VerificationFailedError

logger = logging.getLogger(__name__)

_STATUS_BY_CATEGORY = {
    "validation_error": 400,
    "precondition_failed": 400,
    "unauthorized": 401,
    "not_found": 404,
    "conflict": 409,
    "upstream_failure": 502,
    "internal": 500,
}


def ok(data: Any, status: int = 200, **extra: Any):
    body = {"success": True, "data": data}
    body.update(extra)
    return jsonify(body), status


def fail(message: str, category: str, status: int, **extra: Any):
    body = {"success": False, "error": message, "category": category}
    body.update(extra)
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def status_for(exc: DomainError) -> int:
    if isinstance(exc, UpstreamError) and exc.kind == "configuration":
        return 500
    return _STATUS_BY_CATEGORY.get(exc.category, 500)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        extra = {}
        if isinstance(exc, VerificationFailedError):
            extra["confidence"] = exc.confidence
        if isinstance(exc, UpstreamError):
            extra["kind"] = exc.kind
            logger.error("photo storage failure on %s %s: %s", request.method, request.path, exc)
        return fail(exc.message, exc.category, status_for(exc), **extra)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        code = exc.code or 500
        if code == 404:
            category = "not_found"
        elif code < 500:
            category = "validation_error"
        else:
            category = "internal"
        return fail(exc.description or exc.name, category, code)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.path)
        message = f"Internal error: {exc}" if app.config.get("DEBUG") else "Internal server error"
        return fail(message, "internal", 500)
