"""JSON envelope helpers shared by the Flask controllers."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    NotFoundError,
    PermissionRequiredError,
    ValidationError,
)
from .datetime_utils import parse_iso_date
from .serialization import to_jsonable

logger = logging.getLogger(__name__)


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200):
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = to_jsonable(data)
    if message:
        body["message"] = message
    return jsonify(body), status


def fail(message: str, *, status: int = 400, **extra: Any):
    body: dict[str, Any] = {"success": False, "error": message, "message": message}
    body.update(extra)
    return jsonify(body), status


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_int(name: str) -> Optional[int]:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def as_date(value: Any, field_name: str) -> Optional[date]:
    raw = str(value or "").strip()
    if not raw:
        return None
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def query_date(name: str) -> Optional[date]:
    return as_date(request.args.get(name), name)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(PermissionRequiredError)
    def _permission_required(e: PermissionRequiredError):
        return fail(str(e), status=400, requires_permission=True, existing_status=e.existing_status)

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return fail(str(e), status=400)

    @app.errorhandler(AuthorizationError)
    def _authorization(e: AuthorizationError):
        return fail(str(e), status=403)

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return fail(str(e), status=404)

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return fail(str(e), status=400)

    @app.errorhandler(404)
    def _unknown_route(e):
        return fail("Not found", status=404)

    @app.errorhandler(405)
    def _method_not_allowed(e):
        return fail("Method not allowed", status=405)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return fail(e.description or e.name, status=e.code or 500)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("Internal server error", status=500)
