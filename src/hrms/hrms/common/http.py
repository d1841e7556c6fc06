"""Shared helpers for the JSON controllers.

Controllers stay thin: parse the request, call a service, serialize the
result. Domain exceptions are translated to HTTP status codes in one place
(`register_error_handlers`).
"""

from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any, Iterable, Optional

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AlreadyPunchedIn,
    AuthenticationError,
    AuthorizationError,
    MustPunchInFirst,
    NotFoundError,
    ValidationError,
)
from ..users.model import SessionUser

logger = logging.getLogger(__name__)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_json(value: Any) -> Any:
    """Convert dataclasses / enums / decimals / dates into JSON-friendly values (camelCase keys)."""

    if is_dataclass(value) and not isinstance(value, type):
        return {_camel(f.name): to_json(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {(_camel(k) if isinstance(k, str) else k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def json_response(value: Any, status: int = 200):
    return jsonify(to_json(value)), status


def json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _error(message: str, status: int, details: Optional[dict] = None):
    body: dict[str, Any] = {"error": message}
    if details:
        body["details"] = details
    return jsonify(body), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return _error(str(e), 400, e.details)

    @app.errorhandler(AlreadyPunchedIn)
    @app.errorhandler(MustPunchInFirst)
    def _punch_state(e):
        return _error(str(e), 400)

    @app.errorhandler(AuthenticationError)
    def _authentication(e: AuthenticationError):
        return _error(str(e) or "Authentication required", 401)

    @app.errorhandler(AuthorizationError)
    def _authorization(e: AuthorizationError):
        return _error(str(e) or "Forbidden", 403)

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return _error(str(e) or "Not found", 404)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return _error(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return _error("Internal server error", 500)


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def auth_guard(auth_service, *roles: Role):
    """Build a decorator that resolves the bearer token into `g.current_user`.

    When `roles` are given the user must hold one of them.
    """

    allowed = set(roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            token = bearer_token()
            if not token:
                raise AuthenticationError("Authentication required")
            user = auth_service.resolve(token)
            if allowed and user.role not in allowed:
                raise AuthorizationError("Insufficient permissions")
            g.current_user = user
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_user() -> SessionUser:
    return g.current_user


def acting_employee_id(requested: Optional[str]) -> str:
    """Employee a request acts for.

    Plain employees may only act for themselves; HR/manager/admin may act for anyone.
    """

    if requested is not None and not isinstance(requested, str):
        raise ValidationError("employeeId must be a string", {"employeeId": "not a string"})
    user = current_user()
    employee_id = (requested or "").strip() or user.employee_id
    if not employee_id:
        raise ValidationError("employeeId is required", {"employeeId": "required"})
    if user.role == Role.EMPLOYEE and employee_id != user.employee_id:
        raise AuthorizationError("Employees may only act for themselves")
    return employee_id


def owner_restriction() -> Optional[str]:
    """Employee whose records the caller is limited to, or None for HR/manager/admin."""

    user = current_user()
    if user.role != Role.EMPLOYEE:
        return None
    if not user.employee_id:
        raise AuthorizationError("Account is not linked to an employee")
    return user.employee_id


def query_arg(name: str) -> Optional[str]:
    value = request.args.get(name)
    return value.strip() if value and value.strip() else None


def pick(payload: dict, mapping: Iterable[tuple[str, str]]) -> dict:
    """Copy present camelCase keys from `payload` under their snake_case names."""

    return {snake: payload[camel] for camel, snake in mapping if camel in payload}


def enum_arg(name: str, enum_cls):
    """Optional enum query argument; unknown values are a validation error."""

    value = query_arg(name)
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Invalid {name}", {name: "unknown value"})


def scoped_employee_id() -> Optional[str]:
    """`employeeId` filter for list endpoints; plain employees are always scoped to themselves."""

    requested = query_arg("employeeId")
    if requested or current_user().role == Role.EMPLOYEE:
        return acting_employee_id(requested)
    return None
