from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from uuid import uuid4

from ..core.exceptions import ValidationError


def new_id() -> str:
    return str(uuid4())


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required", {field_name: "required"})
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters", {field_name: "too short"})
    return value


def require_int(value: Any, field_name: str, *, min_value: Optional[int] = None) -> int:
    # int() would truncate 2.7 and accept True.
    fractional = (isinstance(value, float) and not (math.isfinite(value) and value.is_integer())) or (
        isinstance(value, Decimal) and not (value.is_finite() and value == value.to_integral_value())
    )
    if isinstance(value, bool) or fractional:
        raise ValidationError(f"{field_name} must be an integer", {field_name: "not an integer"})
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer", {field_name: "not an integer"})
    if min_value is not None and number < min_value:
        raise ValidationError(f"{field_name} must be >= {min_value}", {field_name: f"must be >= {min_value}"})
    return number


def require_decimal(value: Any, field_name: str, *, positive: bool = False) -> Decimal:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number", {field_name: "not a number"})
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be a number", {field_name: "not a number"})
    if positive and number <= 0:
        raise ValidationError(f"{field_name} must be positive", {field_name: "must be positive"})
    return number


def optional_float(value: Any, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number", {field_name: "not a number"})
    if math.isnan(number):
        raise ValidationError(f"{field_name} must be a number", {field_name: "not a number"})
    return number
