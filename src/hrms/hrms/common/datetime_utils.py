from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta
from typing import Iterator

from ..core.exceptions import ValidationError


def _require_text(value, field_name: str) -> None:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string", {field_name: "not a string"})


def parse_iso_date(value: str, field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date."""
    _require_text(value, field_name)
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid {field_name} (expected YYYY-MM-DD)", {field_name: "invalid date"})


def parse_iso_datetime(value: str, field_name: str = "datetime") -> datetime:
    _require_text(value, field_name)
    try:
        parsed = datetime.fromisoformat((value or "").strip())
    except ValueError:
        raise ValidationError(f"Invalid {field_name} (expected ISO 8601)", {field_name: "invalid datetime"})
    # Stored timestamps are naive local time.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def iter_days(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise ValidationError("Invalid month", {"month": "must be 1-12"})
    last = monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last)
