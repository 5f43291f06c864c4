"""Datetime helpers.

All datetimes are stored and compared as naive UTC values.
"""
from datetime import date, datetime, timezone
from typing import Annotated, Any

from pydantic import BeforeValidator


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_datetime(value: Any) -> Any:
    """Accept ISO dates ("2025-01-10") and datetimes ("2025-01-10T14:00:00Z")."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        s = value.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            return to_naive_utc(datetime.fromisoformat(s))
        except ValueError:
            raise ValueError(f"invalid datetime '{value}', expected ISO 8601")
    return value


UTCDateTime = Annotated[datetime, BeforeValidator(parse_datetime)]
