from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional

from dateutil import parser as date_parser


def as_naive(value: datetime) -> datetime:
    """Return ``value`` as a naive local timestamp so all comparisons share one frame."""

    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def format_when(value: datetime) -> str:
    hour = value.hour % 12 or 12
    return f"{value:%b %d, %Y} at {hour}:{value:%M %p}"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Permissively parse ``value`` into a naive timestamp, or ``None`` when it cannot be read."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return as_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return as_naive(date_parser.parse(value.strip()))
    except (ValueError, OverflowError):
        return None
