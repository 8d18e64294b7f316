"""Coercion helpers for loosely typed tool arguments.

Arguments come from parsed free text or from client context, so a field
that should be a timestamp may arrive as a string, a date or nothing at all.
Each helper reads one key and either returns a typed value or raises
``ToolArgumentError`` with a message fit for the caller.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Mapping, Optional

from ..domain import Attendee, EventStatus, ToolArgumentError
from ..utils import parse_timestamp

Arguments = Mapping[str, Any]


def _present(arguments: Arguments, key: str) -> bool:
    value = arguments.get(key)
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def optional_text(arguments: Arguments, key: str) -> Optional[str]:
    value = arguments.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)):
        return str(value)
    raise ToolArgumentError(f"{key} must be a string")


def optional_datetime(arguments: Arguments, key: str) -> Optional[datetime]:
    if not _present(arguments, key):
        return None
    parsed = parse_timestamp(arguments[key])
    if parsed is None:
        raise ToolArgumentError(f"Invalid {key}: {arguments[key]!r}")
    return parsed


def required_datetime(arguments: Arguments, key: str) -> datetime:
    parsed = parse_timestamp(arguments.get(key))
    if parsed is None:
        raise ToolArgumentError(f"Valid {key} is required")
    return parsed


def optional_date(arguments: Arguments, key: str) -> Optional[date]:
    parsed = optional_datetime(arguments, key)
    return parsed.date() if parsed else None


def event_id(arguments: Arguments, key: str = "id") -> Optional[str]:
    """Read an event id; any non-empty value is returned as a string.

    Ids that look wrong (non-numeric, oversized, structured) are not rejected
    here. They simply fail to resolve and surface as not-found.
    """

    if not _present(arguments, key):
        return None
    value = arguments[key]
    return value.strip() if isinstance(value, str) else str(value)


def optional_status(arguments: Arguments, key: str = "status") -> Optional[EventStatus]:
    if not _present(arguments, key):
        return None
    raw = str(arguments[key]).strip().lower()
    for status in EventStatus:
        if raw in (status.value.lower(), status.name.lower()):
            return status
    raise ToolArgumentError(f"Unknown event status: {arguments[key]!r}")


def attendees(arguments: Arguments, key: str = "attendees") -> List[Attendee]:
    value = arguments.get(key)
    if not value:
        return []
    if not isinstance(value, (list, tuple)):
        raise ToolArgumentError(f"{key} must be a list")
    collected: List[Attendee] = []
    for item in value:
        if isinstance(item, str) and item.strip():
            email = item.strip()
            collected.append(Attendee(name=email.split("@")[0], email=email))
        elif isinstance(item, Mapping) and item.get("email"):
            collected.append(
                Attendee(
                    name=str(item.get("name") or str(item["email"]).split("@")[0]),
                    email=str(item["email"]),
                    is_organizer=bool(item.get("is_organizer", False)),
                )
            )
    return collected
