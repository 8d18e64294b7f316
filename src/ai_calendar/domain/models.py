from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..utils import as_naive
from .enums import AttendeeStatus, EventStatus


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return as_naive(value)
    if isinstance(value, str):
        return as_naive(datetime.fromisoformat(value.replace("Z", "+00:00")))
    raise ValueError(f"Unsupported datetime value: {value!r}")


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(slots=True)
class Attendee:
    name: str
    email: str
    status: AttendeeStatus = AttendeeStatus.PENDING
    is_organizer: bool = False

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Attendee":
        return cls(
            name=str(record.get("name") or ""),
            email=str(record["email"]),
            status=AttendeeStatus(record.get("status") or AttendeeStatus.PENDING),
            is_organizer=bool(record.get("is_organizer", False)),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "status": self.status.value,
            "is_organizer": self.is_organizer,
        }


@dataclass(slots=True)
class CalendarEvent:
    id: str
    title: str
    starts_at: datetime
    ends_at: datetime
    description: str = ""
    location: Optional[str] = None
    timezone: str = "UTC"
    is_all_day: bool = False
    status: EventStatus = EventStatus.CONFIRMED
    client_reference_id: Optional[str] = None
    attendees: List[Attendee] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def cancel(self) -> None:
        """Mark the event cancelled and decline every attendee."""

        if self.status is not EventStatus.CANCELLED:
            self.status = EventStatus.CANCELLED
            for attendee in self.attendees:
                attendee.status = AttendeeStatus.DECLINED
        self.updated_at = datetime.now()

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CalendarEvent":
        return cls(
            id=str(record["id"]),
            title=str(record["title"]),
            starts_at=_parse_datetime(record["starts_at"]),
            ends_at=_parse_datetime(record["ends_at"]),
            description=record.get("description") or "",
            location=record.get("location"),
            timezone=record.get("timezone") or "UTC",
            is_all_day=bool(record.get("is_all_day", False)),
            status=EventStatus(record.get("status") or EventStatus.CONFIRMED),
            client_reference_id=record.get("client_reference_id"),
            attendees=[Attendee.from_record(item) for item in record.get("attendees") or []],
            created_at=_parse_datetime(record["created_at"]) if record.get("created_at") else None,
            updated_at=_parse_datetime(record["updated_at"]) if record.get("updated_at") else None,
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "starts_at": self.starts_at.isoformat(),
            "ends_at": self.ends_at.isoformat(),
            "description": self.description,
            "location": self.location,
            "timezone": self.timezone,
            "is_all_day": self.is_all_day,
            "status": self.status.value,
            "client_reference_id": self.client_reference_id,
            "attendees": [attendee.to_record() for attendee in self.attendees],
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
