from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import Attendee, CalendarEvent


class AttendeePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: str
    status: str
    is_organizer: bool = Field(default=False)

    @classmethod
    def from_domain(cls, attendee: Attendee) -> "AttendeePayload":
        return cls(
            name=attendee.name,
            email=attendee.email,
            status=attendee.status.value,
            is_organizer=attendee.is_organizer,
        )


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    start_time: str
    end_time: str
    status: str
    description: str = Field(default="")
    location: Optional[str] = Field(default=None)
    timezone: str = Field(default="UTC")
    is_all_day: bool = Field(default=False)
    client_reference_id: Optional[str] = Field(default=None)
    attendees: List[AttendeePayload] = Field(default_factory=list)
    created_at: Optional[str] = Field(default=None)
    updated_at: Optional[str] = Field(default=None)

    @classmethod
    def from_domain(cls, event: CalendarEvent) -> "EventPayload":
        return cls(
            id=event.id,
            title=event.title,
            start_time=_iso(event.starts_at),
            end_time=_iso(event.ends_at),
            status=event.status.value,
            description=event.description,
            location=event.location,
            timezone=event.timezone,
            is_all_day=event.is_all_day,
            client_reference_id=event.client_reference_id,
            attendees=[AttendeePayload.from_domain(attendee) for attendee in event.attendees],
            created_at=_iso(event.created_at),
            updated_at=_iso(event.updated_at),
        )


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
