from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, List, Mapping, Optional
from uuid import uuid4

from ..data import EventStore
from ..domain import (
    Attendee,
    AttendeeNotFoundError,
    CalendarEvent,
    DuplicateAttendeeError,
    EventNotFoundError,
    EventStatus,
    ToolArgumentError,
)
from ..utils import as_naive
from .availability import ConflictResult, find_conflicts
from .context import ServiceContext

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 1000
MAX_LOCATION_LENGTH = 100

_UPDATABLE_FIELDS = ("title", "description", "location", "starts_at", "ends_at", "status")


def _validate(event: CalendarEvent) -> None:
    event.starts_at = as_naive(event.starts_at)
    event.ends_at = as_naive(event.ends_at)
    if not event.title or not event.title.strip():
        raise ToolArgumentError("Event title is required.")
    if event.ends_at <= event.starts_at:
        raise ToolArgumentError("End time must be after start time.")
    if not event.timezone or not event.timezone.strip():
        raise ToolArgumentError("Time zone is required.")

    event.title = event.title.strip()[:MAX_TITLE_LENGTH]
    if event.description and len(event.description) > MAX_DESCRIPTION_LENGTH:
        event.description = event.description[:MAX_DESCRIPTION_LENGTH]
    if event.location and len(event.location) > MAX_LOCATION_LENGTH:
        event.location = event.location[:MAX_LOCATION_LENGTH]


@dataclass(slots=True)
class CalendarService:
    context: ServiceContext

    @property
    def store(self) -> EventStore:
        return self.context.store

    def list_events(self) -> List[CalendarEvent]:
        return self.store.list_all()

    def list_between(self, start: datetime, end: datetime) -> List[CalendarEvent]:
        return self.store.list_between(as_naive(start), as_naive(end))

    def list_by_attendee(self, email: str) -> List[CalendarEvent]:
        return self.store.list_by_attendee(email)

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        return self.store.get_by_id(event_id)

    def get_event_by_client_reference(self, client_reference_id: str) -> Optional[CalendarEvent]:
        return self.store.get_by_client_reference_id(client_reference_id)

    def create_event(self, event: CalendarEvent) -> CalendarEvent:
        """Validate and store ``event``.

        A repeated ``client_reference_id`` returns the event stored under it
        instead of creating a duplicate.
        """

        _validate(event)
        if event.client_reference_id:
            existing = self.store.get_by_client_reference_id(event.client_reference_id)
            if existing is not None:
                logger.info(
                    "Client reference %s already stored as event %s", event.client_reference_id, existing.id
                )
                return existing
        if not event.id:
            event.id = str(uuid4())
        created = self.store.create(event)
        logger.info("Created event %s (%s)", created.id, created.title)
        return created

    def update_event(self, event_id: str, changes: Mapping[str, Any]) -> CalendarEvent:
        """Overwrite only the fields present in ``changes`` and store the result."""

        existing = self._require(event_id)
        merged = replace(existing, **{key: changes[key] for key in _UPDATABLE_FIELDS if key in changes})
        if merged.status is EventStatus.CANCELLED and existing.status is not EventStatus.CANCELLED:
            merged.status = existing.status
            merged.cancel()
        _validate(merged)
        updated = self.store.update(merged)
        logger.info("Updated event %s", updated.id)
        return updated

    def reschedule_event(self, event_id: str, starts_at: datetime, ends_at: datetime) -> CalendarEvent:
        starts_at, ends_at = as_naive(starts_at), as_naive(ends_at)
        if ends_at <= starts_at:
            raise ToolArgumentError("End time must be after start time.")
        return self.update_event(event_id, {"starts_at": starts_at, "ends_at": ends_at})

    def cancel_event(self, event_id: str) -> bool:
        event = self.store.get_by_id(event_id)
        if event is None:
            return False
        event.cancel()
        self.store.update(event)
        logger.info("Cancelled event %s", event_id)
        return True

    def _require(self, event_id: str) -> CalendarEvent:
        event = self.store.get_by_id(event_id)
        if event is None:
            raise EventNotFoundError(f"Event with ID {event_id} not found")
        return event

    def add_attendee(self, event_id: str, attendee: Attendee) -> CalendarEvent:
        event = self._require(event_id)
        if any(existing.email == attendee.email for existing in event.attendees):
            raise DuplicateAttendeeError(f"Attendee with email {attendee.email} already exists for this event.")
        event.attendees.append(attendee)
        return self.store.update(event)

    def remove_attendee(self, event_id: str, email: str) -> CalendarEvent:
        event = self._require(event_id)
        remaining = [attendee for attendee in event.attendees if attendee.email != email]
        if len(remaining) == len(event.attendees):
            raise AttendeeNotFoundError(f"Attendee with email {email} not found for this event.")
        event.attendees = remaining
        return self.store.update(event)

    def check_conflicts(
        self, starts_at: datetime, ends_at: datetime, exclude_id: Optional[str] = None
    ) -> ConflictResult:
        return find_conflicts(starts_at, ends_at, self.store.list_all(), exclude_id=exclude_id)
