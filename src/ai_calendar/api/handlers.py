"""Calendar tool handlers.

Each handler takes the raw argument mapping of a tool request, coerces what
it needs and returns a JSON-ready dictionary. Validation failures raise
``ToolArgumentError``; the dispatcher turns them into failed responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ..domain import CalendarEvent, EventStatus, ToolArgumentError
from ..services import CalendarService, find_conflicts
from . import coercion
from .serializers import serialize_event

DEFAULT_TITLE = "Untitled Event"


@dataclass(slots=True)
class CalendarToolHandlers:
    calendar: CalendarService

    def save_event(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        starts_at = coercion.required_datetime(arguments, "start_time")
        ends_at = coercion.required_datetime(arguments, "end_time")
        if ends_at <= starts_at:
            raise ToolArgumentError("End time must be after start time.")

        title = (coercion.optional_text(arguments, "title") or "").strip() or DEFAULT_TITLE
        event = CalendarEvent(
            id="",
            title=title,
            starts_at=starts_at,
            ends_at=ends_at,
            description=coercion.optional_text(arguments, "description") or "",
            location=coercion.optional_text(arguments, "location") or None,
            status=EventStatus.CONFIRMED,
            client_reference_id=coercion.optional_text(arguments, "client_reference_id") or None,
            attendees=coercion.attendees(arguments),
        )

        conflicts = self.calendar.check_conflicts(starts_at, ends_at)
        created = self.calendar.create_event(event)
        result: Dict[str, Any] = {
            "success": True,
            "event": serialize_event(created),
            "message": "Event created successfully",
        }
        overlapping = [item for item in conflicts.conflicting_events if item.id != created.id]
        if overlapping:
            result["warnings"] = [f"Overlaps with '{item.title}'" for item in overlapping]
            result["conflicts"] = [item.to_dict() for item in overlapping]
        return result

    def update_event(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        event_id = coercion.event_id(arguments)
        if event_id is None:
            raise ToolArgumentError("Event ID is required")

        changes: Dict[str, Any] = {}
        for key in ("title", "description", "location"):
            if key in arguments and arguments[key] is not None:
                changes[key] = coercion.optional_text(arguments, key)
        starts_at = coercion.optional_datetime(arguments, "start_time")
        if starts_at is not None:
            changes["starts_at"] = starts_at
        ends_at = coercion.optional_datetime(arguments, "end_time")
        if ends_at is not None:
            changes["ends_at"] = ends_at
        status = coercion.optional_status(arguments)
        if status is not None:
            changes["status"] = status

        updated = self.calendar.update_event(event_id, changes)
        return {
            "success": True,
            "event": serialize_event(updated),
            "message": "Event updated successfully",
        }

    def cancel_event(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        event_id = coercion.event_id(arguments)
        if event_id is None:
            raise ToolArgumentError("Event ID is required")
        reason = (coercion.optional_text(arguments, "reason") or "").strip() or "Event cancelled"

        cancelled = self.calendar.cancel_event(event_id)
        return {
            "success": cancelled,
            "message": f"Event cancelled: {reason}" if cancelled else "Failed to cancel event",
        }

    def find_events(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        start_date = coercion.optional_date(arguments, "start_date")
        end_date = coercion.optional_date(arguments, "end_date")
        title_filter = (coercion.optional_text(arguments, "title_contains") or "").lower()
        location_filter = (coercion.optional_text(arguments, "location_contains") or "").lower()
        status = coercion.optional_status(arguments)

        events = self.calendar.list_events()
        if start_date is not None:
            events = [event for event in events if event.starts_at.date() >= start_date]
        if end_date is not None:
            events = [event for event in events if event.starts_at.date() <= end_date]
        if title_filter:
            events = [event for event in events if title_filter in event.title.lower()]
        if location_filter:
            events = [event for event in events if event.location and location_filter in event.location.lower()]
        if status is not None:
            events = [event for event in events if event.status is status]

        events = sorted(events, key=lambda event: event.starts_at)
        return {
            "success": True,
            "events": [serialize_event(event) for event in events],
            "count": len(events),
        }

    def check_availability(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        starts_at = coercion.required_datetime(arguments, "start_time")
        ends_at = coercion.required_datetime(arguments, "end_time")
        exclude_id = coercion.event_id(arguments, "exclude_event_id")

        result = find_conflicts(starts_at, ends_at, self.calendar.list_events(), exclude_id=exclude_id)
        return {
            "success": True,
            "available": result.available,
            "conflict_count": result.conflict_count,
            "conflicting_events": [item.to_dict() for item in result.conflicting_events],
        }
