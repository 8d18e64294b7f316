from __future__ import annotations

from typing import Tuple

from .handlers import CalendarToolHandlers
from .registry import Tool, ToolRegistry

SAVE_EVENT = "calendar.save_event"
UPDATE_EVENT = "calendar.update_event"
CANCEL_EVENT = "calendar.cancel_event"
FIND_EVENTS = "calendar.find_events"
CHECK_AVAILABILITY = "calendar.check_availability"

_ATTENDEES_SCHEMA = {
    "type": "array",
    "items": {"type": "string", "format": "email"},
    "description": "Attendee email addresses",
}

# Tool definitions paired with the name of the CalendarToolHandlers method serving them.
CALENDAR_TOOLS: Tuple[Tuple[Tool, str], ...] = (
    (
        Tool(
            name=SAVE_EVENT,
            description="Save a new calendar event to the database",
            parameters={
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "Event title"},
                    "description": {"type": "string", "description": "Event description"},
                    "start_time": {"type": "string", "format": "date-time", "description": "Event start time"},
                    "end_time": {"type": "string", "format": "date-time", "description": "Event end time"},
                    "location": {"type": "string", "description": "Event location"},
                    "client_reference_id": {
                        "type": "string",
                        "description": "Caller-supplied id; repeating it returns the stored event",
                    },
                    "attendees": _ATTENDEES_SCHEMA,
                },
                "required": ["title", "start_time", "end_time"],
            },
        ),
        "save_event",
    ),
    (
        Tool(
            name=UPDATE_EVENT,
            description="Update an existing calendar event",
            parameters={
                "type": "object",
                "properties": {
                    "id": {"type": "string", "description": "Event ID to update"},
                    "title": {"type": "string", "description": "Updated event title"},
                    "description": {"type": "string", "description": "Updated event description"},
                    "start_time": {"type": "string", "format": "date-time", "description": "Updated start time"},
                    "end_time": {"type": "string", "format": "date-time", "description": "Updated end time"},
                    "location": {"type": "string", "description": "Updated location"},
                    "status": {"type": "string", "description": "Event status"},
                },
                "required": ["id"],
            },
        ),
        "update_event",
    ),
    (
        Tool(
            name=CANCEL_EVENT,
            description="Cancel or delete a calendar event",
            parameters={
                "type": "object",
                "properties": {
                    "id": {"type": "string", "description": "Event ID to cancel"},
                    "reason": {"type": "string", "description": "Reason for cancellation"},
                },
                "required": ["id"],
            },
        ),
        "cancel_event",
    ),
    (
        Tool(
            name=FIND_EVENTS,
            description="Find calendar events by criteria",
            parameters={
                "type": "object",
                "properties": {
                    "start_date": {"type": "string", "format": "date", "description": "Search start date"},
                    "end_date": {"type": "string", "format": "date", "description": "Search end date"},
                    "title_contains": {"type": "string", "description": "Search in event titles"},
                    "location_contains": {"type": "string", "description": "Search in event locations"},
                    "status": {"type": "string", "description": "Event status filter"},
                },
            },
        ),
        "find_events",
    ),
    (
        Tool(
            name=CHECK_AVAILABILITY,
            description="Check availability for a specific time period",
            parameters={
                "type": "object",
                "properties": {
                    "start_time": {"type": "string", "format": "date-time", "description": "Start time to check"},
                    "end_time": {"type": "string", "format": "date-time", "description": "End time to check"},
                    "exclude_event_id": {
                        "type": "string",
                        "description": "Event ID to exclude from availability check",
                    },
                },
                "required": ["start_time", "end_time"],
            },
        ),
        "check_availability",
    ),
)


def register_calendar_tools(registry: ToolRegistry, handlers: CalendarToolHandlers) -> int:
    """Bind every calendar tool to its handler; returns how many were newly registered."""

    registered = 0
    for tool, method_name in CALENDAR_TOOLS:
        if registry.register(tool, getattr(handlers, method_name)):
            registered += 1
    return registered
