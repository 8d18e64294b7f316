from __future__ import annotations


class CalendarError(Exception):
    """Base class for calendar errors surfaced to callers."""


class ToolArgumentError(CalendarError, ValueError):
    """Raised when a tool receives a missing or invalid argument."""


class EventNotFoundError(ToolArgumentError, LookupError):
    """Raised when an event id does not resolve to a stored event."""


class DuplicateAttendeeError(ToolArgumentError):
    """Raised when an attendee with the same email is already on the event."""


class AttendeeNotFoundError(ToolArgumentError, LookupError):
    """Raised when an email is not among an event's attendees."""
