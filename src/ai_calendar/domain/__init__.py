"""Domain models for calendar events and parsed operations."""

from __future__ import annotations

from .enums import AttendeeStatus, EventStatus, OperationKind
from .errors import (
    AttendeeNotFoundError,
    CalendarError,
    DuplicateAttendeeError,
    EventNotFoundError,
    ToolArgumentError,
)
from .models import Attendee, CalendarEvent
from .operations import Operation, ProposedEvent

__all__ = [
    "Attendee",
    "AttendeeNotFoundError",
    "AttendeeStatus",
    "CalendarError",
    "CalendarEvent",
    "DuplicateAttendeeError",
    "EventNotFoundError",
    "EventStatus",
    "Operation",
    "OperationKind",
    "ProposedEvent",
    "ToolArgumentError",
]
