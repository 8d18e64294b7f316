from __future__ import annotations

from enum import Enum


class EventStatus(str, Enum):
    TENTATIVE = "Tentative"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"


class AttendeeStatus(str, Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    DECLINED = "Declined"
    TENTATIVE = "Tentative"


class OperationKind(str, Enum):
    CREATE_EVENT = "CreateEvent"
    UPDATE_EVENT = "UpdateEvent"
    DELETE_EVENT = "DeleteEvent"
    FIND_EVENT = "FindEvent"
    CHECK_AVAILABILITY = "CheckAvailability"
    SUGGEST_MEETING_TIME = "SuggestMeetingTime"
    UNKNOWN = "Unknown"
