"""Application services orchestrating data access and domain logic."""

from __future__ import annotations

from .availability import ConflictResult, ConflictingEvent, find_conflicts, overlaps, suggest_alternatives
from .calendar import CalendarService
from .context import ServiceContext

__all__ = [
    "CalendarService",
    "ConflictResult",
    "ConflictingEvent",
    "ServiceContext",
    "find_conflicts",
    "overlaps",
    "suggest_alternatives",
]
