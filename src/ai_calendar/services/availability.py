"""Conflict detection over half-open event intervals.

An existing event conflicts with a candidate interval ``[start, end)`` when
it starts before the candidate ends, ends after the candidate starts, is not
cancelled and is not the excluded event. Back-to-back events therefore never
conflict. Zero-length and inverted intervals go through the same predicate
without raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from ..domain import CalendarEvent, EventStatus
from ..utils import as_naive


@dataclass(frozen=True)
class ConflictingEvent:
    id: str
    title: str
    start: datetime
    end: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "start_time": self.start.isoformat(),
            "end_time": self.end.isoformat(),
        }


@dataclass(frozen=True)
class ConflictResult:
    conflicting_events: List[ConflictingEvent] = field(default_factory=list)

    @property
    def available(self) -> bool:
        return not self.conflicting_events

    @property
    def conflict_count(self) -> int:
        return len(self.conflicting_events)


def overlaps(event: CalendarEvent, start: datetime, end: datetime, exclude_id: Optional[str] = None) -> bool:
    if event.status is EventStatus.CANCELLED:
        return False
    if exclude_id is not None and event.id == exclude_id:
        return False
    return as_naive(event.starts_at) < as_naive(end) and as_naive(event.ends_at) > as_naive(start)


def find_conflicts(
    start: datetime,
    end: datetime,
    events: Iterable[CalendarEvent],
    exclude_id: Optional[str] = None,
) -> ConflictResult:
    conflicting = [
        ConflictingEvent(id=event.id, title=event.title, start=event.starts_at, end=event.ends_at)
        for event in events
        if overlaps(event, start, end, exclude_id)
    ]
    return ConflictResult(conflicting_events=conflicting)


def suggest_alternatives(start: datetime) -> List[str]:
    """Rescheduling hints offered when a requested slot is taken."""

    later = start + timedelta(hours=1)
    return [
        f"Move to {later:%H:%M}",
        f"Schedule for tomorrow at {start:%H:%M}",
        "Reduce meeting duration to 30 minutes",
    ]
