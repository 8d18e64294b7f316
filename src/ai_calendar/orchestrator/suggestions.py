from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Any, Dict, List

from ..domain import EventStatus

SUGGESTION_CONFIDENCE = 0.8


@dataclass(frozen=True)
class EventSuggestion:
    title: str
    description: str
    start: datetime
    end: datetime
    status: EventStatus = EventStatus.TENTATIVE
    confidence: float = SUGGESTION_CONFIDENCE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "start_time": self.start.isoformat(),
            "end_time": self.end.isoformat(),
            "status": self.status.value,
            "confidence": self.confidence,
        }


def suggest_events(partial_input: str, now: datetime) -> List[EventSuggestion]:
    """Offer a tentative one-hour slot tomorrow morning for ``partial_input``."""

    tomorrow = datetime.combine(now.date() + timedelta(days=1), time(hour=10))
    return [
        EventSuggestion(
            title="Suggested Meeting",
            description=f"Auto-suggested based on: {partial_input}",
            start=tomorrow,
            end=tomorrow + timedelta(hours=1),
        )
    ]
