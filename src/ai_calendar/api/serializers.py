from __future__ import annotations

from typing import Any, Dict

from ..domain import CalendarEvent
from .models import EventPayload


def serialize_event(event: CalendarEvent) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump()
