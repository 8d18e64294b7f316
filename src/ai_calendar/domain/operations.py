from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple
from uuid import uuid4

from .enums import OperationKind


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class ProposedEvent:
    """Partially populated event payload extracted from free text."""

    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    attendees: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "start_time": _iso(self.start),
            "end_time": _iso(self.end),
            "attendees": list(self.attendees),
        }


@dataclass(frozen=True)
class Operation:
    """A parsed natural-language command. Created once per request, never mutated."""

    kind: OperationKind
    original_input: str
    confidence: float
    event: Optional[ProposedEvent] = None
    parsed_intent: str = ""
    entities: Tuple[str, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "operation_type": self.kind.value,
            "event": self.event.to_dict() if self.event else None,
            "confidence": self.confidence,
            "original_input": self.original_input,
            "parsed_intent": self.parsed_intent,
            "entities": list(self.entities),
            "metadata": dict(self.metadata),
            "created_at": self.created_at.isoformat(),
        }
