from __future__ import annotations

import random
from typing import Callable, Dict, Optional, Sequence, Tuple

from ..domain import Operation, OperationKind
from ..utils import format_when

_ACTIVITIES: Dict[OperationKind, str] = {
    OperationKind.CREATE_EVENT: "creating the event",
    OperationKind.UPDATE_EVENT: "updating the event",
    OperationKind.DELETE_EVENT: "deleting the event",
    OperationKind.FIND_EVENT: "finding events",
    OperationKind.CHECK_AVAILABILITY: "checking availability",
    OperationKind.SUGGEST_MEETING_TIME: "suggesting meeting times",
}


def describe_activity(kind: OperationKind) -> str:
    return _ACTIVITIES.get(kind, "processing your request")


class ResponseSynthesizer:
    """Builds the user-facing confirmation for a finished operation.

    Successful operations pick any member of a small set of equivalent
    phrasings, so callers should not rely on the exact wording.
    """

    def __init__(self, choose: Callable[[Sequence[str]], str] = random.choice) -> None:
        self._choose = choose

    def phrasings(self, operation: Operation, title: Optional[str] = None) -> Tuple[str, ...]:
        event = operation.event
        title = title or (event.title if event else None) or "your event"
        when = format_when(event.start) if event and event.start else "the requested time"
        kind = operation.kind

        if kind is OperationKind.CREATE_EVENT:
            return (
                f"Perfect! I've scheduled '{title}' for {when}.",
                f"Great! Your event '{title}' has been added to your calendar.",
                f"Done! I've created the event '{title}' as requested.",
            )
        if kind is OperationKind.UPDATE_EVENT:
            return (
                f"Updated! I've modified '{title}' as requested.",
                f"Changes saved! Your event '{title}' has been updated.",
                f"Perfect! The event '{title}' has been updated successfully.",
            )
        if kind is OperationKind.DELETE_EVENT:
            return (
                f"Removed! I've deleted '{title}' from your calendar.",
                f"Done! The event '{title}' has been cancelled.",
                f"Success! I've removed '{title}' as requested.",
            )
        if kind is OperationKind.FIND_EVENT:
            return (
                "Here's what I found on your calendar.",
                "I've looked up the matching events for you.",
            )
        if kind is OperationKind.CHECK_AVAILABILITY:
            return (
                f"I've checked your calendar for {when}.",
                f"Availability for {when} has been checked.",
            )
        return ("Operation completed successfully!",)

    def compose(
        self, operation: Operation, success: bool, details: Optional[str] = None, *, title: Optional[str] = None
    ) -> str:
        if not success:
            message = f"I encountered an issue while {describe_activity(operation.kind)}."
            return f"{message} {details}" if details else message
        return self._choose(self.phrasings(operation, title))
