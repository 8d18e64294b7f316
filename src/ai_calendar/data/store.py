from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol

from ..domain import CalendarEvent


class EventStore(Protocol):
    """Persistence contract consumed by the calendar service.

    Implementations provide their own per-call atomicity. Nothing here spans
    calls, so a read followed by an update is not transactional.
    """

    def create(self, event: CalendarEvent) -> CalendarEvent: ...

    def get_by_id(self, event_id: str) -> Optional[CalendarEvent]: ...

    def get_by_client_reference_id(self, client_reference_id: str) -> Optional[CalendarEvent]: ...

    def update(self, event: CalendarEvent) -> CalendarEvent: ...

    def list_all(self) -> List[CalendarEvent]: ...

    def list_between(self, start: datetime, end: datetime) -> List[CalendarEvent]: ...

    def list_by_attendee(self, email: str) -> List[CalendarEvent]: ...

    def delete(self, event_id: str) -> bool: ...

    def delete_by_client_reference_id(self, client_reference_id: str) -> bool: ...

    def exists(self, event_id: str) -> bool: ...
