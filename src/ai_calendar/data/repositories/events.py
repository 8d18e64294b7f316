from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from ...domain import CalendarEvent, EventNotFoundError
from ..supabase import SupabaseGateway


@dataclass(slots=True)
class SupabaseEventRepository:
    gateway: SupabaseGateway
    table_name: str

    def _table(self):
        return self.gateway.ensure_client().table(self.table_name)

    @staticmethod
    def _to_events(records: Optional[List[Dict[str, Any]]]) -> List[CalendarEvent]:
        return [CalendarEvent.from_record(record) for record in records or []]

    def _first(self, column: str, value: str) -> Optional[CalendarEvent]:
        response = self._table().select("*").eq(column, value).limit(1).execute()
        events = self._to_events(response.data)
        return events[0] if events else None

    def create(self, event: CalendarEvent) -> CalendarEvent:
        now = datetime.now()
        event.created_at = event.created_at or now
        event.updated_at = now
        payload = event.to_record()
        response = self._table().insert(payload).execute()
        created = self._to_events(response.data)
        return created[0] if created else CalendarEvent.from_record(payload)

    def get_by_id(self, event_id: str) -> Optional[CalendarEvent]:
        return self._first("id", event_id)

    def get_by_client_reference_id(self, client_reference_id: str) -> Optional[CalendarEvent]:
        return self._first("client_reference_id", client_reference_id)

    def update(self, event: CalendarEvent) -> CalendarEvent:
        event.updated_at = datetime.now()
        payload = event.to_record()
        response = self._table().update(payload).eq("id", event.id).execute()
        updated = self._to_events(response.data)
        if not updated:
            raise EventNotFoundError(f"Event with ID {event.id} not found.")
        return updated[0]

    def list_all(self) -> List[CalendarEvent]:
        response = self._table().select("*").order("starts_at", desc=False).execute()
        return self._to_events(response.data)

    def list_between(self, start: datetime, end: datetime) -> List[CalendarEvent]:
        response = (
            self._table()
            .select("*")
            .gte("starts_at", start.isoformat())
            .lte("starts_at", end.isoformat())
            .order("starts_at", desc=False)
            .execute()
        )
        return self._to_events(response.data)

    def list_by_attendee(self, email: str) -> List[CalendarEvent]:
        response = (
            self._table()
            .select("*")
            .contains("attendees", [{"email": email}])
            .order("starts_at", desc=False)
            .execute()
        )
        return self._to_events(response.data)

    def delete(self, event_id: str) -> bool:
        response = self._table().delete().eq("id", event_id).execute()
        return bool(response.data)

    def delete_by_client_reference_id(self, client_reference_id: str) -> bool:
        response = self._table().delete().eq("client_reference_id", client_reference_id).execute()
        return bool(response.data)

    def exists(self, event_id: str) -> bool:
        return self.get_by_id(event_id) is not None
