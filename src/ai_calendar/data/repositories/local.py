from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import orjson

from ...domain import CalendarEvent, EventNotFoundError


class JsonEventRepository:
    """Event store kept in memory and optionally mirrored to a JSON file.

    Every read returns a fresh copy so callers never share state with the
    store or with each other.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path
        self._lock = threading.RLock()
        self._records: Optional[Dict[str, Dict[str, Any]]] = None

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if self._records is None:
            records: Dict[str, Dict[str, Any]] = {}
            if self._path is not None and self._path.exists():
                data = orjson.loads(self._path.read_bytes() or b"{}")
                for item in data.get("events", []):
                    records[str(item["id"])] = item
            self._records = records
        return self._records

    def _persist(self) -> None:
        if self._path is None or self._records is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = orjson.dumps({"events": list(self._records.values())}, option=orjson.OPT_INDENT_2)
        self._path.write_bytes(payload + b"\n")

    def _select(self, predicate: Callable[[CalendarEvent], bool]) -> List[CalendarEvent]:
        with self._lock:
            events = [CalendarEvent.from_record(record) for record in self._load().values()]
        return sorted((event for event in events if predicate(event)), key=lambda event: event.starts_at)

    def create(self, event: CalendarEvent) -> CalendarEvent:
        now = datetime.now()
        event.created_at = event.created_at or now
        event.updated_at = now
        record = event.to_record()
        with self._lock:
            records = self._load()
            if event.id in records:
                raise ValueError(f"Event with ID {event.id} already exists.")
            records[event.id] = record
            self._persist()
        return CalendarEvent.from_record(record)

    def get_by_id(self, event_id: str) -> Optional[CalendarEvent]:
        with self._lock:
            record = self._load().get(event_id)
        return CalendarEvent.from_record(record) if record else None

    def get_by_client_reference_id(self, client_reference_id: str) -> Optional[CalendarEvent]:
        matches = self._select(lambda event: event.client_reference_id == client_reference_id)
        return matches[0] if matches else None

    def update(self, event: CalendarEvent) -> CalendarEvent:
        event.updated_at = datetime.now()
        record = event.to_record()
        with self._lock:
            records = self._load()
            if event.id not in records:
                raise EventNotFoundError(f"Event with ID {event.id} not found.")
            records[event.id] = record
            self._persist()
        return CalendarEvent.from_record(record)

    def list_all(self) -> List[CalendarEvent]:
        return self._select(lambda event: True)

    def list_between(self, start: datetime, end: datetime) -> List[CalendarEvent]:
        return self._select(lambda event: start <= event.starts_at <= end)

    def list_by_attendee(self, email: str) -> List[CalendarEvent]:
        return self._select(lambda event: any(attendee.email == email for attendee in event.attendees))

    def delete(self, event_id: str) -> bool:
        with self._lock:
            removed = self._load().pop(event_id, None)
            if removed is not None:
                self._persist()
        return removed is not None

    def delete_by_client_reference_id(self, client_reference_id: str) -> bool:
        existing = self.get_by_client_reference_id(client_reference_id)
        if existing is None:
            return False
        return self.delete(existing.id)

    def exists(self, event_id: str) -> bool:
        with self._lock:
            return event_id in self._load()
