from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..config import AppSettings, get_settings
from ..data import EventStore, JsonEventRepository, SupabaseEventRepository, SupabaseGateway

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings and the event store."""

    settings: AppSettings = field(default_factory=get_settings)
    store: Optional[EventStore] = None

    def __post_init__(self) -> None:
        if self.store is None:
            self.store = self._build_store()

    def _build_store(self) -> EventStore:
        storage = self.settings.storage
        if storage.backend == "supabase":
            logger.info("Using Supabase event store (table %s)", storage.events_table)
            return SupabaseEventRepository(
                gateway=SupabaseGateway(self.settings.supabase),
                table_name=storage.events_table,
            )
        logger.info("Using JSON event store (%s)", storage.events_file or "in-memory")
        return JsonEventRepository(storage.events_file)
