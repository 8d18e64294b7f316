"""Data access layer."""

from __future__ import annotations

from .repositories import JsonEventRepository, SupabaseEventRepository
from .store import EventStore
from .supabase import SupabaseGateway, SupabaseNotInitializedError

__all__ = [
    "EventStore",
    "JsonEventRepository",
    "SupabaseEventRepository",
    "SupabaseGateway",
    "SupabaseNotInitializedError",
]
