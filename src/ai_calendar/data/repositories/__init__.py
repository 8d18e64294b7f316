"""Event repositories backing the calendar service."""

from __future__ import annotations

from .events import SupabaseEventRepository
from .local import JsonEventRepository

__all__ = ["JsonEventRepository", "SupabaseEventRepository"]
