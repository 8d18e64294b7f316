"""Small shared helpers."""

from __future__ import annotations

from .timeutils import as_naive, format_when, parse_timestamp

__all__ = ["as_naive", "format_when", "parse_timestamp"]
