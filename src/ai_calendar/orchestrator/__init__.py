"""Natural-language command pipeline."""

from __future__ import annotations

from .pipeline import CommandOrchestrator, CommandResult, ErrorCode, build_tool_request, tool_for
from .suggestions import EventSuggestion, suggest_events

__all__ = [
    "CommandOrchestrator",
    "CommandResult",
    "ErrorCode",
    "EventSuggestion",
    "build_tool_request",
    "suggest_events",
    "tool_for",
]
