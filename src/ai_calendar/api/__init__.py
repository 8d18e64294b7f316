"""Tool catalog, dispatcher and calendar handlers."""

from __future__ import annotations

from .catalog import CALENDAR_TOOLS, register_calendar_tools
from .dispatcher import ToolDispatcher, ToolRequest, ToolResponse
from .handlers import CalendarToolHandlers
from .registry import Tool, ToolRegistry

__all__ = [
    "CALENDAR_TOOLS",
    "CalendarToolHandlers",
    "Tool",
    "ToolDispatcher",
    "ToolRegistry",
    "ToolRequest",
    "ToolResponse",
    "register_calendar_tools",
]
