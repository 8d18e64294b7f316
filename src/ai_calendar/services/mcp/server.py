from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from fastmcp import FastMCP

from ...api.catalog import CALENDAR_TOOLS, CANCEL_EVENT, CHECK_AVAILABILITY, FIND_EVENTS, SAVE_EVENT, UPDATE_EVENT
from ...api.dispatcher import ToolRequest
from ...api.state import get_api_state
from ...bootstrap import configure_logging

INSTRUCTIONS = (
    "AI Calendar MCP server exposes calendar tools. "
    "Use them to save, update, cancel and find events and to check availability."
)

configure_logging()
logger = logging.getLogger(__name__)

server = FastMCP(name="ai-calendar", instructions=INSTRUCTIONS)


def _call(tool_name: str, **arguments: Any) -> Dict[str, Any]:
    present = {key: value for key, value in arguments.items() if value is not None}
    response = get_api_state().dispatcher.dispatch(ToolRequest(tool_name=tool_name, arguments=present))
    return response.model_dump()


def save_event(
    title: str,
    start_time: str,
    end_time: str,
    description: Optional[str] = None,
    location: Optional[str] = None,
    attendees: Optional[List[str]] = None,
    client_reference_id: Optional[str] = None,
) -> Dict[str, Any]:
    return _call(
        SAVE_EVENT,
        title=title,
        start_time=start_time,
        end_time=end_time,
        description=description,
        location=location,
        attendees=attendees,
        client_reference_id=client_reference_id,
    )


def update_event(
    id: str,
    title: Optional[str] = None,
    description: Optional[str] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    location: Optional[str] = None,
    status: Optional[str] = None,
) -> Dict[str, Any]:
    return _call(
        UPDATE_EVENT,
        id=id,
        title=title,
        description=description,
        start_time=start_time,
        end_time=end_time,
        location=location,
        status=status,
    )


def cancel_event(id: str, reason: Optional[str] = None) -> Dict[str, Any]:
    return _call(CANCEL_EVENT, id=id, reason=reason)


def find_events(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    title_contains: Optional[str] = None,
    location_contains: Optional[str] = None,
    status: Optional[str] = None,
) -> Dict[str, Any]:
    return _call(
        FIND_EVENTS,
        start_date=start_date,
        end_date=end_date,
        title_contains=title_contains,
        location_contains=location_contains,
        status=status,
    )


def check_availability(start_time: str, end_time: str, exclude_event_id: Optional[str] = None) -> Dict[str, Any]:
    return _call(CHECK_AVAILABILITY, start_time=start_time, end_time=end_time, exclude_event_id=exclude_event_id)


MCP_TOOLS: Dict[str, Callable[..., Dict[str, Any]]] = {
    SAVE_EVENT: save_event,
    UPDATE_EVENT: update_event,
    CANCEL_EVENT: cancel_event,
    FIND_EVENTS: find_events,
    CHECK_AVAILABILITY: check_availability,
}

for tool, _ in CALENDAR_TOOLS:
    logger.debug("Registering MCP tool: %s", tool.name)
    server.tool(
        MCP_TOOLS[tool.name],
        name=tool.name,
        description=tool.description,
        tags={"calendar"},
    )


def run_mcp_server(host: str = "127.0.0.1", port: int = 8765) -> None:
    import asyncio

    asyncio.run(server.run_streamable_http_async(host=host, port=port))
