"""
Tests for the MCP tool wrappers
"""
import pytest

from ai_calendar.api.catalog import CALENDAR_TOOLS
from ai_calendar.api.state import ApiState
import ai_calendar.services.mcp.server as mcp_server
from ai_calendar.services import mcp

from conftest import FakeGenerator


@pytest.fixture
def state(context, monkeypatch):
    state = ApiState(context=context, generator=FakeGenerator())
    monkeypatch.setattr(mcp_server, "get_api_state", lambda: state)
    return state


def test_every_catalog_tool_has_a_wrapper():
    assert set(mcp_server.MCP_TOOLS) == {tool.name for tool, _ in CALENDAR_TOOLS}


def test_wrappers_dispatch_and_drop_missing_arguments(state):
    saved = mcp_server.save_event("Demo", "2026-10-20T10:00:00", "2026-10-20T11:00:00")
    event_id = saved["result"]["event"]["id"]

    busy = mcp_server.check_availability("2026-10-20T10:30:00", "2026-10-20T11:30:00")
    cancelled = mcp_server.cancel_event(event_id)
    found = mcp_server.find_events(status="Cancelled")

    assert saved["success"] is True
    assert busy["result"]["available"] is False
    assert cancelled["result"]["message"] == "Event cancelled: Event cancelled"
    assert found["result"]["count"] == 1


def test_wrapper_reports_handler_errors(state):
    response = mcp_server.update_event("nope", title="Renamed")
    assert response["success"] is False
    assert response["metadata"]["error_type"] == "not_found"


def test_package_exposes_runner_and_server_module():
    assert mcp.server is mcp_server
    assert mcp.run_mcp_server is mcp_server.run_mcp_server
    assert mcp_server.server.name == "ai-calendar"
