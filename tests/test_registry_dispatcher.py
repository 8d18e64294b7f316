"""
Tests for the tool registry and dispatcher
"""
from ai_calendar.api.catalog import CALENDAR_TOOLS, FIND_EVENTS, SAVE_EVENT, register_calendar_tools
from ai_calendar.api.dispatcher import ToolDispatcher, ToolRequest
from ai_calendar.api.registry import Tool, ToolRegistry
from ai_calendar.domain import EventNotFoundError, ToolArgumentError


class TestToolRegistry:
    def test_catalog_registers_five_tools(self, registry):
        assert len(registry) == 5
        assert {tool.name for tool in registry.list_tools()} == {tool.name for tool, _ in CALENDAR_TOOLS}

    def test_registration_is_idempotent(self, registry, handlers):
        first = registry.get(SAVE_EVENT)

        assert register_calendar_tools(registry, handlers) == 0
        assert len(registry) == 5
        assert registry.get(SAVE_EVENT) is first

    def test_register_returns_false_for_taken_name(self):
        registry = ToolRegistry()
        tool = Tool(name="demo", description="demo tool")

        assert registry.register(tool, lambda arguments: {"first": True}) is True
        assert registry.register(tool, lambda arguments: {"second": True}) is False
        assert registry.handler("demo")({}) == {"first": True}

    def test_tool_schema(self, registry):
        tool = registry.get(SAVE_EVENT)
        assert tool.parameters["required"] == ["title", "start_time", "end_time"]
        assert tool.to_dict()["parameters"]["type"] == "object"
        assert "calendar.save_event" in registry


class TestToolDispatcher:
    def test_rejects_requests_before_initialize(self, registry):
        dispatcher = ToolDispatcher(registry)
        response = dispatcher.dispatch(ToolRequest(tool_name=FIND_EVENTS))

        assert response.success is False
        assert response.error == "server not initialized"
        assert dispatcher.is_healthy() is False

    def test_unknown_tool(self, dispatcher):
        request = ToolRequest(tool_name="calendar.teleport")
        response = dispatcher.dispatch(request)

        assert response.success is False
        assert response.request_id == request.request_id
        assert response.error == "tool 'calendar.teleport' not found"
        assert response.error_type == "unknown_tool"

    def test_success_carries_metadata(self, dispatcher):
        response = dispatcher.dispatch(ToolRequest(tool_name=FIND_EVENTS))

        assert response.success is True
        assert response.result == {"success": True, "events": [], "count": 0}
        assert response.metadata["tool"] == FIND_EVENTS
        assert response.metadata["timestamp"].endswith("+00:00")

    def test_handler_exceptions_become_failed_responses(self):
        registry = ToolRegistry()
        registry.register(Tool("boom", "raises"), _raise(RuntimeError("disk on fire")))
        registry.register(Tool("missing", "raises"), _raise(EventNotFoundError("Event with ID 9 not found")))
        registry.register(Tool("bad", "raises"), _raise(ToolArgumentError("Event ID is required")))
        dispatcher = ToolDispatcher(registry)
        dispatcher.initialize()

        boom = dispatcher.dispatch(ToolRequest(tool_name="boom"))
        missing = dispatcher.dispatch(ToolRequest(tool_name="missing"))
        bad = dispatcher.dispatch(ToolRequest(tool_name="bad"))

        assert (boom.error, boom.error_type) == ("Tool execution failed: disk on fire", "execution_failed")
        assert (missing.error, missing.error_type) == ("Event with ID 9 not found", "not_found")
        assert (bad.error, bad.error_type) == ("Event ID is required", "invalid_argument")

    def test_shutdown(self, dispatcher):
        assert dispatcher.is_healthy() is True
        dispatcher.shutdown()
        assert dispatcher.is_initialized is False


def _raise(exc):
    def handler(arguments):
        raise exc

    return handler
