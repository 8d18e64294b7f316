"""
Tests for the natural language command pipeline
"""
import json

import pytest

from ai_calendar.api.catalog import CANCEL_EVENT, CHECK_AVAILABILITY, FIND_EVENTS, SAVE_EVENT, UPDATE_EVENT
from ai_calendar.domain import Operation, OperationKind, ProposedEvent
from ai_calendar.orchestrator import ErrorCode, build_tool_request, tool_for

from conftest import FIXED_NOW


def _reply(**fields):
    return json.dumps(fields)


class TestToolMapping:
    def test_kinds_map_to_tools(self):
        assert tool_for(OperationKind.CREATE_EVENT) == SAVE_EVENT
        assert tool_for(OperationKind.UPDATE_EVENT) == UPDATE_EVENT
        assert tool_for(OperationKind.DELETE_EVENT) == CANCEL_EVENT
        assert tool_for(OperationKind.FIND_EVENT) == FIND_EVENTS
        assert tool_for(OperationKind.CHECK_AVAILABILITY) == CHECK_AVAILABILITY

    def test_everything_else_searches(self):
        assert tool_for(OperationKind.UNKNOWN) == FIND_EVENTS
        assert tool_for(OperationKind.SUGGEST_MEETING_TIME) == FIND_EVENTS

    def test_build_request_from_event(self):
        operation = Operation(
            kind=OperationKind.CHECK_AVAILABILITY,
            original_input="am I free",
            confidence=0.8,
            event=ProposedEvent(start=FIXED_NOW, end=FIXED_NOW.replace(hour=10)),
            entities=("Thursday", "afternoon"),
            metadata={"event_id": "evt-1"},
        )

        request = build_tool_request(operation)

        assert request.tool_name == CHECK_AVAILABILITY
        assert request.arguments == {
            "start_time": "2026-10-19T09:00:00",
            "end_time": "2026-10-19T10:00:00",
            "query": "Thursday afternoon",
            "exclude_event_id": "evt-1",
        }

    def test_context_supplies_ids(self):
        operation = Operation(
            kind=OperationKind.CREATE_EVENT,
            original_input="lunch",
            confidence=0.8,
            event=ProposedEvent(title="Lunch", start=FIXED_NOW, end=FIXED_NOW.replace(hour=10)),
        )
        request = build_tool_request(operation, {"client_reference_id": "ref-7", "event_id": "evt-9"})
        assert request.arguments["client_reference_id"] == "ref-7"
        assert request.arguments["title"] == "Lunch"


class TestProcess:
    def test_empty_command(self, orchestrator, generator):
        result = orchestrator.process("   ")

        assert result.success is False
        assert result.error_code is ErrorCode.INVALID_COMMAND
        assert result.message == "Command cannot be empty"
        assert generator.prompts == []

    def test_creates_event(self, orchestrator, generator, repository):
        generator.queue(
            _reply(
                operation_type="CreateEvent",
                confidence=0.9,
                title="Lunch with Sam",
                start_time="2026-10-20T12:00:00",
                end_time="2026-10-20T13:00:00",
            )
        )

        result = orchestrator.process("Lunch with Sam tomorrow at noon")

        assert result.success is True
        assert result.tool_name == SAVE_EVENT
        assert result.message == "Perfect! I've scheduled 'Lunch with Sam' for Oct 20, 2026 at 12:00 PM."
        assert result.event["title"] == "Lunch with Sam"
        assert repository.exists(result.event["id"])
        assert result.suggestions == []

    def test_unparseable_cancel_routes_to_search(self, orchestrator, generator, handlers, repository):
        handlers.save_event(
            {"title": "Dentist", "start_time": "2026-10-19T10:00:00", "end_time": "2026-10-19T11:00:00"}
        )
        generator.queue("Sorry, I am not sure what you mean.")

        result = orchestrator.process("Cancel my 10am appointment")

        assert result.success is True
        assert result.tool_name == FIND_EVENTS
        assert result.operation.kind is OperationKind.UNKNOWN
        assert result.operation.confidence <= 0.1
        assert result.result["count"] == 1
        assert [event.status.value for event in repository.list_all()] == ["Confirmed"]

    def test_generation_failure(self, orchestrator):
        result = orchestrator.process("Lunch tomorrow")

        assert result.success is False
        assert result.error_code is ErrorCode.PARSING_FAILED

    def test_missing_times_is_invalid_argument(self, orchestrator, generator):
        generator.queue(_reply(operation_type="CreateEvent", title="Lunch"))

        result = orchestrator.process("Lunch sometime")

        assert result.success is False
        assert result.error_code is ErrorCode.INVALID_ARGUMENT
        assert result.message.startswith("I encountered an issue while creating the event.")

    def test_reschedule_without_title_keeps_stored_title(self, orchestrator, generator, handlers, calendar):
        created = handlers.save_event(
            {"title": "Client call", "start_time": "2026-10-20T10:00:00", "end_time": "2026-10-20T11:00:00"}
        )["event"]
        generator.queue(
            _reply(
                operation_type="UpdateEvent",
                event_id=created["id"],
                start_time="2026-10-20T15:00:00",
                end_time="2026-10-20T16:00:00",
            )
        )

        result = orchestrator.process("move the client call to 3pm tomorrow")

        stored = calendar.get_event(created["id"])
        assert result.success is True
        assert "title" not in build_tool_request(result.operation).arguments
        assert stored.title == "Client call"
        assert stored.starts_at.hour == 15
        assert result.message == "Updated! I've modified 'Client call' as requested."

    def test_update_unknown_event(self, orchestrator, generator):
        generator.queue(_reply(operation_type="UpdateEvent", event_id="nope", title="Renamed"))

        result = orchestrator.process("Rename event nope")

        assert result.error_code is ErrorCode.EVENT_NOT_FOUND

    def test_cancel_unknown_event(self, orchestrator, generator):
        generator.queue(_reply(operation_type="DeleteEvent", event_id="12345"))

        result = orchestrator.process("Cancel event 12345")

        assert result.success is False
        assert result.error_code is ErrorCode.EVENT_NOT_FOUND
        assert result.tool_name == CANCEL_EVENT

    def test_cancel_known_event_from_context(self, orchestrator, generator, handlers, calendar):
        created = handlers.save_event(
            {"title": "Dentist", "start_time": "2026-10-19T10:00:00", "end_time": "2026-10-19T11:00:00"}
        )["event"]
        generator.queue(_reply(operation_type="DeleteEvent", title="Dentist"))

        result = orchestrator.process("Cancel my dentist appointment", {"event_id": created["id"]})

        assert result.success is True
        assert calendar.get_event(created["id"]).status.value == "Cancelled"

    def test_busy_slot_gets_suggestions(self, orchestrator, generator, handlers):
        handlers.save_event(
            {"title": "Review", "start_time": "2026-10-20T14:00:00", "end_time": "2026-10-20T15:00:00"}
        )
        generator.queue(
            _reply(
                operation_type="CheckAvailability",
                start_time="2026-10-20T14:30:00",
                end_time="2026-10-20T15:30:00",
            )
        )

        result = orchestrator.process("Am I free tomorrow at 2:30?")

        assert result.success is True
        assert result.result["available"] is False
        assert result.suggestions == [
            "Move to 15:30",
            "Schedule for tomorrow at 14:30",
            "Reduce meeting duration to 30 minutes",
        ]

    def test_unexpected_errors_never_escape(self, orchestrator, generator, monkeypatch):
        generator.queue(_reply(operation_type="FindEvent"))

        def explode(request):
            raise RuntimeError("dispatcher bug")

        monkeypatch.setattr(orchestrator.dispatcher, "dispatch", explode)
        result = orchestrator.process("What's on today?")

        assert result.success is False
        assert result.error_code is ErrorCode.PROCESSING_ERROR
        assert result.processing_time >= 0

    @pytest.mark.parametrize(
        "reply",
        ["", "null", "[]", '{"operation_type": null}', '{"confidence": "very"}', '{"attendees": "sam"}'],
    )
    def test_odd_model_output_still_returns_a_result(self, orchestrator, generator, reply):
        generator.queue(reply)
        result = orchestrator.process("something")
        assert result.success is True
        assert result.tool_name == FIND_EVENTS

    def test_suggest(self, orchestrator):
        suggestions = orchestrator.suggest("coffee with")

        assert len(suggestions) == 1
        assert suggestions[0].start == FIXED_NOW.replace(day=20, hour=10)
        assert suggestions[0].description == "Auto-suggested based on: coffee with"
        assert suggestions[0].to_dict()["status"] == "Tentative"

    def test_health_check(self, orchestrator, generator):
        assert orchestrator.health_check() is True
        generator.healthy = False
        assert orchestrator.health_check() is False
