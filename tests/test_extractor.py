"""
Tests for intent extraction from model output
"""
from datetime import datetime, timedelta

import pytest

from ai_calendar.domain import OperationKind
from ai_calendar.llm.client import TextGenerationError
from ai_calendar.llm.extractor import FALLBACK_CONFIDENCE, first_json_object

from conftest import FIXED_NOW

CREATE_REPLY = """Sure! Here is the parsed request:
{
    "operation_type": "CreateEvent",
    "confidence": 0.92,
    "title": "Lunch with Sam",
    "description": "Catch up {informal}",
    "start_time": "2026-10-20T12:00:00",
    "end_time": "2026-10-20T13:00:00",
    "location": "Cafe",
    "attendees": ["sam@example.com"],
    "extracted_entities": ["Sam", "lunch", "tomorrow"],
    "intent": "Create a lunch event"
}
Let me know if you need anything else."""


class TestFirstJsonObject:
    def test_ignores_braces_inside_strings(self):
        text = 'noise {"a": "}{", "b": {"c": 1}} trailing {"d": 2}'
        assert first_json_object(text) == '{"a": "}{", "b": {"c": 1}}'

    def test_no_object(self):
        assert first_json_object("I could not understand that.") is None
        assert first_json_object('{"unterminated": true') is None


class TestParse:
    def test_prose_wrapped_json(self, extractor):
        operation = extractor.parse(CREATE_REPLY, "Lunch with Sam tomorrow at noon")

        assert operation.kind is OperationKind.CREATE_EVENT
        assert operation.confidence == pytest.approx(0.92)
        assert operation.event.title == "Lunch with Sam"
        assert operation.event.start == datetime(2026, 10, 20, 12, 0)
        assert operation.event.end == datetime(2026, 10, 20, 13, 0)
        assert operation.event.attendees == ("sam@example.com",)
        assert operation.entities == ("Sam", "lunch", "tomorrow")
        assert operation.parsed_intent == "Create a lunch event"

    def test_non_json_output_falls_back(self, extractor):
        operation = extractor.parse("I think you want a meeting?", "Cancel my 10am appointment", now=FIXED_NOW)

        assert operation.kind is OperationKind.UNKNOWN
        assert operation.confidence == FALLBACK_CONFIDENCE
        assert operation.parsed_intent == "Unable to parse request clearly"
        assert operation.event.title == "Parsed Event"
        assert operation.event.description == "Cancel my 10am appointment"
        assert operation.event.start == FIXED_NOW + timedelta(hours=1)
        assert operation.event.end == FIXED_NOW + timedelta(hours=2)
        assert operation.metadata == {"fallback": True}

    def test_invalid_json_falls_back(self, extractor):
        operation = extractor.parse('{"operation_type": CreateEvent}', "hello")
        assert operation.kind is OperationKind.UNKNOWN
        assert operation.confidence <= FALLBACK_CONFIDENCE

    def test_unknown_operation_type_caps_confidence(self, extractor):
        operation = extractor.parse('{"operation_type": "Teleport", "confidence": 0.99}', "beam me up")

        assert operation.kind is OperationKind.UNKNOWN
        assert operation.confidence <= FALLBACK_CONFIDENCE
        assert operation.event is None

    def test_bad_timestamps_become_missing(self, extractor):
        operation = extractor.parse(
            '{"operation_type": "CreateEvent", "start_time": "whenever", "end_time": 42}', "meet"
        )
        assert operation.event.start is None
        assert operation.event.end is None
        assert operation.event.title is None

    def test_confidence_is_clamped(self, extractor):
        operation = extractor.parse('{"operation_type": "FindEvent", "confidence": 7}', "what's on")
        assert operation.confidence == 1.0

    def test_event_id_is_kept(self, extractor):
        operation = extractor.parse('{"operation_type": "DeleteEvent", "event_id": 17}', "cancel 17")
        assert operation.metadata == {"event_id": "17"}


class TestExtract:
    def test_success(self, extractor, generator):
        generator.queue(CREATE_REPLY)

        result = extractor.extract("Lunch with Sam tomorrow at noon", {"timezone": "UTC"})

        assert result.success is True
        assert result.operation.kind is OperationKind.CREATE_EVENT
        assert 'User Input: "Lunch with Sam tomorrow at noon"' in generator.prompts[0]
        assert 'Context: {"timezone":"UTC"}' in generator.prompts[0]
        assert "Current time: 2026-10-19T09:00:00" in generator.prompts[0]
        assert "Today is: Monday, October 19, 2026" in generator.prompts[0]

    def test_generation_failure_is_unsuccessful(self, extractor, generator):
        generator.queue(TextGenerationError("LLM request failed: 500"))

        result = extractor.extract("anything")

        assert result.success is False
        assert result.operation is None
        assert "500" in result.message

    def test_unexpected_failure_is_unsuccessful(self, extractor, generator):
        generator.queue(RuntimeError("socket closed"))
        result = extractor.extract("anything")
        assert result.success is False
        assert result.message == "Processing error: socket closed"
