from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..api.catalog import CANCEL_EVENT, CHECK_AVAILABILITY, FIND_EVENTS, SAVE_EVENT, UPDATE_EVENT
from ..api.dispatcher import ToolDispatcher, ToolRequest, ToolResponse
from ..domain import Operation, OperationKind
from ..llm import IntentExtractor, ResponseSynthesizer
from ..services import suggest_alternatives
from ..utils import parse_timestamp
from .suggestions import EventSuggestion, suggest_events

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    INVALID_COMMAND = "INVALID_COMMAND"
    PARSING_FAILED = "PARSING_FAILED"
    EXECUTION_FAILED = "EXECUTION_FAILED"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    PROCESSING_ERROR = "PROCESSING_ERROR"


# Anything not listed, Unknown included, becomes a search rather than a mutation.
TOOL_FOR_KIND: Dict[OperationKind, str] = {
    OperationKind.CREATE_EVENT: SAVE_EVENT,
    OperationKind.UPDATE_EVENT: UPDATE_EVENT,
    OperationKind.DELETE_EVENT: CANCEL_EVENT,
    OperationKind.FIND_EVENT: FIND_EVENTS,
    OperationKind.CHECK_AVAILABILITY: CHECK_AVAILABILITY,
}

_ERROR_CODES: Dict[Optional[str], ErrorCode] = {
    "not_found": ErrorCode.EVENT_NOT_FOUND,
    "invalid_argument": ErrorCode.INVALID_ARGUMENT,
}


def tool_for(kind: OperationKind) -> str:
    return TOOL_FOR_KIND.get(kind, FIND_EVENTS)


def build_tool_request(operation: Operation, context: Optional[Mapping[str, Any]] = None) -> ToolRequest:
    """Map an operation onto a tool name and its argument map."""

    context = context or {}
    tool_name = tool_for(operation.kind)
    arguments: Dict[str, Any] = {}

    event = operation.event
    if event is not None:
        for key in ("title", "description", "location"):
            value = getattr(event, key)
            if value:
                arguments[key] = value
        if event.start:
            arguments["start_time"] = event.start.isoformat()
        if event.end:
            arguments["end_time"] = event.end.isoformat()
        if event.attendees:
            arguments["attendees"] = list(event.attendees)
        if tool_name == FIND_EVENTS and operation.kind is OperationKind.FIND_EVENT and event.start:
            arguments["start_date"] = event.start.date().isoformat()
            arguments["end_date"] = (event.end or event.start).date().isoformat()

    if operation.entities:
        arguments["query"] = " ".join(operation.entities)
    if operation.parsed_intent:
        arguments["intent"] = operation.parsed_intent

    event_id = operation.metadata.get("event_id") or context.get("event_id")
    if event_id:
        key = "exclude_event_id" if tool_name == CHECK_AVAILABILITY else "id"
        arguments[key] = str(event_id)
    if tool_name == SAVE_EVENT and context.get("client_reference_id"):
        arguments["client_reference_id"] = str(context["client_reference_id"])

    return ToolRequest(tool_name=tool_name, arguments=arguments)


@dataclass
class CommandResult:
    success: bool
    message: str
    operation: Optional[Operation] = None
    event: Optional[Dict[str, Any]] = None
    result: Any = None
    suggestions: List[str] = field(default_factory=list)
    error_code: Optional[ErrorCode] = None
    tool_name: Optional[str] = None
    processing_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "operation": self.operation.to_dict() if self.operation else None,
            "event": self.event,
            "result": self.result,
            "suggestions": list(self.suggestions),
            "error_code": self.error_code.value if self.error_code else None,
            "tool_name": self.tool_name,
            "processing_time": self.processing_time,
        }


class CommandOrchestrator:
    """Runs one free-text command through extraction, dispatch and synthesis.

    ``process`` always returns a ``CommandResult``; failures are reported with
    an ``ErrorCode`` instead of being raised.
    """

    def __init__(
        self,
        extractor: IntentExtractor,
        dispatcher: ToolDispatcher,
        synthesizer: Optional[ResponseSynthesizer] = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.extractor = extractor
        self.dispatcher = dispatcher
        self.synthesizer = synthesizer or ResponseSynthesizer()
        self._clock = clock

    def process(self, raw_text: str, context: Optional[Mapping[str, Any]] = None) -> CommandResult:
        started = time.perf_counter()
        if not raw_text or not raw_text.strip():
            return CommandResult(
                success=False,
                message="Command cannot be empty",
                error_code=ErrorCode.INVALID_COMMAND,
            )

        logger.info("Processing natural language command: %s", raw_text)
        try:
            result = self._process(raw_text, dict(context or {}))
        except Exception:  # noqa: BLE001
            logger.exception("Error processing natural language command: %s", raw_text)
            result = CommandResult(
                success=False,
                message="An error occurred while processing your request",
                error_code=ErrorCode.PROCESSING_ERROR,
            )
        result.processing_time = time.perf_counter() - started
        return result

    def _process(self, raw_text: str, context: Dict[str, Any]) -> CommandResult:
        extraction = self.extractor.extract(raw_text, context)
        operation = extraction.operation
        if not extraction.success or operation is None:
            return CommandResult(
                success=False,
                message=extraction.message or "Unable to parse the command",
                error_code=ErrorCode.PARSING_FAILED,
            )

        request = build_tool_request(operation, context)
        response = self.dispatcher.dispatch(request)
        if not response.success:
            logger.warning("Tool execution failed: %s", response.error)
            return CommandResult(
                success=False,
                message=self.synthesizer.compose(operation, False, response.error),
                operation=operation,
                error_code=_ERROR_CODES.get(response.error_type, ErrorCode.EXECUTION_FAILED),
                tool_name=request.tool_name,
            )

        payload = response.result if isinstance(response.result, dict) else {}
        if payload.get("success") is False:
            return CommandResult(
                success=False,
                message=self.synthesizer.compose(operation, False, payload.get("message")),
                operation=operation,
                result=response.result,
                error_code=ErrorCode.EVENT_NOT_FOUND,
                tool_name=request.tool_name,
            )

        event = payload.get("event")
        stored_title = event.get("title") if isinstance(event, dict) else None
        return CommandResult(
            success=True,
            message=self.synthesizer.compose(operation, True, title=stored_title),
            operation=operation,
            event=event,
            result=response.result,
            suggestions=self._suggestions(request, response),
            tool_name=request.tool_name,
        )

    def _suggestions(self, request: ToolRequest, response: ToolResponse) -> List[str]:
        payload = response.result if isinstance(response.result, dict) else {}
        conflicted = payload.get("available") is False or bool(payload.get("conflicts"))
        start = parse_timestamp(request.arguments.get("start_time"))
        if not conflicted or start is None:
            return []
        return suggest_alternatives(start)

    def suggest(self, partial_input: str) -> List[EventSuggestion]:
        return suggest_events(partial_input, self._clock())

    def health_check(self) -> bool:
        return self.extractor.health_check()
