"""Turn free text into a typed ``Operation`` via a text-generation model.

The model is untrusted: it may wrap its JSON in prose, emit invalid JSON,
invent operation types or return nonsense timestamps. Anything that cannot
be read structurally degrades to a low-confidence ``Unknown`` operation; only
a failure to reach the model at all is reported as an unsuccessful result.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import orjson
from pydantic import BaseModel, ConfigDict, ValidationError

from ..config import LlmSettings
from ..domain import Operation, OperationKind, ProposedEvent
from ..utils import parse_timestamp
from .client import TextGenerationError, TextGenerator
from .prompts import build_calendar_prompt

logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE = 0.1
FALLBACK_TITLE = "Parsed Event"
FALLBACK_INTENT = "Unable to parse request clearly"
DEFAULT_CONFIDENCE = 0.5


class _ModelOutput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    operation_type: Optional[str] = None
    confidence: float = DEFAULT_CONFIDENCE
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: Any = None
    end_time: Any = None
    attendees: Any = None
    event_id: Any = None
    extracted_entities: Any = None
    intent: Optional[str] = None


@dataclass
class ExtractionResult:
    success: bool
    message: str
    operation: Optional[Operation] = None
    processing_time: float = 0.0
    context: Dict[str, Any] = field(default_factory=dict)


def first_json_object(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` span in ``text``, ignoring braces inside strings."""

    start = text.find("{")
    if start == -1:
        return None
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


def _strings(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str) and item)


def _kind(value: Optional[str]) -> OperationKind:
    if not value:
        return OperationKind.UNKNOWN
    try:
        return OperationKind(value)
    except ValueError:
        return OperationKind.UNKNOWN


def _event_id(value: Any) -> Optional[str]:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return None
    return str(value).strip() or None


def _confidence(value: float) -> float:
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


class IntentExtractor:
    def __init__(
        self,
        generator: TextGenerator,
        settings: LlmSettings,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.generator = generator
        self.settings = settings
        self._clock = clock

    def extract(self, raw_text: str, context: Optional[Mapping[str, Any]] = None) -> ExtractionResult:
        started = time.perf_counter()
        context_dict = dict(context or {})
        now = self._clock()
        prompt = build_calendar_prompt(raw_text, context_dict, now)

        try:
            generated = self.generator.generate(
                prompt,
                model=self.settings.model,
                temperature=self.settings.temperature,
                max_tokens=self.settings.max_tokens,
            )
        except TextGenerationError as exc:
            logger.warning("Text generation failed: %s", exc)
            return ExtractionResult(
                success=False,
                message=str(exc),
                processing_time=time.perf_counter() - started,
                context=context_dict,
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("Error processing natural language input: %s", raw_text)
            return ExtractionResult(
                success=False,
                message=f"Processing error: {exc}",
                processing_time=time.perf_counter() - started,
                context=context_dict,
            )

        operation = self.parse(generated, raw_text, now=now)
        return ExtractionResult(
            success=True,
            message="Successfully processed natural language input",
            operation=operation,
            processing_time=time.perf_counter() - started,
            context=context_dict,
        )

    def parse(self, generated: str, raw_text: str, *, now: Optional[datetime] = None) -> Operation:
        """Parse model output into an ``Operation``; never raises."""

        now = now or self._clock()
        span = first_json_object(generated or "")
        if span is None:
            logger.warning("Model output has no JSON object; using fallback")
            return self.fallback(raw_text, now)
        try:
            payload = orjson.loads(span)
            output = _ModelOutput.model_validate(payload)
        except (orjson.JSONDecodeError, ValidationError) as exc:
            logger.warning("Failed to parse model output, using fallback: %s", exc)
            return self.fallback(raw_text, now)

        kind = _kind(output.operation_type)
        metadata: Dict[str, Any] = {}
        event_id = _event_id(output.event_id)
        if event_id:
            metadata["event_id"] = event_id

        if kind is OperationKind.UNKNOWN:
            return Operation(
                kind=kind,
                original_input=raw_text,
                confidence=min(_confidence(output.confidence), FALLBACK_CONFIDENCE),
                parsed_intent=output.intent or "",
                entities=_strings(output.extracted_entities),
                metadata=metadata,
            )

        event = ProposedEvent(
            title=output.title or None,
            description=output.description or None,
            location=output.location or None,
            start=parse_timestamp(output.start_time),
            end=parse_timestamp(output.end_time),
            attendees=_strings(output.attendees),
        )
        return Operation(
            kind=kind,
            original_input=raw_text,
            confidence=_confidence(output.confidence),
            event=event,
            parsed_intent=output.intent or "",
            entities=_strings(output.extracted_entities),
            metadata=metadata,
        )

    def fallback(self, raw_text: str, now: datetime) -> Operation:
        return Operation(
            kind=OperationKind.UNKNOWN,
            original_input=raw_text,
            confidence=FALLBACK_CONFIDENCE,
            parsed_intent=FALLBACK_INTENT,
            event=ProposedEvent(
                title=FALLBACK_TITLE,
                description=raw_text,
                start=now + timedelta(hours=1),
                end=now + timedelta(hours=2),
            ),
            metadata={"fallback": True},
        )

    def health_check(self) -> bool:
        return self.generator.health_check()
