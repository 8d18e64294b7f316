from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

import orjson

CALENDAR_PROMPT_TEMPLATE = """You are an AI calendar assistant. Parse the following natural language input and extract calendar operation details.

{context_line}User Input: "{user_input}"

Extract and return in this exact JSON format:
{{
    "operation_type": "CreateEvent|UpdateEvent|DeleteEvent|FindEvent|CheckAvailability|SuggestMeetingTime",
    "confidence": 0.0-1.0,
    "title": "event title",
    "description": "event description",
    "start_time": "YYYY-MM-DDTHH:mm:ss",
    "end_time": "YYYY-MM-DDTHH:mm:ss",
    "location": "event location",
    "attendees": ["email1", "email2"],
    "event_id": "id of the existing event, if known",
    "extracted_entities": ["entity1", "entity2"],
    "intent": "parsed intent description"
}}

Current time: {now:%Y-%m-%dT%H:%M:%S}
Today is: {now:%A, %B %d, %Y}

Parse the input and provide structured JSON response:"""


def _serialize_context(context: Mapping[str, Any]) -> str:
    return orjson.dumps(dict(context), default=str, option=orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS).decode()


def build_calendar_prompt(user_input: str, context: Optional[Mapping[str, Any]], now: datetime) -> str:
    context_line = f"Context: {_serialize_context(context)}\n" if context else ""
    return CALENDAR_PROMPT_TEMPLATE.format(context_line=context_line, user_input=user_input, now=now)
