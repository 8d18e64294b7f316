"""
Pytest configuration and fixtures
"""
import os
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

os.environ.setdefault("AI_CALENDAR_LOG_DIR", str(Path(tempfile.gettempdir()) / "ai-calendar-test-logs"))

import pytest

from ai_calendar.api.catalog import register_calendar_tools
from ai_calendar.api.dispatcher import ToolDispatcher
from ai_calendar.api.handlers import CalendarToolHandlers
from ai_calendar.api.registry import ToolRegistry
from ai_calendar.config import AppSettings, LlmSettings, ServerSettings, StorageSettings, SupabaseSettings
from ai_calendar.data import JsonEventRepository
from ai_calendar.domain import CalendarEvent
from ai_calendar.llm import IntentExtractor, ResponseSynthesizer, TextGenerationError
from ai_calendar.orchestrator import CommandOrchestrator
from ai_calendar.services import CalendarService, ServiceContext

FIXED_NOW = datetime(2026, 10, 19, 9, 0)


class FakeGenerator:
    """Scripted text generator: returns queued replies and records prompts."""

    def __init__(self, *replies, healthy=True):
        self.replies = list(replies)
        self.prompts = []
        self.healthy = healthy

    def queue(self, *replies):
        self.replies.extend(replies)

    def generate(self, prompt, *, model, temperature, max_tokens):
        self.prompts.append(prompt)
        if not self.replies:
            raise TextGenerationError("LLM request failed: 503")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def health_check(self):
        return self.healthy


def make_event(title="Standup", start=None, hours=1, **kwargs):
    start = start or FIXED_NOW.replace(hour=10)
    return CalendarEvent(id="", title=title, starts_at=start, ends_at=start + timedelta(hours=hours), **kwargs)


@pytest.fixture
def settings():
    """Test configuration"""
    return AppSettings(
        llm=LlmSettings(
            provider="ollama",
            model="llama3.1:latest",
            base_url="http://ollama.test",
            temperature=0.1,
            max_tokens=1000,
            timeout=timedelta(seconds=5),
        ),
        supabase=SupabaseSettings(url=None, anon_key=None),
        storage=StorageSettings(backend="json", events_file=None, events_table="calendar_events"),
        server=ServerSettings(host="127.0.0.1", port=8000, mcp_port=8765),
    )


@pytest.fixture
def repository():
    return JsonEventRepository()


@pytest.fixture
def context(settings, repository):
    return ServiceContext(settings=settings, store=repository)


@pytest.fixture
def calendar(context):
    return CalendarService(context)


@pytest.fixture
def handlers(calendar):
    return CalendarToolHandlers(calendar)


@pytest.fixture
def registry(handlers):
    registry = ToolRegistry()
    register_calendar_tools(registry, handlers)
    return registry


@pytest.fixture
def dispatcher(registry):
    dispatcher = ToolDispatcher(registry)
    dispatcher.initialize()
    return dispatcher


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def extractor(generator, settings):
    return IntentExtractor(generator, settings.llm, clock=lambda: FIXED_NOW)


@pytest.fixture
def orchestrator(extractor, dispatcher):
    return CommandOrchestrator(
        extractor,
        dispatcher,
        ResponseSynthesizer(choose=lambda options: options[0]),
        clock=lambda: FIXED_NOW,
    )
