from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from ..llm import IntentExtractor, ResponseSynthesizer, TextGenerator, build_text_generator
from ..orchestrator import CommandOrchestrator
from ..services import CalendarService, ServiceContext
from .catalog import register_calendar_tools
from .dispatcher import ToolDispatcher
from .handlers import CalendarToolHandlers
from .registry import ToolRegistry


@dataclass(slots=True)
class ApiState:
    context: ServiceContext = field(default_factory=ServiceContext)
    generator: Optional[TextGenerator] = None
    calendar: CalendarService = field(init=False)
    registry: ToolRegistry = field(init=False)
    dispatcher: ToolDispatcher = field(init=False)
    orchestrator: CommandOrchestrator = field(init=False)

    def __post_init__(self) -> None:
        settings = self.context.settings
        self.calendar = CalendarService(self.context)
        self.registry = ToolRegistry()
        register_calendar_tools(self.registry, CalendarToolHandlers(self.calendar))
        self.dispatcher = ToolDispatcher(self.registry)
        self.dispatcher.initialize()
        if self.generator is None:
            self.generator = build_text_generator(settings.llm)
        self.orchestrator = CommandOrchestrator(
            IntentExtractor(self.generator, settings.llm),
            self.dispatcher,
            ResponseSynthesizer(),
        )


@lru_cache(maxsize=1)
def get_api_state() -> ApiState:
    return ApiState()
