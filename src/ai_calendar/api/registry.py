from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

JsonSchema = Dict[str, Any]
ToolHandler = Callable[[Mapping[str, Any]], Dict[str, Any]]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    parameters: JsonSchema = field(default_factory=lambda: {"type": "object", "properties": {}})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


class ToolRegistry:
    """Process-wide catalog of tools and their handlers.

    Populated once at start-up; afterwards it is only read, so concurrent
    dispatches need no locking.
    """

    def __init__(self) -> None:
        self._tools: Dict[str, Tool] = {}
        self._handlers: Dict[str, ToolHandler] = {}

    def register(self, tool: Tool, handler: ToolHandler) -> bool:
        """Register ``tool``; returns ``False`` when the name is already taken."""

        if tool.name in self._tools:
            logger.debug("Tool %s already registered; ignoring", tool.name)
            return False
        self._tools[tool.name] = tool
        self._handlers[tool.name] = handler
        logger.info("Registered tool: %s", tool.name)
        return True

    def list_tools(self) -> List[Tool]:
        return list(self._tools.values())

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def handler(self, name: str) -> Optional[ToolHandler]:
        return self._handlers.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
