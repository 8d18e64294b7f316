from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from ..domain import EventNotFoundError, ToolArgumentError
from .registry import ToolRegistry

logger = logging.getLogger(__name__)

NOT_INITIALIZED = "server not initialized"


class ToolRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    request_id: str = Field(default_factory=lambda: str(uuid4()))
    tool_name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ToolResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    request_id: str
    success: bool
    result: Any = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def error_type(self) -> Optional[str]:
        return self.metadata.get("error_type")


class ToolDispatcher:
    """Routes tool requests to registered handlers.

    Handler exceptions never cross this boundary; each one becomes a failed
    ``ToolResponse`` carrying the request id and an ``error_type``.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        self._initialized = True
        logger.info("Tool dispatcher initialized with %d tools", len(self.registry))

    def shutdown(self) -> None:
        self._initialized = False

    def is_healthy(self) -> bool:
        return self._initialized and len(self.registry) > 0

    def _failure(self, request: ToolRequest, error: str, error_type: str) -> ToolResponse:
        return ToolResponse(
            request_id=request.request_id,
            success=False,
            error=error,
            metadata={"tool": request.tool_name, "error_type": error_type},
        )

    def dispatch(self, request: ToolRequest) -> ToolResponse:
        if not self._initialized:
            return self._failure(request, NOT_INITIALIZED, "not_initialized")

        handler = self.registry.handler(request.tool_name)
        if handler is None:
            logger.warning("Tool not found: %s", request.tool_name)
            return self._failure(request, f"tool '{request.tool_name}' not found", "unknown_tool")

        logger.info("Executing tool %s (request %s)", request.tool_name, request.request_id)
        try:
            result = handler(request.arguments)
        except EventNotFoundError as exc:
            logger.info("Tool %s: %s", request.tool_name, exc)
            return self._failure(request, str(exc), "not_found")
        except ToolArgumentError as exc:
            logger.info("Tool %s rejected arguments: %s", request.tool_name, exc)
            return self._failure(request, str(exc), "invalid_argument")
        except Exception as exc:  # noqa: BLE001
            logger.exception("Tool %s failed", request.tool_name)
            return self._failure(request, f"Tool execution failed: {exc}", "execution_failed")

        return ToolResponse(
            request_id=request.request_id,
            success=True,
            result=result,
            metadata={"tool": request.tool_name, "timestamp": datetime.now(timezone.utc).isoformat()},
        )
