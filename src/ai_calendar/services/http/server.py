from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ... import __version__
from ...api.dispatcher import ToolRequest
from ...api.state import ApiState, get_api_state
from ...bootstrap import configure_logging
from ...orchestrator import ErrorCode
from .errors import error_response
from .events import router as events_router

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="AI Calendar API", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(events_router)

EXAMPLE_COMMANDS = [
    "Schedule a meeting with John tomorrow at 2 PM",
    "Create a team standup every Monday at 9 AM",
    "Book a dentist appointment next Friday at 3:30 PM",
    "Move my 3 PM meeting to 4 PM",
    "Cancel my lunch meeting today",
    "What meetings do I have tomorrow?",
    "Am I free on Thursday afternoon?",
    "Find a time for a 1 hour meeting with the design team this week",
]

_STATUS_FOR_CODE: Dict[ErrorCode, int] = {
    ErrorCode.EVENT_NOT_FOUND: 404,
    ErrorCode.PROCESSING_ERROR: 500,
}

_STATUS_FOR_TOOL_ERROR: Dict[str, int] = {
    "not_initialized": 503,
    "unknown_tool": 404,
    "not_found": 404,
    "invalid_argument": 400,
    "execution_failed": 500,
}


class NaturalLanguageRequest(BaseModel):
    command: str = Field(min_length=1, max_length=1000)
    context: Optional[Dict[str, Any]] = None


class NaturalLanguageResponse(BaseModel):
    success: bool
    message: str
    operation: Optional[Dict[str, Any]] = None
    event: Optional[Dict[str, Any]] = None
    suggestions: List[str] = Field(default_factory=list)
    processing_time: float = 0.0


class ToolCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)


@app.exception_handler(RequestValidationError)
async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
    if request.url.path.startswith("/api/naturallanguage"):
        return error_response(400, ErrorCode.INVALID_COMMAND.value, "Invalid request body")
    return error_response(400, "VALIDATION_ERROR", "The request contains invalid data")


@app.post("/api/naturallanguage/command")
async def process_command(
    request: NaturalLanguageRequest,
    state: ApiState = Depends(get_api_state),
) -> JSONResponse:
    result = state.orchestrator.process(request.command, request.context)
    if not result.success:
        code = result.error_code or ErrorCode.PROCESSING_ERROR
        return error_response(_STATUS_FOR_CODE.get(code, 400), code.value, result.message)

    response = NaturalLanguageResponse(
        success=True,
        message=result.message,
        operation=result.operation.to_dict() if result.operation else None,
        event=result.event,
        suggestions=result.suggestions,
        processing_time=result.processing_time,
    )
    return JSONResponse(response.model_dump())


@app.get("/api/naturallanguage/health")
async def language_health(state: ApiState = Depends(get_api_state)) -> JSONResponse:
    healthy = state.orchestrator.health_check()
    body = {
        "is_healthy": healthy,
        "message": "Natural language service is operational" if healthy else "Natural language service is unavailable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    return JSONResponse(body, status_code=200 if healthy else 503)


@app.get("/api/naturallanguage/examples")
async def list_examples() -> JSONResponse:
    return JSONResponse({"examples": EXAMPLE_COMMANDS})


@app.get("/api/naturallanguage/suggestions")
async def list_suggestions(partial_input: str = "", state: ApiState = Depends(get_api_state)) -> JSONResponse:
    if not partial_input.strip():
        return error_response(400, ErrorCode.INVALID_COMMAND.value, "partial_input is required")
    suggestions = [suggestion.to_dict() for suggestion in state.orchestrator.suggest(partial_input)]
    return JSONResponse({"suggestions": suggestions})


@app.get("/api/tools")
async def list_tools(state: ApiState = Depends(get_api_state)) -> JSONResponse:
    return JSONResponse({"tools": [tool.to_dict() for tool in state.registry.list_tools()]})


@app.get("/api/tools/{tool_name}")
async def describe_tool(tool_name: str, state: ApiState = Depends(get_api_state)) -> JSONResponse:
    tool = state.registry.get(tool_name)
    if tool is None:
        return error_response(404, "TOOL_NOT_FOUND", f"Tool '{tool_name}' not found")
    return JSONResponse(tool.to_dict())


@app.post("/api/tools/{tool_name}")
async def invoke_tool(
    tool_name: str,
    request: ToolCallRequest,
    state: ApiState = Depends(get_api_state),
) -> JSONResponse:
    response = state.dispatcher.dispatch(ToolRequest(tool_name=tool_name, arguments=request.arguments))
    status_code = 200 if response.success else _STATUS_FOR_TOOL_ERROR.get(response.error_type or "", 500)
    return JSONResponse(response.model_dump(), status_code=status_code)


@app.get("/api/v1/health")
async def service_health(state: ApiState = Depends(get_api_state)) -> JSONResponse:
    healthy = state.dispatcher.is_healthy()
    body = {
        "status": "healthy" if healthy else "unhealthy",
        "version": __version__,
        "tools": len(state.registry),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    return JSONResponse(body, status_code=200 if healthy else 503)


def run_local_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    import asyncio
    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    config = Config()
    config.bind = [f"{host}:{port}"]
    asyncio.run(serve(app, config))
