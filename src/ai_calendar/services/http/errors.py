from __future__ import annotations

from uuid import uuid4

from fastapi.responses import JSONResponse


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    body = {"error": {"code": code, "message": message, "trace_id": uuid4().hex}}
    return JSONResponse(body, status_code=status_code)
