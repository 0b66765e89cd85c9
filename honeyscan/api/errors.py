"""Error envelope for API responses.

Failures are rendered as ``{"error": {"code", "message", "details",
"request_id"}}``. A token that is not a contract is a 422 with code
``NOT_A_CONTRACT``; an unreachable chain is a 503 ``CHAIN_UNAVAILABLE``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from honeyscan.core.errors import (
    AnalysisError,
    ChainUnavailableError,
    InvalidAddressError,
    NotAContractError,
)

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    NOT_A_CONTRACT = "NOT_A_CONTRACT"
    CHAIN_UNAVAILABLE = "CHAIN_UNAVAILABLE"
    ANALYSIS_FAILED = "ANALYSIS_FAILED"


class ErrorEnvelope(BaseModel):
    code: ErrorCode
    message: str
    details: list[dict[str, Any]] | None = None
    request_id: str | None = None


class ErrorResponse(BaseModel):
    error: ErrorEnvelope


# Checked in order; subclasses must precede their bases.
ANALYSIS_ERROR_STATUS: tuple[tuple[type[AnalysisError], int, ErrorCode], ...] = (
    (InvalidAddressError, 400, ErrorCode.VALIDATION_ERROR),
    (NotAContractError, 422, ErrorCode.NOT_A_CONTRACT),
    (ChainUnavailableError, 503, ErrorCode.CHAIN_UNAVAILABLE),
)

HTTP_STATUS_CODES: dict[int, ErrorCode] = {
    400: ErrorCode.BAD_REQUEST,
    404: ErrorCode.NOT_FOUND,
    422: ErrorCode.VALIDATION_ERROR,
    503: ErrorCode.SERVICE_UNAVAILABLE,
}


def error_response(
    request: Request,
    status_code: int,
    code: ErrorCode,
    message: str,
    details: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    """Render one error envelope, tagged with the caller's request id."""
    request_id = request.headers.get("X-Request-ID") or getattr(request.state, "request_id", None)
    body = ErrorResponse(
        error=ErrorEnvelope(code=code, message=message, details=details, request_id=request_id)
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def on_analysis_error(request: Request, exc: AnalysisError) -> JSONResponse:
    for exc_type, status_code, code in ANALYSIS_ERROR_STATUS:
        if isinstance(exc, exc_type):
            break
    else:
        status_code, code = 500, ErrorCode.ANALYSIS_FAILED

    if status_code >= 500:
        logger.warning(
            "Analysis aborted (%s): %s", code.value, exc,
            extra={"path": request.url.path, "status_code": status_code},
        )
    return error_response(request, status_code, code, str(exc))


async def on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())) or "unknown",
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return error_response(request, 422, ErrorCode.VALIDATION_ERROR, "Invalid request", details)


async def on_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    return error_response(request, exc.status_code, code, str(exc.detail or code.value))


async def on_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unexpected error handling %s %s", request.method, request.url.path,
        extra={"method": request.method, "path": request.url.path},
    )
    return error_response(request, 500, ErrorCode.INTERNAL_ERROR, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AnalysisError, on_analysis_error)
    app.add_exception_handler(RequestValidationError, on_validation_error)
    app.add_exception_handler(StarletteHTTPException, on_http_error)
    app.add_exception_handler(Exception, on_unexpected_error)
