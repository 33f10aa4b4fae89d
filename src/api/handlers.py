"""Exception handlers mapping pipeline failures to ``400 {error}`` responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.errors import ExtractionError, ValidationError

logger = logging.getLogger(__name__)


async def extraction_error_handler(request: Request, exc: ExtractionError) -> JSONResponse:
    logger.warning(
        "request failed",
        extra={"path": request.url.path, "kind": exc.kind, "url": exc.url, "error": exc.message},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.message},
    )


def _describe(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts) or "Invalid request"


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "request failed unexpectedly",
        extra={"path": request.url.path, "error": str(exc)},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": str(exc)},
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return await extraction_error_handler(request, ValidationError(_describe(exc)))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ExtractionError, extraction_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
