"""Error Handlers — turn rule violations and failures into the JSON error envelope.

Invariants:
    - Every error body is {"error": {"code", "message", "category", "severity", ...}}
    - A refused spin, a duplicate team or a locked question keeps its own code
      and status, so clients can tell "spin again" from "fix the request"
    - Bad request bodies (marks outside 0..100, missing names) answer 400
      VALIDATION_ERROR with one entry per offending field
    - Unexpected exceptions answer 500 INTERNAL_ERROR without internals

Design Decisions:
    - 4xx outcomes are routine during an event and log at WARNING; 5xx log at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from spinround.core.errors import SpinRoundError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain, request-body and catch-all handlers."""
    _register_spinround_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_spinround_error_handler(app: FastAPI) -> None:

    @app.exception_handler(SpinRoundError)
    async def spinround_error_handler(request: Request, exc: SpinRoundError):
        """Rule violations and store failures carry their own status and code."""
        level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
        logger.log(
            level,
            f"{exc.code}: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Anything unexpected: log the traceback, answer a generic 500."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Flatten pydantic errors into field paths such as body.marks."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
