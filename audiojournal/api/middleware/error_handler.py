"""
Exception handlers for the FastAPI application.

Every error leaves the API as the same JSON envelope::

    {"detail": "...", "code": "ENTRY_NOT_FOUND", "timestamp": "..."}
"""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from audiojournal.core.exceptions import AudioJournalError

logger = logging.getLogger(__name__)


def _envelope(
    status_code: int, detail: str, code: str, timestamp: str | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "code": code,
            "timestamp": timestamp or datetime.now(UTC).isoformat(),
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install handlers for domain errors, bad requests and unexpected failures.

    Args:
        app: Application to attach the handlers to.
    """

    @app.exception_handler(AudioJournalError)
    async def domain_error(_request: Request, exc: AudioJournalError) -> JSONResponse:
        return _envelope(exc.status_code, exc.detail, exc.code, exc.timestamp)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed body, path or query parameters."""
        return _envelope(422, str(exc), "VALIDATION_ERROR")

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        """Log the traceback server-side; the client only sees a generic message."""
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _envelope(500, "Internal server error", "INTERNAL_ERROR")
