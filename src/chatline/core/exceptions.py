"""Error taxonomy and the FastAPI handlers that render it.

Services raise these exceptions; the handlers registered by
`register_exception_handlers` translate them into JSON responses of the form
``{"message": ..., "error": ...}``.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ChatlineError(Exception):
    """Base exception for Chatline service errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, *, details: Any | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(ChatlineError):
    """Raised when input is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ChatlineError):
    """Raised when an id or nickname does not resolve."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ChatlineError):
    """Raised when a unique key (nickname, email) is already taken."""

    status_code = status.HTTP_409_CONFLICT


class StorageError(ChatlineError):
    """Raised when the underlying store fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_payload(message: str, error: Any | None = None) -> dict[str, Any]:
    """Return the response body shared by every error response."""
    return {"message": message, "error": jsonable_encoder(error)}


def register_exception_handlers(app: FastAPI) -> None:
    """Register Chatline's exception handlers on a FastAPI app."""

    @app.exception_handler(ChatlineError)
    async def _chatline_error_handler(_request: Request, exc: ChatlineError) -> JSONResponse:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s: %s (%s)", exc.__class__.__name__, exc.message, exc.details)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload(exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_payload("Invalid request payload", exc.errors()),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content=error_payload(detail),
            headers=getattr(exc, "headers", None),
        )
