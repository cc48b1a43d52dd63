"""Application errors and the handlers that render them.

Every error leaves the API as ``{"error": "<message>"}`` with the matching
HTTP status. Store messages are passed through verbatim.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ChatBackendError(Exception):
    """Base class for errors rendered as an error envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(ChatBackendError):
    """A required input was not provided."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ChatBackendError):
    """A lookup by id matched nothing."""

    status_code = status.HTTP_404_NOT_FOUND


class StoreError(ChatBackendError):
    """The database rejected or failed a query."""


class AggregationFailed(ChatBackendError):
    """A phase of the chat-list aggregation failed.

    The underlying StoreError is available as ``cause`` (and ``__cause__``).
    """

    def __init__(self, cause: Exception):
        message = cause.message if isinstance(cause, ChatBackendError) else str(cause)
        super().__init__(message)
        self.cause = cause


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the error envelope."""
    return JSONResponse(status_code=status_code, content={"error": message})


async def chat_backend_error_handler(
    request: Request, exc: ChatBackendError
) -> JSONResponse:
    """Handle application errors."""
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed: "
            f"{type(exc).__name__}: {exc.message}"
        )
    else:
        logger.warning(
            f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}"
        )
    return error_response(exc.status_code, exc.message)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle malformed path params, query params and bodies."""
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error.get("loc", []) if p != "body")
        parts.append(f"{loc}: {error.get('msg', '')}" if loc else error.get("msg", ""))
    message = "; ".join(parts) or "Invalid request"

    logger.warning(f"{request.method} {request.url.path} -> 400: {message}")
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle routing errors (unknown path, wrong method)."""
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler for anything not raised as a ChatBackendError."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all error handlers to the application."""
    app.add_exception_handler(ChatBackendError, chat_backend_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
