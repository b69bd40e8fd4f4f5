"""Error taxonomy and the terminal exception handlers that render the response envelope.

Services raise the ``LibraryError`` subclasses below; nothing is retried.
``register_exception_handlers`` maps exception identity to an HTTP status and
the ``{success: false, message, errors?}`` envelope.
"""

import logging
import re
import traceback
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from library_api.core.config import get_settings

logger = logging.getLogger(__name__)


class LibraryError(Exception):
    """Base error carrying the HTTP status and the envelope message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        errors: list[str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message
        self.errors = errors
        self.headers = headers
        super().__init__(message)


class ValidationError(LibraryError):
    """Malformed input; ``errors`` lists the offending field messages."""

    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateKeyError(LibraryError):
    """Unique constraint violation on email, ISBN or membershipId."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"{field} already exists")


class InvalidStateError(LibraryError):
    """Operation not allowed in the resource's current state (e.g. book already decided)."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(LibraryError):
    """Missing, malformed or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not authorized") -> None:
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(LibraryError):
    """Authenticated, but the caller's role does not allow the operation."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(LibraryError):
    """Missing resource, or an id that cannot be parsed."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str) -> None:
        self.resource = resource
        super().__init__(f"{resource} not found")


# Column names as they appear in IntegrityError text -> field names used in the API.
_UNIQUE_FIELDS = {
    "isbn": "ISBN",
    "membership_id": "membershipId",
    "email": "email",
}


def duplicate_field_from_integrity_error(exc: IntegrityError, default: str) -> str:
    """Best-effort name of the unique field behind an IntegrityError (SQLite and PostgreSQL wording)."""
    text = str(exc.orig) if exc.orig is not None else str(exc)
    for column, field in _UNIQUE_FIELDS.items():
        if re.search(rf"\b{column}\b", text, flags=re.IGNORECASE):
            return field
    return default


def error_body(message: str, errors: list[str] | None = None, **extra: Any) -> dict[str, Any]:
    """Build the failure envelope."""
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    body.update(extra)
    return body


def _format_validation_errors(exc: RequestValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        messages.append(f"{field}: {msg}" if field else msg)
    return messages


def register_exception_handlers(app: FastAPI) -> None:
    """Install the terminal handlers; every error response uses the envelope."""

    @app.exception_handler(LibraryError)
    async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
        logger.warning(
            "%s %s -> %s %s: %s",
            request.method,
            request.url.path,
            exc.status_code,
            type(exc).__name__,
            exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, exc.errors),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = _format_validation_errors(exc)
        logger.warning("%s %s -> 400 validation: %s", request.method, request.url.path, errors)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("Validation Error", errors),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            message = "Route not found"
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        field = duplicate_field_from_integrity_error(exc, default="Resource")
        logger.warning("%s %s -> 400 duplicate %s", request.method, request.url.path, field)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(f"{field} already exists"),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        settings = get_settings()
        extra: dict[str, Any] = {}
        if settings.APP_ENV == "dev" and settings.DEBUG:
            extra["stack"] = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Internal Server Error", **extra),
        )
