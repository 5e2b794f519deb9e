"""
Application exceptions.

Domain errors subclass FastAPI's ``HTTPException`` so that services can
raise them directly and FastAPI renders them as ``{"detail": ...}``
with the right status code.  Storage failures are plain exceptions:
they carry internal details (paths, driver messages) that must not
reach clients, so ``storage_exception_handler`` turns them into a
generic 500 response after logging them.  Request bodies that FastAPI
cannot even parse are answered with 400 by
``request_validation_exception_handler``, the same status
``InvalidInput`` uses.
"""

import logging
from typing import Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class AppError(HTTPException):
    """Base class for errors that map onto an HTTP status."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None) -> None:
        super().__init__(
            status_code=type(self).status_code,
            detail=message or self.default_message,
            headers=headers,
        )
        self.message = self.detail


class InvalidInput(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing required fields."


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists"


class StoreError(Exception):
    """A collection could not be read from or written to its backing medium."""


class CorruptData(StoreError):
    """Stored content exists but cannot be parsed."""


class DuplicateRecord(StoreError):
    """A record with the same key is already stored."""


async def storage_exception_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal storage error"},
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Only field locations are reported; bodies may carry passwords.
    fields = sorted({".".join(str(part) for part in err.get("loc", ())) or "body" for err in exc.errors()})
    logger.info("Rejected request to %s: %s", request.url.path, ", ".join(fields))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"Missing or invalid fields: {', '.join(fields)}"},
    )
