"""Domain errors and their mapping onto HTTP responses.

Services raise these; the handlers registered by ``install_error_handlers``
turn them into the ``{"status": "error", "message": ...}`` envelope.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class WorldCourseError(Exception):
    """Base class for errors that map onto a client-facing HTTP status."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(WorldCourseError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class DuplicateEmail(WorldCourseError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "This email address is already registered. Please use the login form instead."


class AuthenticationFailed(WorldCourseError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class PermissionDenied(WorldCourseError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


class AccountLocked(WorldCourseError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Account is temporarily locked due to too many failed login attempts"


class NotFound(WorldCourseError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(WorldCourseError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflicting update"


class AssessmentNotActive(WorldCourseError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "This assessment is not open for submissions"


class NotEnrolled(WorldCourseError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not enrolled in this course"


class MaxAttemptsReached(WorldCourseError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Maximum number of attempts reached"


def error_body(message: str, **extra) -> dict:
    body = {"status": "error", "message": message}
    body.update(extra)
    return body


async def worldcourse_error_handler(request: Request, exc: WorldCourseError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        # Drop the leading "body"/"query"/"path" segment from the location
        loc = [str(part) for part in err.get("loc", ())[1:]]
        errors.append({"field": ".".join(loc) or None, "message": err.get("msg")})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation failed", errors=errors),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error"),
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WorldCourseError, worldcourse_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
