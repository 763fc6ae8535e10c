# bookstore/api/v1/errors.py
"""
Exception handlers turning domain errors into HTTP responses.

Every error body is `{"detail": ...}` (`<error><detail>...</detail></error>`
in XML), rendered in the format the client asked for. Storage failures are
logged with their cause and answered with an opaque message.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookstore.api.v1.negotiation import MediaFormat, accepted_format, render
from bookstore.core.errors import (
    AuthenticationFailed,
    ConstraintViolation,
    StoreError,
    ValidationFailed,
)

logger = logging.getLogger("uvicorn.error")


def _error(request: Request, status_code: int, detail, headers: dict | None = None):
    # Errors must be renderable even when the Accept header was the problem
    fmt = accepted_format(request.headers.get("accept")) or MediaFormat.JSON
    response = render({"detail": detail}, fmt, status_code=status_code, root="error")
    if headers:
        response.headers.update(headers)
    return response


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(request, exc.status_code, exc.detail, getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """
    Unparseable or out-of-range path and query parameters.

    A bad search parameter is reported like the other search rules
    (`invalid_search_fields:<name>`); anything else as a malformed request.
    """
    errors = exc.errors()
    location = errors[0].get("loc", ()) if errors else ()
    if len(location) >= 2 and location[0] == "query":
        detail = f"invalid_search_fields:{location[1]}"
    else:
        detail = "Malformed request parameter"
    logger.info("[%s %s] Request rejected: %s", request.method, request.url.path, detail)
    return _error(request, status.HTTP_400_BAD_REQUEST, detail)


async def validation_failed_handler(request: Request, exc: ValidationFailed):
    logger.info("[%s %s] Validation error: %s", request.method, request.url.path, exc.code)
    return _error(request, status.HTTP_400_BAD_REQUEST, exc.code)


async def authentication_failed_handler(request: Request, exc: AuthenticationFailed):
    return _error(request, status.HTTP_401_UNAUTHORIZED, "Credentials incorrect")


async def constraint_violation_handler(request: Request, exc: ConstraintViolation):
    logger.warning("[%s %s] %s", request.method, request.url.path, exc)
    return _error(request, status.HTTP_409_CONFLICT, "Resource Conflict")


async def store_error_handler(request: Request, exc: StoreError):
    logger.error("[%s %s] %s", request.method, request.url.path, exc, exc_info=exc)
    return _error(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain error handlers on `app`."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationFailed, validation_failed_handler)
    app.add_exception_handler(AuthenticationFailed, authentication_failed_handler)
    app.add_exception_handler(ConstraintViolation, constraint_violation_handler)
    app.add_exception_handler(StoreError, store_error_handler)
