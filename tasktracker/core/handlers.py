from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

Translates the domain exception hierarchy into HTTP responses. Every body has
the shape ``{"detail": <message>, "code": <machine code>}``. Starlette picks
the handler registered for the closest class in the exception's MRO, so the
more specific handlers win over the ``TaskTrackerError`` fallback.
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from tasktracker.core.exceptions import (
    AccountInactiveError,
    AuthenticationError,
    DatabaseError,
    InvalidTokenTypeError,
    TaskTrackerError,
    TokenError,
    UnauthorizedAccessError,
    UserAlreadyExistsError,
    UserNotFoundError,
    ValidationError,
)

__all__ = [
    "authentication_error_handler",
    "account_inactive_error_handler",
    "user_already_exists_error_handler",
    "user_not_found_error_handler",
    "invalid_token_type_error_handler",
    "validation_error_handler",
    "request_validation_error_handler",
    "token_error_handler",
    "database_error_handler",
    "task_tracker_error_handler",
    "unhandled_exception_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"


def _error_response(status_code: int, exc: TaskTrackerError, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    """Handles `AuthenticationError` and its subclasses, returning a `401 Unauthorized`.

    Covers invalid credentials, missing or unusable bearer tokens and every
    refresh-token failure except a wrong token type.
    """
    logger.warning(
        "Authentication failure",
        error=exc.code,
        client_ip=_client_ip(request),
        path=request.url.path,
    )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedAccessError) else None
    return _error_response(status.HTTP_401_UNAUTHORIZED, exc, headers)


async def token_error_handler(request: Request, exc: TokenError) -> JSONResponse:
    """Handles a codec failure that escaped the domain layer as a `401 Unauthorized`."""
    logger.warning("Token rejected", error=exc.code, path=request.url.path)
    return _error_response(status.HTTP_401_UNAUTHORIZED, exc)


async def account_inactive_error_handler(request: Request, exc: AccountInactiveError) -> JSONResponse:
    """Handles `AccountInactiveError`, returning a `403 Forbidden`."""
    logger.info("Inactive account refused", path=request.url.path)
    return _error_response(status.HTTP_403_FORBIDDEN, exc)


async def user_already_exists_error_handler(
    request: Request, exc: UserAlreadyExistsError
) -> JSONResponse:
    """Handles `UserAlreadyExistsError`, returning a `409 Conflict`."""
    return _error_response(status.HTTP_409_CONFLICT, exc)


async def user_not_found_error_handler(request: Request, exc: UserNotFoundError) -> JSONResponse:
    """Handles `UserNotFoundError`, returning a `404 Not Found`."""
    return _error_response(status.HTTP_404_NOT_FOUND, exc)


async def invalid_token_type_error_handler(
    request: Request, exc: InvalidTokenTypeError
) -> JSONResponse:
    """Handles `InvalidTokenTypeError`, returning a `400 Bad Request`."""
    logger.warning("Wrong token type presented", path=request.url.path)
    return _error_response(status.HTTP_400_BAD_REQUEST, exc)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, exc)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handles FastAPI's body/query validation failures as a `400 Bad Request`.

    The individual pydantic errors are returned under ``errors``.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Validation failed",
            "code": "validation_error",
            "errors": jsonable_encoder(exc.errors(), custom_encoder={Exception: str}),
        },
    )


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Handles `DatabaseError`, returning a `503 Service Unavailable`."""
    logger.error("Database error", error=exc.code, path=request.url.path)
    return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, exc)


async def task_tracker_error_handler(request: Request, exc: TaskTrackerError) -> JSONResponse:
    """Fallback for domain errors without a dedicated handler."""
    return _error_response(status.HTTP_400_BAD_REQUEST, exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Reports anything unexpected as a bare `500`, keeping the details in the logs."""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": INTERNAL_ERROR_MESSAGE, "code": "internal_error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    Args:
        app: The `FastAPI` application instance.
    """
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(TokenError, token_error_handler)
    app.add_exception_handler(AccountInactiveError, account_inactive_error_handler)
    app.add_exception_handler(UserAlreadyExistsError, user_already_exists_error_handler)
    app.add_exception_handler(UserNotFoundError, user_not_found_error_handler)
    app.add_exception_handler(InvalidTokenTypeError, invalid_token_type_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(TaskTrackerError, task_tracker_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
