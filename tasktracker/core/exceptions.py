from __future__ import annotations

"""Centralized, structured exception hierarchy for the task tracker.

Every domain failure carries a machine-readable ``code`` for programmatic
handling and a human-readable ``message`` for logs and clients. Each concrete
class maps to exactly one HTTP status in :mod:`tasktracker.core.handlers`, so
raising the right kind is all the domain layer has to do.
"""

from typing import Final

__all__: Final = [
    "TaskTrackerError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "UnauthorizedAccessError",
    "InvalidRefreshTokenError",
    "RefreshTokenNotFoundError",
    "RefreshTokenExpiredError",
    "InvalidTokenTypeError",
    "AccountInactiveError",
    "UserAlreadyExistsError",
    "UserNotFoundError",
    "ValidationError",
    "DatabaseError",
    "TokenError",
    "MalformedTokenError",
    "ExpiredTokenError",
    "UnsupportedTokenFormatError",
    "InvalidTokenArgumentError",
]


class TaskTrackerError(Exception):
    """Base exception class for all custom errors in the application.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Auth-related errors (401 unless noted otherwise)
# ---------------------------------------------------------------------------


class AuthenticationError(TaskTrackerError):
    """Raised for general authentication failures."""

    def __init__(self, message: str, code: str = "authentication_error"):
        super().__init__(message, code)


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not authenticate.

    The message is the same whether the email is unknown or the password is
    wrong, so callers cannot probe which accounts exist.
    """

    def __init__(self, message: str = "Invalid credentials", code: str = "invalid_credentials"):
        super().__init__(message, code)


class UnauthorizedAccessError(AuthenticationError):
    """Raised when a request needs an access token and has none usable."""

    def __init__(self, message: str = "Not authenticated", code: str = "unauthorized_access"):
        super().__init__(message, code)


class InvalidRefreshTokenError(AuthenticationError):
    """Raised when a refresh token fails signature or shape validation."""

    def __init__(self, message: str = "Invalid refresh token", code: str = "invalid_refresh_token"):
        super().__init__(message, code)


class RefreshTokenNotFoundError(AuthenticationError):
    """Raised when no session row holds the presented refresh token.

    This is also what a replayed, already-rotated refresh token runs into.
    """

    def __init__(
        self, message: str = "Refresh token not found", code: str = "refresh_token_not_found"
    ):
        super().__init__(message, code)


class RefreshTokenExpiredError(AuthenticationError):
    """Raised when the matched session is inactive or past its expiry."""

    def __init__(self, message: str = "Refresh token expired", code: str = "refresh_token_expired"):
        super().__init__(message, code)


class InvalidTokenTypeError(TaskTrackerError):
    """Raised when a token of the wrong kind is presented. Maps to 400."""

    def __init__(self, message: str = "Invalid token type", code: str = "invalid_token_type"):
        super().__init__(message, code)


class AccountInactiveError(TaskTrackerError):
    """Raised when an authenticated user's account is deactivated. Maps to 403."""

    def __init__(self, message: str = "Account is inactive", code: str = "account_inactive"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# User store errors
# ---------------------------------------------------------------------------


class UserAlreadyExistsError(TaskTrackerError):
    """Raised when registering an email or username that is already taken. Maps to 409."""

    def __init__(self, message: str, code: str = "user_already_exists"):
        super().__init__(message, code)


class UserNotFoundError(TaskTrackerError):
    """Raised when a user lookup comes back empty. Maps to 404."""

    def __init__(self, message: str = "User not found", code: str = "user_not_found"):
        super().__init__(message, code)


class ValidationError(TaskTrackerError):
    """Raised for input that is well-typed but semantically invalid. Maps to 400."""

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


class DatabaseError(TaskTrackerError):
    """Raised when the persistence layer fails. Maps to 503."""

    def __init__(self, message: str = "Database unavailable", code: str = "database_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Token codec failure taxonomy
# ---------------------------------------------------------------------------


class TokenError(TaskTrackerError):
    """Base class for failures raised while decoding a signed token."""

    def __init__(self, message: str, code: str = "token_error"):
        super().__init__(message, code)


class MalformedTokenError(TokenError):
    """Bad segments, bad signature, or missing/invalid required claims."""

    def __init__(self, message: str = "Malformed token", code: str = "malformed_token"):
        super().__init__(message, code)


class ExpiredTokenError(TokenError):
    """The signature verifies but the token's own ``exp`` has passed."""

    def __init__(self, message: str = "Token has expired", code: str = "expired_token"):
        super().__init__(message, code)


class UnsupportedTokenFormatError(TokenError):
    """The header declares an algorithm this service does not accept."""

    def __init__(
        self, message: str = "Unsupported token format", code: str = "unsupported_token_format"
    ):
        super().__init__(message, code)


class InvalidTokenArgumentError(TokenError):
    """Empty, blank or non-string input where a token was expected."""

    def __init__(
        self, message: str = "Token argument is empty or invalid", code: str = "invalid_token_argument"
    ):
        super().__init__(message, code)
