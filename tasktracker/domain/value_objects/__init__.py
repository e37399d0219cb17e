"""Immutable value objects shared by the domain services."""

from .auth_outcome import (
    Authenticated,
    BadRequest,
    Error,
    NotFound,
    OptionalAuthOutcome,
    OutcomeStatus,
    Unauthenticated,
)
from .auth_results import LoginResult, RegistrationResult, TokenPair
from .token_claims import TokenClaims, TokenKind, TokenStatus
from .token_id import TokenId
from .user_profile import SessionMetadata, SessionSummary, UserProfile

__all__ = [
    "Authenticated",
    "BadRequest",
    "Error",
    "NotFound",
    "OptionalAuthOutcome",
    "OutcomeStatus",
    "Unauthenticated",
    "LoginResult",
    "RegistrationResult",
    "TokenPair",
    "TokenClaims",
    "TokenKind",
    "TokenStatus",
    "TokenId",
    "SessionMetadata",
    "SessionSummary",
    "UserProfile",
]
