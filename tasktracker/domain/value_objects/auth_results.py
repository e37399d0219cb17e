"""Return values of the authentication gateway operations."""

import uuid
from dataclasses import dataclass

from tasktracker.domain.value_objects.user_profile import UserProfile

BEARER = "Bearer"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int
    refresh_expires_in: int
    token_type: str = BEARER


@dataclass(frozen=True)
class LoginResult:
    tokens: TokenPair
    user: UserProfile


@dataclass(frozen=True)
class RegistrationResult:
    user_id: uuid.UUID
    message: str = "Registration successful. Please check your email for verification."
