from __future__ import annotations

"""Authentication API schemas package.

Re-exports every public model so routes and tests can import from
``tasktracker.adapters.api.v1.auth.schemas`` directly.
"""

# flake8: noqa: F401

from .misc import MessageResponse
from .requests import LoginRequest, RefreshTokenRequest, RegisterRequest, UsernameStr
from .responses.auth import AuthResponse, OptionalAuthResponse, RegisterResponse
from .responses.token import TokenPair
from .responses.user import SessionOut, UserOut

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "RefreshTokenRequest",
    "UsernameStr",
    "UserOut",
    "SessionOut",
    "TokenPair",
    "AuthResponse",
    "RegisterResponse",
    "OptionalAuthResponse",
    "MessageResponse",
]
