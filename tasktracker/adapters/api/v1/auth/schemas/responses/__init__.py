from __future__ import annotations

"""Re-export response models for authentication endpoints."""

# flake8: noqa: F401

from .auth import AuthResponse, OptionalAuthResponse, RegisterResponse
from .token import TokenPair
from .user import SessionOut, UserOut

__all__ = [
    "UserOut",
    "SessionOut",
    "TokenPair",
    "AuthResponse",
    "RegisterResponse",
    "OptionalAuthResponse",
]
