from __future__ import annotations

"""Composite response Pydantic models for authentication endpoints."""

import uuid
from typing import Optional

from pydantic import BaseModel

from tasktracker.adapters.api.v1.auth.schemas.responses.token import TokenPair
from tasktracker.adapters.api.v1.auth.schemas.responses.user import UserOut


class AuthResponse(BaseModel):
    """Response returned by the login endpoint."""

    user: UserOut
    tokens: TokenPair


class RegisterResponse(BaseModel):
    """Response returned by the register endpoint. No tokens are issued."""

    message: str
    user_id: uuid.UUID
    success: bool = True


class OptionalAuthResponse(BaseModel):
    """Body of ``GET /auth/me/optional`` for every outcome."""

    authenticated: bool
    status: str
    reason: str
    user: Optional[UserOut] = None
