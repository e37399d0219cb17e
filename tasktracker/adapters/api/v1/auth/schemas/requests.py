from __future__ import annotations

"""Request‐payload Pydantic models for authentication endpoints."""

from pydantic import BaseModel, EmailStr, Field, constr

# ---------------------------------------------------------------------------
# Shared / primitive types ---------------------------------------------------
# ---------------------------------------------------------------------------

UsernameStr = constr(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_-]+$")
NameStr = constr(strip_whitespace=True, min_length=1, max_length=50)

# ---------------------------------------------------------------------------
# Concrete request models ----------------------------------------------------
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Payload expected by ``POST /auth/register``."""

    username: UsernameStr = Field(..., examples=["john_doe"])
    email: EmailStr = Field(..., max_length=100, examples=["john@example.com"])
    first_name: NameStr = Field(..., examples=["John"])
    last_name: NameStr = Field(..., examples=["Doe"])
    password: str = Field(..., min_length=1, max_length=72, examples=["Str0ngP@ssw0rd"])


class LoginRequest(BaseModel):
    """Payload expected by ``POST /auth/login``."""

    email: EmailStr = Field(..., examples=["john@example.com"])
    password: str = Field(..., min_length=1, max_length=72, examples=["Str0ngP@ssw0rd"])


class RefreshTokenRequest(BaseModel):
    """Payload expected by ``POST /auth/refresh``."""

    refresh_token: str = Field(..., min_length=1, examples=["eyJhbGciOiJIUzUxMiIsInR5cCI6IkpXVCJ9..."])
