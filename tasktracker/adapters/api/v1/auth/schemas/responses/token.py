from __future__ import annotations

"""Response Pydantic model for token data."""

from pydantic import BaseModel

from tasktracker.domain.value_objects.auth_results import TokenPair as TokenPairResult


class TokenPair(BaseModel):
    """JWT access & refresh tokens with their lifetimes in seconds."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    refresh_expires_in: int

    @classmethod
    def from_result(cls, tokens: TokenPairResult) -> "TokenPair":
        return cls(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            token_type=tokens.token_type,
            expires_in=tokens.expires_in,
            refresh_expires_in=tokens.refresh_expires_in,
        )
