from __future__ import annotations

import uuid
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from tasktracker.core.exceptions import ExpiredTokenError, TokenError, UnauthorizedAccessError
from tasktracker.domain.value_objects.token_claims import TokenKind
from tasktracker.infrastructure.dependency_injection.auth_dependencies import TokenCodecDep

__all__ = [
    "get_current_user_id",
    "CurrentUserId",
]


# ---------------------------------------------------------------------------
# Type-annotated dependency shortcuts
# ---------------------------------------------------------------------------


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)
TokenStr = Annotated[Optional[str], Depends(oauth2_scheme)]


# ---------------------------------------------------------------------------
# Public dependencies
# ---------------------------------------------------------------------------


def get_current_user_id(token: TokenStr, token_codec: TokenCodecDep) -> uuid.UUID:
    """Return the id carried by a valid *access* token.

    Only the token is checked here; loading the user and checking that the
    account is active is left to the gateway. Refresh tokens are refused.
    """
    if not token:
        raise UnauthorizedAccessError()
    try:
        claims = token_codec.decode(token)
    except ExpiredTokenError as exc:
        raise UnauthorizedAccessError("Token has expired") from exc
    except TokenError as exc:
        raise UnauthorizedAccessError("Invalid token") from exc
    if claims.kind is not TokenKind.ACCESS:
        raise UnauthorizedAccessError("Access token required")
    return claims.user_id


CurrentUserId = Annotated[uuid.UUID, Depends(get_current_user_id)]
