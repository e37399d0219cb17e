"""Signing and verification of JWTs.

:class:`TokenCodec` is the only place that touches the signing key. It is
built once at start-up from configuration and never changes afterwards, so
every request shares it read-only.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

import jwt
from jwt import (
    DecodeError,
    ExpiredSignatureError,
    InvalidAlgorithmError,
    InvalidTokenError,
    MissingRequiredClaimError,
)
from structlog import get_logger

from tasktracker.core.exceptions import (
    ExpiredTokenError,
    InvalidTokenArgumentError,
    MalformedTokenError,
    TokenError,
    UnsupportedTokenFormatError,
)
from tasktracker.domain.value_objects.token_claims import TokenClaims, TokenKind, TokenStatus

logger = get_logger(__name__)

REQUIRED_CLAIMS = ("sub", "user_id", "type", "iat", "exp")

_STATUS_BY_ERROR = {
    ExpiredTokenError: TokenStatus.EXPIRED,
    UnsupportedTokenFormatError: TokenStatus.UNSUPPORTED,
    InvalidTokenArgumentError: TokenStatus.INVALID_ARGUMENT,
    MalformedTokenError: TokenStatus.MALFORMED,
}


class TokenCodec:
    """Encodes claims into signed tokens and decodes them back.

    Args:
        secret_key: Shared HMAC secret.
        algorithm: The only algorithm accepted on decode. Tokens whose header
            names anything else, ``none`` included, are rejected as
            unsupported.
        issuer: Written to ``iss`` and required on decode when set.
        audience: Written to ``aud`` and required on decode when set.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS512",
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
    ):
        if not secret_key:
            raise ValueError("A signing key is required")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._issuer = issuer
        self._audience = audience

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def encode(self, claims: Mapping[str, Any]) -> str:
        """Signs ``claims``, adding ``iss`` and ``aud`` when configured."""
        payload = dict(claims)
        if self._issuer:
            payload.setdefault("iss", self._issuer)
        if self._audience:
            payload.setdefault("aud", self._audience)
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenClaims:
        """Verifies ``token`` and returns its claims.

        Raises:
            InvalidTokenArgumentError: ``token`` is not a non-blank string.
            UnsupportedTokenFormatError: The header names another algorithm.
            ExpiredTokenError: The signature is good but ``exp`` has passed.
            MalformedTokenError: Anything else: bad segments, bad signature,
                missing claims, wrong issuer or audience, unparsable user id.
        """
        if not isinstance(token, str) or not token.strip():
            raise InvalidTokenArgumentError()

        try:
            payload = jwt.decode(
                token.strip(),
                self._secret_key,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                audience=self._audience,
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except ExpiredSignatureError as e:
            raise ExpiredTokenError() from e
        except InvalidAlgorithmError as e:
            raise UnsupportedTokenFormatError() from e
        except MissingRequiredClaimError as e:
            raise MalformedTokenError(f"Token is missing the '{e.claim}' claim") from e
        except DecodeError as e:
            raise MalformedTokenError() from e
        except InvalidTokenError as e:
            raise MalformedTokenError(str(e) or "Malformed token") from e

        return self._to_claims(payload)

    def validate(self, token: str) -> TokenStatus:
        """Classifies ``token`` without raising."""
        try:
            self.decode(token)
        except TokenError as e:
            status = _STATUS_BY_ERROR.get(type(e), TokenStatus.MALFORMED)
            logger.debug("Token rejected", status=status.value, reason=e.code)
            return status
        return TokenStatus.VALID

    def kind_of(self, token: str) -> TokenKind:
        return self.decode(token).kind

    def subject_of(self, token: str) -> str:
        return self.decode(token).subject

    def user_id_of(self, token: str) -> uuid.UUID:
        return self.decode(token).user_id

    def expiry_of(self, token: str) -> datetime:
        return self.decode(token).expires_at

    @staticmethod
    def _to_claims(payload: Mapping[str, Any]) -> TokenClaims:
        subject = payload["sub"]
        if not isinstance(subject, str) or not subject:
            raise MalformedTokenError("Token subject is empty")
        try:
            user_id = uuid.UUID(str(payload["user_id"]))
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError) as e:
            raise MalformedTokenError("Token claims have an invalid shape") from e

        return TokenClaims(
            subject=subject,
            user_id=user_id,
            kind=TokenKind.parse(payload["type"]),
            issued_at=issued_at,
            expires_at=expires_at,
            jti=payload.get("jti"),
            email=payload.get("email"),
            full_name=payload.get("full_name"),
        )
