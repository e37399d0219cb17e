"""Authentication settings: token signing, token lifetimes and hashing cost.
"""

import logging

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# Minimum key length per algorithm: the digest size, in bytes
_HMAC_KEY_BYTES = {"HS256": 32, "HS384": 48, "HS512": 64}
_HMAC_ALGORITHMS = tuple(_HMAC_KEY_BYTES)


class AuthSettings(BaseSettings):
    """Defines settings for JWT issuance and password hashing.

    The signing secret is read once from configuration and is never generated
    on the fly, so tokens stay verifiable across restarts. Rotating it is an
    operator action: change ``JWT_SECRET_KEY`` and restart.

    Security Note:
        - JWT_SECRET_KEY must be a cryptographically random string at least as
          long as the digest of JWT_ALGORITHM (64 bytes for the default HS512)
          and must never be logged or committed.
    """

    JWT_SECRET_KEY: SecretStr
    JWT_ALGORITHM: str = "HS512"
    JWT_ISSUER: str = "tasktracker"
    JWT_AUDIENCE: str = "tasktracker-api"
    ACCESS_TOKEN_EXPIRE_SECONDS: int = Field(gt=0, default=86400)
    REFRESH_TOKEN_EXPIRE_SECONDS: int = Field(gt=0, default=604800)

    BCRYPT_WORK_FACTOR: int = Field(ge=4, le=31, default=12)

    # Minimum gap between two last-login writes issued by the optional-auth probe
    LAST_LOGIN_DEBOUNCE_SECONDS: int = Field(ge=0, default=300)
    # 0 disables the background sweep of expired sessions
    SESSION_CLEANUP_INTERVAL_SECONDS: int = Field(ge=0, default=3600)

    @field_validator("JWT_SECRET_KEY")
    @classmethod
    def _check_secret_length(cls, v: SecretStr) -> SecretStr:
        if len(v.get_secret_value()) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters long")
        return v

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def _check_algorithm(cls, v: str) -> str:
        if v not in _HMAC_ALGORITHMS:
            raise ValueError(f"JWT_ALGORITHM must be one of {', '.join(_HMAC_ALGORITHMS)}")
        return v

    @model_validator(mode="after")
    def _check_secret_matches_algorithm(self) -> "AuthSettings":
        required = _HMAC_KEY_BYTES[self.JWT_ALGORITHM]
        if len(self.JWT_SECRET_KEY.get_secret_value().encode("utf-8")) < required:
            error_msg = f"JWT_SECRET_KEY must be at least {required} bytes for {self.JWT_ALGORITHM}"
            logger.error(error_msg)
            raise ValueError(error_msg)
        return self

    @model_validator(mode="after")
    def _check_token_lifetimes(self) -> "AuthSettings":
        """Refresh tokens must outlive the access tokens they are exchanged for."""
        if self.REFRESH_TOKEN_EXPIRE_SECONDS <= self.ACCESS_TOKEN_EXPIRE_SECONDS:
            error_msg = "REFRESH_TOKEN_EXPIRE_SECONDS must be greater than ACCESS_TOKEN_EXPIRE_SECONDS"
            logger.error(error_msg)
            raise ValueError(error_msg)
        return self
