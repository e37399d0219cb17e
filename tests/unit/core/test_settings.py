import pytest
from pydantic import ValidationError

from tasktracker.core.config.settings import Settings

SECRET = "a" * 64


def build(**overrides) -> Settings:
    values = {"JWT_SECRET_KEY": SECRET}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_defaults():
    settings = build()

    assert settings.JWT_ALGORITHM == "HS512"
    assert settings.ACCESS_TOKEN_EXPIRE_SECONDS == 86400
    assert settings.REFRESH_TOKEN_EXPIRE_SECONDS == 604800
    assert settings.JWT_SECRET_KEY.get_secret_value() == SECRET
    assert SECRET not in repr(settings)


def test_short_secret_is_rejected():
    with pytest.raises(ValidationError, match="at least 32 characters"):
        build(JWT_SECRET_KEY="too-short")


def test_non_hmac_algorithm_is_rejected():
    with pytest.raises(ValidationError, match="JWT_ALGORITHM"):
        build(JWT_ALGORITHM="RS256")


def test_refresh_must_outlive_access():
    with pytest.raises(ValidationError, match="REFRESH_TOKEN_EXPIRE_SECONDS"):
        build(ACCESS_TOKEN_EXPIRE_SECONDS=3600, REFRESH_TOKEN_EXPIRE_SECONDS=3600)


def test_allowed_origins_are_split():
    settings = build(ALLOWED_ORIGINS="https://a.example, https://b.example,")
    assert settings.ALLOWED_ORIGINS == ["https://a.example", "https://b.example"]


def test_unknown_environment_is_rejected():
    with pytest.raises(ValidationError):
        build(APP_ENV="qa")


def test_secret_shorter_than_the_hs512_digest_is_rejected():
    with pytest.raises(ValidationError, match="at least 64 bytes for HS512"):
        build(JWT_SECRET_KEY="k" * 40)


def test_hs256_accepts_a_32_byte_secret():
    settings = build(JWT_ALGORITHM="HS256", JWT_SECRET_KEY="k" * 32)
    assert settings.JWT_ALGORITHM == "HS256"
