import base64
import json
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from tasktracker.core.exceptions import (
    ExpiredTokenError,
    InvalidTokenArgumentError,
    MalformedTokenError,
    UnsupportedTokenFormatError,
)
from tasktracker.domain.services.auth.token_codec import TokenCodec
from tasktracker.domain.value_objects.token_claims import TokenKind, TokenStatus
from tests.factories.token import TEST_SECRET, build_claims
from tests.factories.user import create_fake_user



def _b64(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _unb64(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


class TestRoundTrip:
    def test_access_token_recovers_user_id_and_kind(self, token_issuer, token_codec):
        # Arrange
        user = create_fake_user()

        # Act
        token = token_issuer.issue_access_token(user)
        claims = token_codec.decode(token)

        # Assert
        assert claims.user_id == user.id
        assert claims.kind is TokenKind.ACCESS
        assert claims.subject == user.username
        assert claims.email == user.email
        assert claims.full_name == user.full_name
        assert token_codec.validate(token) is TokenStatus.VALID

    def test_projections(self, token_issuer, token_codec):
        user = create_fake_user()
        token = token_issuer.issue_refresh_token(user)

        assert token_codec.kind_of(token) is TokenKind.REFRESH
        assert token_codec.subject_of(token) == user.username
        assert token_codec.user_id_of(token) == user.id
        assert token_codec.expiry_of(token) > datetime.now(timezone.utc)

    def test_issuer_and_audience_are_embedded(self, token_issuer):
        token = token_issuer.issue_access_token(create_fake_user())
        payload = jwt.decode(token, options={"verify_signature": False})
        assert payload["iss"] == "tasktracker"
        assert payload["aud"] == "tasktracker-api"
        assert jwt.get_unverified_header(token)["alg"] == "HS512"


class TestExpiry:
    def test_expired_token_is_reported_as_expired(self, token_codec):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = token_codec.encode(build_claims(iat=past - timedelta(minutes=15), exp=past))

        assert token_codec.validate(token) is TokenStatus.EXPIRED
        with pytest.raises(ExpiredTokenError):
            token_codec.decode(token)

    def test_projection_on_expired_token_raises_expired(self, token_codec):
        past = datetime.now(timezone.utc) - timedelta(seconds=10)
        token = token_codec.encode(build_claims(iat=past - timedelta(minutes=1), exp=past))
        with pytest.raises(ExpiredTokenError):
            token_codec.user_id_of(token)

    def test_token_without_exp_is_malformed(self, token_codec):
        claims = build_claims()
        del claims["exp"]
        token = jwt.encode(
            {**claims, "iss": "tasktracker", "aud": "tasktracker-api"}, TEST_SECRET, algorithm="HS512"
        )
        assert token_codec.validate(token) is TokenStatus.MALFORMED
        with pytest.raises(MalformedTokenError, match="exp"):
            token_codec.decode(token)


class TestTamperResistance:
    @pytest.mark.parametrize("byte_index", [0, 1, 17, 31, 48, 63])
    def test_flipping_a_signature_byte_invalidates_the_token(self, token_issuer, token_codec, byte_index):
        # Arrange
        token = token_issuer.issue_access_token(create_fake_user())
        header, payload, signature = token.split(".")
        raw = bytearray(_unb64(signature))
        raw[byte_index] ^= 0x01
        tampered = ".".join([header, payload, _b64(bytes(raw))])

        # Act / Assert
        assert token_codec.validate(tampered) is TokenStatus.MALFORMED
        with pytest.raises(MalformedTokenError):
            token_codec.decode(tampered)

    def test_modified_payload_is_rejected(self, token_issuer, token_codec):
        token = token_issuer.issue_access_token(create_fake_user())
        header, _, signature = token.split(".")
        forged = build_claims(sub="mallory")
        forged_payload = _b64(
            json.dumps({**forged, "iat": 1, "exp": 9999999999}).encode()
        )

        tampered = ".".join([header, forged_payload, signature])

        assert token_codec.validate(tampered) is TokenStatus.MALFORMED

    def test_token_signed_with_another_key_is_rejected(self, token_codec):
        other = TokenCodec(
            "another-secret-key-that-is-also-long-enough-for-hs512-0123456789abcdef",
            issuer="tasktracker",
            audience="tasktracker-api",
        )
        token = other.encode(build_claims())
        assert token_codec.validate(token) is TokenStatus.MALFORMED


class TestUnsupportedAndInvalidInput:
    def test_unsigned_token_is_unsupported(self, token_codec):
        token = jwt.encode(
            {**build_claims(), "iss": "tasktracker", "aud": "tasktracker-api"}, key=None, algorithm="none"
        )
        assert token_codec.validate(token) is TokenStatus.UNSUPPORTED
        with pytest.raises(UnsupportedTokenFormatError):
            token_codec.decode(token)

    def test_other_hmac_algorithm_is_unsupported(self, token_codec):
        token = jwt.encode(
            {**build_claims(), "iss": "tasktracker", "aud": "tasktracker-api"}, TEST_SECRET, algorithm="HS256"
        )
        assert token_codec.validate(token) is TokenStatus.UNSUPPORTED

    @pytest.mark.parametrize("value", ["", "   ", None, 42])
    def test_empty_or_non_string_input(self, token_codec, value):
        assert token_codec.validate(value) is TokenStatus.INVALID_ARGUMENT
        with pytest.raises(InvalidTokenArgumentError):
            token_codec.decode(value)

    @pytest.mark.parametrize("garbage", ["not-a-token", "a.b.c", "eyJhbGciOiJIUzUxMiJ9.e30"])
    def test_garbage_is_malformed(self, token_codec, garbage):
        assert token_codec.validate(garbage) is TokenStatus.MALFORMED
        with pytest.raises(MalformedTokenError):
            token_codec.kind_of(garbage)

    def test_wrong_audience_is_malformed(self, token_codec):
        other = TokenCodec(TEST_SECRET, issuer="tasktracker", audience="someone-else")
        assert token_codec.validate(other.encode(build_claims())) is TokenStatus.MALFORMED

    def test_non_uuid_user_id_is_malformed(self, token_codec):
        token = token_codec.encode(build_claims(user_id="42"))
        with pytest.raises(MalformedTokenError):
            token_codec.decode(token)

    def test_unknown_type_projects_to_unknown(self, token_codec):
        token = token_codec.encode(build_claims(type="id_token"))
        assert token_codec.validate(token) is TokenStatus.VALID
        assert token_codec.kind_of(token) is TokenKind.UNKNOWN

    def test_empty_key_is_refused(self):
        with pytest.raises(ValueError):
            TokenCodec("")
