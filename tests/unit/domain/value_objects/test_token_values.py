import pytest

from tasktracker.domain.value_objects.token_claims import TokenKind, TokenStatus
from tasktracker.domain.value_objects.token_id import TokenId


class TestTokenId:
    def test_generated_ids_are_url_safe_and_unique(self):
        ids = {TokenId.generate().value for _ in range(100)}

        assert len(ids) == 100
        assert all(len(v) == 43 for v in ids)
        assert all(set(v) <= set(TokenId.VALID_CHARS) for v in ids)

    @pytest.mark.parametrize("value", ["", "short", "=" * 43, "a" * 44])
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            TokenId(value)

    def test_mask_for_logging(self):
        token_id = TokenId("abcd" + "x" * 39)
        assert token_id.mask_for_logging() == "abcd" + "*" * 39


class TestTokenKind:
    @pytest.mark.parametrize(
        "raw, kind",
        [("access", TokenKind.ACCESS), ("refresh", TokenKind.REFRESH), ("id", TokenKind.UNKNOWN), (None, TokenKind.UNKNOWN)],
    )
    def test_parse(self, raw, kind):
        assert TokenKind.parse(raw) is kind


def test_only_valid_status_is_valid():
    assert [s for s in TokenStatus if s.is_valid] == [TokenStatus.VALID]
