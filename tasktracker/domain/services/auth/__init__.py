"""Token services: signing/verification and token issuance."""

from .token import TokenIssuer
from .token_codec import TokenCodec

__all__ = ["TokenCodec", "TokenIssuer"]
