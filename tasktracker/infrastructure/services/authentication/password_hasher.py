"""Password hashing on top of passlib's bcrypt scheme.

bcrypt is deliberately slow, so every call is pushed to a worker thread with
``asyncio.to_thread`` to keep the event loop responsive. A hash that has
started cannot be cancelled; the awaiting request simply waits for it.
"""

import asyncio

from passlib.context import CryptContext
from structlog import get_logger

from tasktracker.domain.interfaces.services import ICredentialVerifier

logger = get_logger(__name__)


class PasswordHasher(ICredentialVerifier):
    """bcrypt-backed :class:`ICredentialVerifier`.

    Args:
        work_factor: bcrypt cost (log2 rounds).
    """

    def __init__(self, work_factor: int = 12):
        self.pwd_context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=work_factor
        )

    async def hash(self, raw_password: str) -> str:
        return await asyncio.to_thread(self.pwd_context.hash, raw_password)

    async def verify(self, raw_password: str, hashed_password: str) -> bool:
        if not raw_password or not hashed_password:
            return False
        try:
            return await asyncio.to_thread(self.pwd_context.verify, raw_password, hashed_password)
        except ValueError:
            # Stored value is not a hash passlib recognises.
            logger.warning("Unrecognised password hash format")
            return False

    async def dummy_verify(self) -> None:
        await asyncio.to_thread(self.pwd_context.dummy_verify)
