"""Service interfaces consumed by the authentication gateway."""

from abc import ABC, abstractmethod


class ICredentialVerifier(ABC):
    """Hashes and checks passwords.

    Implementations are expected to be slow on purpose and must not block the
    event loop while they work.
    """

    @abstractmethod
    async def hash(self, raw_password: str) -> str:
        raise NotImplementedError

    @abstractmethod
    async def verify(self, raw_password: str, hashed_password: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def dummy_verify(self) -> None:
        """Spend the same effort as :meth:`verify` without a real hash.

        Used when the account does not exist, so a failed login costs the same
        whether or not the email is registered.
        """
        raise NotImplementedError
