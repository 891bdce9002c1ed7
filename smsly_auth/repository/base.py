"""
Challenge Repository
====================
Abstract storage contract for outstanding OTP challenges.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..otp.models import OtpChallenge


class ChallengeRepository(ABC):
    """
    Durable mapping from subject to its single outstanding challenge.

    Implementations must wrap backend failures in ``StorageError`` and must
    never evict expired entries on ``get``; expiration is the caller's check.
    """

    name: str = "base"
    supports_atomic_consume: bool = False

    @abstractmethod
    async def put(self, subject: str, challenge: OtpChallenge) -> None:
        """Store a challenge, replacing any existing one for the subject."""
        pass

    @abstractmethod
    async def get(self, subject: str) -> Optional[OtpChallenge]:
        """Return the stored challenge, or None if there is none."""
        pass

    @abstractmethod
    async def remove(self, subject: str) -> None:
        """Delete the stored challenge. Removing an absent key is not an error."""
        pass

    async def consume(self, subject: str, challenge: OtpChallenge) -> bool:
        """
        Delete the stored challenge if it is still ``challenge``.

        Returns:
            True if this call removed it, False if it was already gone or
            replaced by a newer registration

        The default is a get followed by remove and is not atomic across
        processes. Backends that can compare-and-delete override it and set
        ``supports_atomic_consume``.
        """
        if await self.get(subject) != challenge:
            return False
        await self.remove(subject)
        return True

    async def close(self) -> None:
        """Release backend resources."""
        pass
