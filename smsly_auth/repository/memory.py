"""
In-Memory Challenge Repository
==============================
Dict-backed repository for development and testing.
"""

from typing import Dict, Optional

from ..otp.models import OtpChallenge
from .base import ChallengeRepository


class InMemoryChallengeRepository(ChallengeRepository):
    """
    Process-local challenge store.

    Every operation completes without awaiting, so each call is atomic with
    respect to other coroutines on the same event loop.
    Use RedisChallengeRepository or SqlChallengeRepository in production.
    """

    name = "memory"
    supports_atomic_consume = True

    def __init__(self):
        self._challenges: Dict[str, OtpChallenge] = {}

    async def put(self, subject: str, challenge: OtpChallenge) -> None:
        self._challenges[subject] = challenge

    async def get(self, subject: str) -> Optional[OtpChallenge]:
        return self._challenges.get(subject)

    async def remove(self, subject: str) -> None:
        self._challenges.pop(subject, None)

    async def consume(self, subject: str, challenge: OtpChallenge) -> bool:
        if self._challenges.get(subject) != challenge:
            return False
        del self._challenges[subject]
        return True

    def __len__(self) -> int:
        return len(self._challenges)
