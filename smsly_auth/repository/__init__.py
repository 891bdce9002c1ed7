"""
Challenge Repositories
======================
Storage backends for outstanding OTP challenges.
"""

from .base import ChallengeRepository
from .memory import InMemoryChallengeRepository
from .redis_repository import RedisChallengeRepository
from .sql import SqlChallengeRepository

__all__ = [
    "ChallengeRepository",
    "InMemoryChallengeRepository",
    "RedisChallengeRepository",
    "SqlChallengeRepository",
]
