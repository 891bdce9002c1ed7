"""
Redis Challenge Repository
==========================
Redis-backed challenge store with an atomic compare-and-delete for consumption.
"""

import json
import math
from datetime import datetime, timezone
from typing import Optional, Union

import structlog
from redis.asyncio import Redis
from redis.exceptions import NoScriptError, RedisError

from ..exceptions import StorageError
from ..logging import mask_subject
from ..otp.models import OtpChallenge
from .base import ChallengeRepository

logger = structlog.get_logger(__name__)

# Lua script: delete the key only if it still holds the verified challenge
CONSUME_SCRIPT = """
local current = redis.call('GET', KEYS[1])
if current == ARGV[1] then
    redis.call('DEL', KEYS[1])
    return 1
end
return 0
"""


def serialize_challenge(challenge: OtpChallenge) -> str:
    """Deterministic JSON encoding; consume() compares encoded values."""
    return json.dumps(
        {
            "subject": challenge.subject,
            "passcode": challenge.passcode,
            "expires_at": challenge.expires_at.isoformat(),
            "created_at": challenge.created_at.isoformat(),
        },
        sort_keys=True,
        separators=(",", ":"),
    )


def deserialize_challenge(raw: Union[str, bytes]) -> OtpChallenge:
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    data = json.loads(raw)
    return OtpChallenge(
        subject=data["subject"],
        passcode=data["passcode"],
        expires_at=datetime.fromisoformat(data["expires_at"]),
        created_at=datetime.fromisoformat(data["created_at"]),
    )


class RedisChallengeRepository(ChallengeRepository):
    """
    Challenge repository on Redis.

    Keys carry a Redis TTL so abandoned challenges are evicted, but login
    never relies on eviction: ``expires_at`` is always re-checked.
    """

    name = "redis"
    supports_atomic_consume = True

    def __init__(
        self,
        redis_client: Redis,
        key_prefix: str = "otp:challenge:",
        eviction_grace_seconds: int = 60,
    ):
        """
        Args:
            redis_client: Async Redis client
            key_prefix: Namespace for challenge keys
            eviction_grace_seconds: Extra lifetime added to the Redis TTL
        """
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.eviction_grace_seconds = eviction_grace_seconds
        self._script_sha: Optional[str] = None

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisChallengeRepository":
        return cls(Redis.from_url(url, decode_responses=True), **kwargs)

    def _key(self, subject: str) -> str:
        return f"{self.key_prefix}{subject}"

    def _eviction_ttl(self, challenge: OtpChallenge) -> int:
        remaining = (challenge.expires_at - datetime.now(timezone.utc)).total_seconds()
        return max(0, math.ceil(remaining)) + self.eviction_grace_seconds

    async def put(self, subject: str, challenge: OtpChallenge) -> None:
        try:
            await self.redis.set(
                self._key(subject),
                serialize_challenge(challenge),
                ex=self._eviction_ttl(challenge),
            )
        except RedisError as e:
            logger.error("Redis challenge write failed", subject=mask_subject(subject), error=str(e))
            raise StorageError("Failed to store challenge", backend=self.name) from e

    async def get(self, subject: str) -> Optional[OtpChallenge]:
        try:
            raw = await self.redis.get(self._key(subject))
        except RedisError as e:
            logger.error("Redis challenge read failed", subject=mask_subject(subject), error=str(e))
            raise StorageError("Failed to read challenge", backend=self.name) from e
        if raw is None:
            return None
        try:
            return deserialize_challenge(raw)
        except (ValueError, KeyError) as e:
            raise StorageError("Corrupt challenge record", backend=self.name) from e

    async def remove(self, subject: str) -> None:
        try:
            await self.redis.delete(self._key(subject))
        except RedisError as e:
            logger.error("Redis challenge delete failed", subject=mask_subject(subject), error=str(e))
            raise StorageError("Failed to remove challenge", backend=self.name) from e

    async def _ensure_script(self) -> str:
        """Load Lua script into Redis if needed."""
        if self._script_sha is None:
            self._script_sha = await self.redis.script_load(CONSUME_SCRIPT)
        return self._script_sha

    async def consume(self, subject: str, challenge: OtpChallenge) -> bool:
        key = self._key(subject)
        expected = serialize_challenge(challenge)
        try:
            sha = await self._ensure_script()
            try:
                removed = await self.redis.evalsha(sha, 1, key, expected)
            except NoScriptError:
                # Script cache was flushed on the server
                self._script_sha = None
                sha = await self._ensure_script()
                removed = await self.redis.evalsha(sha, 1, key, expected)
        except RedisError as e:
            logger.error("Redis challenge consume failed", subject=mask_subject(subject), error=str(e))
            raise StorageError("Failed to consume challenge", backend=self.name) from e
        return int(removed) == 1

    async def close(self) -> None:
        await self.redis.aclose()
