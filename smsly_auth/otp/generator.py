"""
OTP Generator
=============
Produces numeric passcodes and their expiration instant.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from ..config import AuthConfig
from .models import OtpChallenge

logger = structlog.get_logger(__name__)


def generate_passcode(length: int = 6) -> str:
    """
    Draw a passcode uniformly from [10**(length-1), 10**length - 1].

    Uses ``secrets`` so the value is unpredictable to an attacker.
    """
    low = 10 ** (length - 1)
    high = 10 ** length - 1
    return str(low + secrets.randbelow(high - low + 1))


class ChallengeGenerator:
    """Creates ``OtpChallenge`` objects from an ``AuthConfig``."""

    def __init__(self, config: Optional[AuthConfig] = None):
        self.config = config or AuthConfig()

    def generate(self, subject: str, now: Optional[datetime] = None) -> OtpChallenge:
        """
        Create a fresh challenge for a subject.

        Args:
            subject: Phone number the passcode is bound to
            now: Creation instant (defaults to the current UTC time)

        Returns:
            OtpChallenge expiring ``challenge_ttl_seconds`` after ``now``
        """
        now = now or datetime.now(timezone.utc)
        challenge = OtpChallenge(
            subject=subject,
            passcode=generate_passcode(self.config.otp_length),
            expires_at=now + timedelta(seconds=self.config.challenge_ttl_seconds),
            created_at=now,
        )
        logger.debug("OTP challenge generated", expires_in=self.config.challenge_ttl_seconds)
        return challenge
