"""
OTP Models
==========
The stored challenge for one subject.
"""

import hmac
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class OtpChallenge:
    """An outstanding OTP challenge bound to one subject (phone number)."""
    subject: str
    passcode: str = field(repr=False)
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """A challenge is still valid at exactly ``expires_at``."""
        return now > self.expires_at

    def matches(self, passcode: str) -> bool:
        """Constant-time passcode comparison."""
        return hmac.compare_digest(
            self.passcode.encode("utf-8"),
            (passcode or "").encode("utf-8"),
        )
