"""
Auth Session Flow
=================
Registration (issue, persist, notify) and login (verify, consume, issue token).

Usage:
    flow = AuthSessionFlow(repository, notifier, TokenIssuer(secret, config), config)

    await flow.register("+15551234567")
    token = await flow.login("+15551234567", "482913")
"""

from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from .config import AuthConfig
from .exceptions import InvalidCredential
from .logging import mask_subject
from .notify.base import Notifier
from .otp.generator import ChallengeGenerator
from .repository.base import ChallengeRepository
from .tokens.issuer import TokenIssuer
from .tokens.models import AuthToken

logger = structlog.get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuthSessionFlow:
    """
    Orchestrates the OTP challenge lifecycle.

    Holds no per-request state; the repository is the only shared mutable
    resource.
    """

    def __init__(
        self,
        repository: ChallengeRepository,
        notifier: Notifier,
        issuer: TokenIssuer,
        config: Optional[AuthConfig] = None,
        generator: Optional[ChallengeGenerator] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.notifier = notifier
        self.issuer = issuer
        self.config = config or AuthConfig()
        self.generator = generator or ChallengeGenerator(self.config)
        self.clock = clock

    def render_message(self, passcode: str) -> str:
        return self.config.message_template.format(otp=passcode)

    async def register(self, subject: str) -> None:
        """
        Issue a challenge for ``subject`` and deliver it.

        The challenge is persisted before the notifier sees the passcode, so
        a login right after delivery always finds it. A new registration
        replaces any outstanding challenge.

        Raises:
            ValueError: If subject is empty
            StorageError: If the challenge could not be stored (nothing sent)
            DeliveryError: If delivery failed (the challenge stays valid)
        """
        if not subject:
            raise ValueError("subject must be non-empty")

        challenge = self.generator.generate(subject, self.clock())
        await self.repository.put(subject, challenge)

        log = logger.bind(subject=mask_subject(subject), notifier=self.notifier.name)
        log.info("OTP challenge stored", expires_at=challenge.expires_at.isoformat())

        try:
            await self.notifier.send(subject, self.render_message(challenge.passcode))
        except Exception:
            log.warning("OTP delivery failed")
            raise
        log.info("OTP delivered")

    async def login(
        self,
        subject: str,
        passcode: str,
        now: Optional[datetime] = None,
    ) -> AuthToken:
        """
        Exchange a passcode for a bearer token.

        Wrong passcode, expired challenge and missing challenge all raise the
        same ``InvalidCredential``. The challenge is removed before the token
        is minted, so one challenge authenticates at most once.

        Raises:
            InvalidCredential: If the passcode cannot be accepted
            StorageError: If the repository failed
        """
        now = now or self.clock()
        log = logger.bind(subject=mask_subject(subject))

        if not subject:
            log.warning("Login rejected", reason="empty_subject")
            raise InvalidCredential()

        challenge = await self.repository.get(subject)
        if challenge is None:
            log.warning("Login rejected", reason="no_challenge")
            raise InvalidCredential()

        # Evaluate both checks before branching
        matches = challenge.matches(passcode)
        expired = challenge.is_expired(now)
        if not matches or expired:
            log.warning("Login rejected", reason="expired" if matches else "mismatch")
            raise InvalidCredential()

        if self.repository.supports_atomic_consume:
            if not await self.repository.consume(subject, challenge):
                log.warning("Login rejected", reason="already_consumed")
                raise InvalidCredential()
        else:
            # Best effort: a concurrent login may slip in before removal lands
            await self.repository.remove(subject)

        log.info("OTP challenge consumed")
        return self.issuer.issue(subject, now)
