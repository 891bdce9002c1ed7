"""
Shared fixtures for smsly-auth tests.
"""

from datetime import datetime, timezone

import pytest

TEST_SECRET = "test-signing-secret-0123456789abcdef"
T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
PHONE = "+15551234567"


class FrozenClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FrozenClock(T0)


@pytest.fixture
def config():
    from smsly_auth.config import AuthConfig

    return AuthConfig()


@pytest.fixture
def secret():
    from smsly_auth.secret_store import SecretStore

    return SecretStore(TEST_SECRET)


@pytest.fixture
def repository():
    from smsly_auth.repository import InMemoryChallengeRepository

    return InMemoryChallengeRepository()


@pytest.fixture
def notifier():
    from smsly_auth.notify import InMemoryNotifier

    return InMemoryNotifier()


@pytest.fixture
def issuer(secret, config):
    from smsly_auth.tokens import TokenIssuer

    return TokenIssuer(secret, config)


@pytest.fixture
def verifier(secret, config):
    from smsly_auth.tokens import TokenVerifier

    return TokenVerifier(secret, config)


@pytest.fixture
def flow(repository, notifier, issuer, config, clock):
    from smsly_auth.flow import AuthSessionFlow

    return AuthSessionFlow(repository, notifier, issuer, config, clock=clock)


@pytest.fixture
def fixed_passcode(monkeypatch):
    """Force the next generated passcodes to be 482913."""
    import smsly_auth.otp.generator as generator

    monkeypatch.setattr(generator.secrets, "randbelow", lambda n: 382913)
    return "482913"


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any configure_logging() call made by a test."""
    import logging

    import structlog

    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
