"""
HTTP Application
================
FastAPI transport for the OTP login flow.

Usage:
    python -m smsly_auth
"""

import os
from contextlib import asynccontextmanager
from typing import Dict, Optional

import structlog
from fastapi import FastAPI

from .. import __version__
from ..config import AuthConfig, TwilioConfig
from ..exceptions import SecretUnavailable
from ..flow import AuthSessionFlow
from ..logging import configure_logging
from ..notify.base import Notifier
from ..notify.memory import InMemoryNotifier
from ..notify.twilio import TwilioNotifier
from ..repository.base import ChallengeRepository
from ..repository.memory import InMemoryChallengeRepository
from ..repository.redis_repository import RedisChallengeRepository
from ..repository.sql import SqlChallengeRepository
from ..secret_store import SecretStore
from ..tokens.issuer import TokenIssuer
from ..tokens.verifier import TokenVerifier
from .errors import ApiError, api_error_handler
from .health import HealthCheck, create_health_router, repository_check, secret_check
from .router import router as auth_router

logger = structlog.get_logger(__name__)


def create_app(
    config: AuthConfig,
    flow: AuthSessionFlow,
    verifier: TokenVerifier,
    health_checks: Optional[Dict[str, HealthCheck]] = None,
) -> FastAPI:
    """
    Build the FastAPI app around already-constructed components.

    The repository and notifier owned by ``flow`` are closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if isinstance(flow.repository, SqlChallengeRepository):
            await flow.repository.create_schema()
        logger.info(
            "Auth service started",
            backend=flow.repository.name,
            notifier=flow.notifier.name,
        )
        yield
        await flow.repository.close()
        await flow.notifier.close()
        logger.info("Auth service stopped")

    app = FastAPI(title=config.service_name, version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.flow = flow
    app.state.verifier = verifier

    app.add_exception_handler(ApiError, api_error_handler)

    checks = {"challenge_store": repository_check(flow.repository)}
    checks.update(health_checks or {})
    app.include_router(create_health_router(config.service_name, __version__, checks))
    app.include_router(auth_router, tags=["auth"])
    return app


def load_secret() -> SecretStore:
    """
    Load the signing secret from Vault when configured, else from JWT_SECRET.

    Raises:
        SecretUnavailable: If no secret could be loaded
    """
    vault_path = os.environ.get("JWT_SECRET_VAULT_PATH", "").strip()
    if os.environ.get("VAULT_ADDR") and vault_path:
        secret = SecretStore.from_vault(
            path=vault_path,
            key=os.environ.get("JWT_SECRET_VAULT_KEY", "secret"),
        )
    else:
        secret = SecretStore.from_env("JWT_SECRET")
    if not secret.is_loaded:
        raise SecretUnavailable("JWT_SECRET is not configured")
    return secret


def build_repository(config: AuthConfig) -> ChallengeRepository:
    if config.challenge_backend == "redis":
        if not config.redis_url:
            raise ValueError("REDIS_URL is required for the redis challenge backend")
        return RedisChallengeRepository.from_url(config.redis_url)
    if config.challenge_backend == "sql":
        if not config.database_url:
            raise ValueError("DATABASE_URL is required for the sql challenge backend")
        return SqlChallengeRepository.from_url(config.database_url)
    return InMemoryChallengeRepository()


def build_notifier() -> Notifier:
    twilio = TwilioConfig.from_env()
    if twilio is None:
        logger.warning("Twilio not configured; passcodes go to the in-memory outbox")
        return InMemoryNotifier()
    return TwilioNotifier(twilio)


def create_app_from_env() -> FastAPI:
    """App factory reading all settings from the environment."""
    config = AuthConfig.from_env()
    configure_logging(config.service_name, config.log_level, config.log_json)

    secret = load_secret()
    flow = AuthSessionFlow(
        repository=build_repository(config),
        notifier=build_notifier(),
        issuer=TokenIssuer(secret, config),
        config=config,
    )
    return create_app(
        config,
        flow,
        TokenVerifier(secret, config),
        health_checks={"signing_secret": secret_check(secret)},
    )
