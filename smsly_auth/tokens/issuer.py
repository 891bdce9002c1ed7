"""
Token Issuer
============
Mints HS256 JWTs binding a verified subject.
"""

from datetime import datetime, timezone
from typing import Optional

import jwt
import structlog

from ..config import AuthConfig
from ..logging import mask_subject
from ..secret_store import SecretStore
from .models import AuthToken

logger = structlog.get_logger(__name__)


class TokenIssuer:
    """Signs ``{sub, iat, exp}`` claims with the process signing secret."""

    def __init__(self, secret: SecretStore, config: Optional[AuthConfig] = None):
        self.secret = secret
        self.config = config or AuthConfig()

    def issue(self, subject: str, now: Optional[datetime] = None) -> AuthToken:
        """
        Issue a token for ``subject``.

        Claims are whole epoch seconds, so ``issued_at``/``expires_at`` are
        truncated to the second.

        Raises:
            SecretUnavailable: If the signing secret was never loaded
        """
        now = now or datetime.now(timezone.utc)
        issued_at = int(now.timestamp())
        expires_at = issued_at + self.config.token_ttl_seconds

        payload = {
            "sub": subject,
            "iat": issued_at,
            "exp": expires_at,
        }
        if self.config.jwt_issuer:
            payload["iss"] = self.config.jwt_issuer

        token = jwt.encode(payload, self.secret.reveal(), algorithm=self.config.jwt_algorithm)
        logger.info(
            "Token issued",
            subject=mask_subject(subject),
            expires_in=self.config.token_ttl_seconds,
        )
        return AuthToken(
            token=token,
            subject=subject,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        )
