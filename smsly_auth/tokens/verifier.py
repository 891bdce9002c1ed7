"""
Token Verifier
==============
Stateless bearer token check used by the authorization dependency.
"""

from datetime import datetime, timezone
from typing import Optional

import jwt
import structlog

from ..config import AuthConfig
from ..exceptions import InvalidCredential, Unauthenticated
from ..secret_store import SecretStore

logger = structlog.get_logger(__name__)

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


class TokenVerifier:
    """
    Validates signature, algorithm and expiry, then returns the subject.

    PyJWT's own clock checks are disabled; ``exp`` is compared against the
    ``now`` passed in (or the current time) so the decision is reproducible.
    """

    def __init__(self, secret: SecretStore, config: Optional[AuthConfig] = None):
        self.secret = secret
        self.config = config or AuthConfig()

    def verify(self, token: Optional[str], now: Optional[datetime] = None) -> str:
        """
        Verify a presented token.

        Args:
            token: Compact JWT, or None when no credential was sent
            now: Decision instant (defaults to the current UTC time)

        Returns:
            The bound subject

        Raises:
            Unauthenticated: If no token was presented
            InvalidCredential: If the token is malformed, forged or expired
        """
        if token is None or not token.strip():
            raise Unauthenticated()

        secret = self.secret.reveal()
        try:
            payload = jwt.decode(
                token.strip(),
                secret,
                algorithms=[self.config.jwt_algorithm],
                issuer=self.config.jwt_issuer,
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.PyJWTError as e:
            logger.info("Token rejected", reason=type(e).__name__)
            raise InvalidCredential("Invalid token") from e

        subject = payload.get("sub")
        exp = payload.get("exp")
        if not isinstance(subject, str) or not subject:
            logger.info("Token rejected", reason="bad_subject")
            raise InvalidCredential("Invalid token")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            logger.info("Token rejected", reason="bad_expiry")
            raise InvalidCredential("Invalid token")

        now = now or datetime.now(timezone.utc)
        if now.timestamp() >= exp:
            logger.info("Token rejected", reason="expired")
            raise InvalidCredential("Invalid token")

        return subject
