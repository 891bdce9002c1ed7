"""
Auth Configuration
==================
Immutable settings for challenge lifetime, passcode shape and token lifetime.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

DEFAULT_MESSAGE_TEMPLATE = "Your OTP for registration is: {otp}"

# Upper bound shared by the login schema and the SQL passcode column
MAX_OTP_LENGTH = 16


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_optional(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


@dataclass(frozen=True)
class TwilioConfig:
    """Credentials for the Twilio SMS notifier."""
    account_sid: str
    auth_token: str = field(repr=False)
    from_number: Optional[str] = None
    messaging_service_sid: Optional[str] = None
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> Optional["TwilioConfig"]:
        """Return None when Twilio is not configured (dev mode)."""
        account_sid = _env_optional("TWILIO_ACCOUNT_SID")
        auth_token = _env_optional("TWILIO_AUTH_TOKEN")
        if not account_sid or not auth_token:
            return None
        return cls(
            account_sid=account_sid,
            auth_token=auth_token,
            from_number=_env_optional("TWILIO_PHONE_NUMBER"),
            messaging_service_sid=_env_optional("TWILIO_MESSAGING_SERVICE_SID"),
        )


@dataclass(frozen=True)
class AuthConfig:
    """
    Configuration for the OTP login flow.

    Constructed once at startup and passed to the generator, token issuer
    and token verifier. The signing secret is NOT part of this object; see
    ``SecretStore``.
    """
    challenge_ttl_seconds: int = 300  # 5 minutes
    otp_length: int = 6
    token_ttl_seconds: int = 3600  # 1 hour
    jwt_issuer: Optional[str] = None
    jwt_algorithm: str = "HS256"
    message_template: str = DEFAULT_MESSAGE_TEMPLATE

    service_name: str = "smsly-auth"
    log_level: str = "INFO"
    log_json: bool = True

    challenge_backend: str = "memory"  # memory|redis|sql
    redis_url: Optional[str] = None
    database_url: Optional[str] = None

    def __post_init__(self):
        if self.challenge_ttl_seconds <= 0:
            raise ValueError("challenge_ttl_seconds must be positive")
        if self.token_ttl_seconds <= 0:
            raise ValueError("token_ttl_seconds must be positive")
        if not 4 <= self.otp_length <= MAX_OTP_LENGTH:
            raise ValueError(f"otp_length must be between 4 and {MAX_OTP_LENGTH}")
        if "{otp}" not in self.message_template:
            raise ValueError("message_template must contain {otp}")
        if self.challenge_backend not in ("memory", "redis", "sql"):
            raise ValueError(f"Unknown challenge backend: {self.challenge_backend}")

    @property
    def passcode_range(self) -> Tuple[int, int]:
        """Inclusive (low, high) bounds of the numeric passcode."""
        return 10 ** (self.otp_length - 1), 10 ** self.otp_length - 1

    @classmethod
    def from_env(cls) -> "AuthConfig":
        return cls(
            challenge_ttl_seconds=int(os.environ.get("OTP_TTL_SECONDS", "300")),
            otp_length=int(os.environ.get("OTP_LENGTH", "6")),
            token_ttl_seconds=int(os.environ.get("TOKEN_TTL_SECONDS", "3600")),
            jwt_issuer=_env_optional("JWT_ISSUER"),
            message_template=os.environ.get("OTP_MESSAGE_TEMPLATE", DEFAULT_MESSAGE_TEMPLATE),
            service_name=os.environ.get("SERVICE_NAME", "smsly-auth"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            log_json=_env_bool("LOG_JSON", True),
            challenge_backend=os.environ.get("CHALLENGE_BACKEND", "memory").strip().lower(),
            redis_url=_env_optional("REDIS_URL"),
            database_url=_env_optional("DATABASE_URL"),
        )
