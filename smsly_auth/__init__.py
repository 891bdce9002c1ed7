"""
SMSLY Auth
==========
Phone-number OTP login and bearer tokens for SMSLYCLOUD services.
"""

__version__ = "0.1.0"

# Configuration
from smsly_auth.config import AuthConfig, TwilioConfig

# Errors
from smsly_auth.exceptions import (
    AuthError,
    StorageError,
    DeliveryError,
    InvalidCredential,
    Unauthenticated,
    SecretUnavailable,
)

# Secret
from smsly_auth.secret_store import SecretStore

# OTP
from smsly_auth.otp import OtpChallenge, ChallengeGenerator, generate_passcode

# Repositories
from smsly_auth.repository import (
    ChallengeRepository,
    InMemoryChallengeRepository,
    RedisChallengeRepository,
    SqlChallengeRepository,
)

# Notifiers
from smsly_auth.notify import Notifier, InMemoryNotifier, TwilioNotifier

# Tokens
from smsly_auth.tokens import AuthToken, TokenIssuer, TokenVerifier

# Flow
from smsly_auth.flow import AuthSessionFlow

# Logging
from smsly_auth.logging import configure_logging

__all__ = [
    # Configuration
    "AuthConfig",
    "TwilioConfig",
    # Errors
    "AuthError",
    "StorageError",
    "DeliveryError",
    "InvalidCredential",
    "Unauthenticated",
    "SecretUnavailable",
    # Secret
    "SecretStore",
    # OTP
    "OtpChallenge",
    "ChallengeGenerator",
    "generate_passcode",
    # Repositories
    "ChallengeRepository",
    "InMemoryChallengeRepository",
    "RedisChallengeRepository",
    "SqlChallengeRepository",
    # Notifiers
    "Notifier",
    "InMemoryNotifier",
    "TwilioNotifier",
    # Tokens
    "AuthToken",
    "TokenIssuer",
    "TokenVerifier",
    # Flow
    "AuthSessionFlow",
    # Logging
    "configure_logging",
]
