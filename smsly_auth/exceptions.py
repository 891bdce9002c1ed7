"""
Auth Exceptions
===============
Error taxonomy for the OTP login flow and bearer token checks.
"""

from typing import Optional


class AuthError(Exception):
    """Base exception for all smsly-auth errors."""
    pass


class StorageError(AuthError):
    """Raised when the challenge repository is unavailable or fails."""

    def __init__(self, message: str, backend: str = "unknown"):
        self.message = message
        self.backend = backend
        super().__init__(f"[{backend}] {message}")


class DeliveryError(AuthError):
    """Raised when the notifier could not hand the passcode to its provider."""

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"[{provider}] {message} (Status: {status_code})")


class InvalidCredential(AuthError):
    """
    Wrong passcode, expired or missing challenge, or a rejected token.

    The message is deliberately generic; callers must not learn which
    check failed.
    """

    def __init__(self, message: str = "Invalid credential"):
        super().__init__(message)


class Unauthenticated(AuthError):
    """Raised when no bearer token was presented at all."""

    def __init__(self, message: str = "No credential supplied"):
        super().__init__(message)


class SecretUnavailable(AuthError, RuntimeError):
    """The signing secret was never loaded. Fatal at startup."""
    pass
