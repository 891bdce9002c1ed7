"""
Bearer Tokens
=============
Issuing and verifying signed, time-bounded tokens.
"""

from .models import AuthToken
from .issuer import TokenIssuer
from .verifier import TokenVerifier

__all__ = [
    "AuthToken",
    "TokenIssuer",
    "TokenVerifier",
]
