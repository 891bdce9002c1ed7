"""
Token Models
============
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class AuthToken:
    """A signed bearer token; the server keeps no state for it."""
    token: str = field(repr=False)
    subject: str
    issued_at: datetime
    expires_at: datetime
    token_type: str = "bearer"
