"""
HTTP Transport
==============
FastAPI routes for registration, login and token-protected endpoints.
"""

from .app import create_app, create_app_from_env
from .deps import extract_token, require_subject

__all__ = [
    "create_app",
    "create_app_from_env",
    "extract_token",
    "require_subject",
]
