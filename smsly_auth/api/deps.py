from typing import Optional

from fastapi import Depends, Request

from ..exceptions import InvalidCredential, Unauthenticated
from ..flow import AuthSessionFlow
from ..tokens.verifier import TokenVerifier
from .errors import ApiErrors

BEARER_PREFIX = "bearer "


def get_flow(request: Request) -> AuthSessionFlow:
    return request.app.state.flow


def get_verifier(request: Request) -> TokenVerifier:
    return request.app.state.verifier


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """
    Accept both ``Bearer <jwt>`` and a bare ``<jwt>`` header value.

    Only an absent or blank header yields None. Any other value, including
    a lone "Bearer", is handed to the verifier and rejected there.
    """
    if authorization is None:
        return None
    value = authorization.strip()
    if value.lower().startswith(BEARER_PREFIX):
        value = value[len(BEARER_PREFIX):].strip()
    return value or None


def require_subject(
    request: Request,
    verifier: TokenVerifier = Depends(get_verifier),
) -> str:
    """
    Dependency that authorizes the request and returns the token subject.

    Missing header -> 401, rejected token -> 403.
    """
    token = extract_token(request.headers.get("authorization"))
    try:
        subject = verifier.verify(token)
    except Unauthenticated:
        raise ApiErrors.no_token()
    except InvalidCredential:
        raise ApiErrors.invalid_token()
    request.state.subject = subject
    return subject
