"""Session-backed CSRF tokens for the JSON API."""

from __future__ import annotations

import secrets

from flask import session

CSRF_TOKEN_SESSION_KEY = "_csrf_token"
CSRF_HEADER = "X-CSRF-Token"


def generate_csrf_token() -> str:
    """Return the session's token, minting one on first use."""
    token = session.get(CSRF_TOKEN_SESSION_KEY)
    if not token:
        token = secrets.token_urlsafe(32)
        session[CSRF_TOKEN_SESSION_KEY] = token
    return token


def validate_csrf_token(token: str) -> bool:
    expected = session.get(CSRF_TOKEN_SESSION_KEY)
    if not token or not expected:
        return False
    return secrets.compare_digest(token, expected)
