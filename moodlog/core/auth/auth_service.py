"""Token issuing for the external identity seam."""

from __future__ import annotations

from typing import Optional

from flask_jwt_extended import create_access_token


def issue_token(external_id: str, email: Optional[str] = None) -> str:
    """Create an access token whose subject is the external identity reference.

    In production the identity provider mints these; the helper exists for local
    development and the test suite.
    """
    claims = {"email": email} if email else {}
    return create_access_token(identity=external_id, additional_claims=claims)
