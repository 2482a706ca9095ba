"""Reusable decorators for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import current_app, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from moodlog.core.auth.csrf import CSRF_HEADER, validate_csrf_token
from moodlog.core.users.services import get_or_create_user

F = TypeVar("F", bound=Callable)


def identity_required(fn: F) -> F:
    """Resolve the caller's JWT subject to a User and pass it as ``user``.

    A missing or invalid token is a 401; a subject seen for the first time
    creates the user record.
    """

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        try:
            verify_jwt_in_request()
        except (JWTExtendedException, PyJWTError):
            return jsonify({"ok": False, "error": "unauthorized"}), 401
        external_id = get_jwt_identity()
        if not external_id:
            return jsonify({"ok": False, "error": "unauthorized"}), 401
        claims = get_jwt() or {}
        try:
            user = get_or_create_user(str(external_id), claims.get("email"))
        except ValueError:
            # Blank subject after stripping
            return jsonify({"ok": False, "error": "unauthorized"}), 401
        return fn(*args, user=user, **kwargs)

    return wrapper  # type: ignore[return-value]


def csrf_protected(fn: F) -> F:
    """Validate CSRF token from header X-CSRF-Token."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if not current_app.config.get("CSRF_ENABLED", True):
            return fn(*args, **kwargs)
        token = request.headers.get(CSRF_HEADER)
        if not validate_csrf_token(token or ""):
            return jsonify({"ok": False, "error": "csrf_failed"}), 403
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
