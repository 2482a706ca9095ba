"""User service layer."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from moodlog.core.users.models import User
from moodlog.extensions import db

logger = logging.getLogger(__name__)


def get_user(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def get_user_by_external_id(external_id: str) -> Optional[User]:
    return User.query.filter_by(external_id=external_id).first()


def get_or_create_user(external_id: str, email: Optional[str] = None) -> User:
    """Resolve an external identity to a user, creating it on first sight.

    An email claim already held by another user is not copied onto the new
    account; the identity, not the email, is what keys the user.
    """
    external_id = (external_id or "").strip()
    if not external_id:
        raise ValueError("validation_error")
    user = get_user_by_external_id(external_id)
    if user:
        return user
    email = (email or "").strip().lower() or None
    try:
        user = _insert_user(external_id, email)
    except IntegrityError:
        # A concurrent first request created the same identity.
        user = get_user_by_external_id(external_id)
        if user is not None:
            return user
        if email is None:
            raise
        logger.warning("Email for new identity already belongs to another user; creating without it")
        user = _insert_user(external_id, None)
    logger.info("Created user %s for external identity", user.id)
    return user


def _insert_user(external_id: str, email: Optional[str]) -> User:
    user = User(external_id=external_id, email=email)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise
    return user


def delete_user(user_id: int) -> bool:
    user = get_user(user_id)
    if not user:
        return False
    db.session.delete(user)
    db.session.commit()
    return True
