"""Bookmark set: which entries a user has flagged."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Set, Tuple

from sqlalchemy.exc import IntegrityError

from moodlog.domains.journal.models import Bookmark, JournalEntry
from moodlog.domains.journal.schemas.journal_schemas import BookmarkStats
from moodlog.domains.journal.services.aggregation_service import most_common_mood
from moodlog.extensions import db


def add_bookmark(user_id: int, entry_id: int) -> Tuple[Bookmark, bool]:
    """Bookmark an entry; returns (bookmark, created).

    An existing bookmark is returned as-is. Raises ValueError("not_found") when
    the entry is not owned by the user.
    """
    entry = JournalEntry.query.filter_by(id=entry_id, user_id=user_id).first()
    if not entry:
        raise ValueError("not_found")
    existing = Bookmark.query.filter_by(user_id=user_id, entry_id=entry_id).first()
    if existing:
        return existing, False
    bookmark = Bookmark(user_id=user_id, entry_id=entry_id)
    db.session.add(bookmark)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a duplicate submission; the unique pair already exists.
        db.session.rollback()
        return Bookmark.query.filter_by(user_id=user_id, entry_id=entry_id).one(), False
    return bookmark, True


def remove_bookmark(user_id: int, entry_id: int) -> bool:
    """Delete the bookmark; False when there was none."""
    bookmark = Bookmark.query.filter_by(user_id=user_id, entry_id=entry_id).first()
    if not bookmark:
        return False
    db.session.delete(bookmark)
    db.session.commit()
    return True


def list_bookmarked_ids(user_id: int) -> Set[int]:
    rows = db.session.query(Bookmark.entry_id).filter(Bookmark.user_id == user_id).all()
    return {row.entry_id for row in rows}


def list_bookmarked_entries(user_id: int) -> List[Tuple[Bookmark, JournalEntry]]:
    """Bookmarked entries, most recently bookmarked first."""
    return (
        db.session.query(Bookmark, JournalEntry)
        .join(JournalEntry, Bookmark.entry_id == JournalEntry.id)
        .filter(Bookmark.user_id == user_id)
        .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
        .all()
    )


def bookmark_stats(pairs: List[Tuple[Bookmark, JournalEntry]], now: datetime | None = None) -> BookmarkStats:
    week_ago = (now or datetime.utcnow()) - timedelta(days=7)
    analyses = [entry.analysis for _, entry in pairs if entry.analysis is not None]
    return BookmarkStats(
        total=len(pairs),
        this_week=sum(1 for bookmark, _ in pairs if bookmark.created_at > week_ago),
        top_mood=most_common_mood(analyses),
    )
