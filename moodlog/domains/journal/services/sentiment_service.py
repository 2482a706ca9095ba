"""Sentiment record store: one projection row per analyzed entry."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Protocol

from sqlalchemy.exc import IntegrityError

from moodlog.domains.journal.models import JournalEntry, SentimentRecord
from moodlog.extensions import db

logger = logging.getLogger(__name__)


class ScoredAnalysis(Protocol):
    mood: str
    color: str
    sentiment_score: int


def record_score(
    entry_id: int,
    entry_updated_at: datetime,
    analysis: ScoredAnalysis,
    *,
    commit: bool = True,
) -> SentimentRecord:
    """Insert or overwrite the sentiment record for ``entry_id``.

    Repeating the call with the same arguments leaves a single row with the same
    values. Pass ``commit=False`` to fold the write into the caller's transaction;
    the caller then owns recovery from a concurrent insert.
    """
    try:
        record = _write_score(entry_id, entry_updated_at, analysis)
    except IntegrityError:
        if not commit:
            raise
        # Another writer created the row first; overwrite it.
        db.session.rollback()
        record = _write_score(entry_id, entry_updated_at, analysis)
    if commit:
        db.session.commit()
    logger.debug("Recorded sentiment %s for entry %s", record.score, entry_id)
    return record


def _write_score(entry_id: int, entry_updated_at: datetime, analysis: ScoredAnalysis) -> SentimentRecord:
    record = SentimentRecord.query.filter_by(entry_id=entry_id).first()
    now = datetime.utcnow()
    if record is None:
        record = SentimentRecord(entry_id=entry_id, created_at=now)
        db.session.add(record)
    record.entry_updated_at = entry_updated_at
    record.mood = analysis.mood
    record.color = analysis.color
    record.score = int(analysis.sentiment_score)
    record.updated_at = now
    db.session.flush()
    return record


def get_score(entry_id: int) -> Optional[SentimentRecord]:
    return SentimentRecord.query.filter_by(entry_id=entry_id).first()


def get_scores_for_user(user_id: int, since_days_ago: Optional[int] = None) -> List[SentimentRecord]:
    """Records for entries owned by ``user_id``, oldest first.

    Ownership is resolved through the entry; records carry no user column.
    """
    query = (
        db.session.query(SentimentRecord)
        .join(JournalEntry, SentimentRecord.entry_id == JournalEntry.id)
        .filter(JournalEntry.user_id == user_id)
    )
    if since_days_ago:
        threshold = datetime.utcnow() - timedelta(days=since_days_ago)
        query = query.filter(SentimentRecord.created_at >= threshold)
    return query.order_by(SentimentRecord.created_at.asc(), SentimentRecord.id.asc()).all()
