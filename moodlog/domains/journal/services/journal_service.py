"""Journal services: entry CRUD with best-effort annotation."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from moodlog.domains.journal.ml.annotation_client import AnnotationError
from moodlog.domains.journal.models import JournalAnalysis, JournalEntry
from moodlog.domains.journal.schemas.journal_schemas import AnnotationResult
from moodlog.domains.journal.services.sentiment_service import record_score
from moodlog.extensions import db

logger = logging.getLogger(__name__)


def create_entry(user_id: int, content: str = "") -> Tuple[JournalEntry, Optional[AnnotationResult]]:
    """Insert an entry, then annotate it when it has content.

    The entry is committed before the model is called, so an annotation failure
    never loses the write.
    """
    now = datetime.utcnow()
    entry = JournalEntry(user_id=user_id, content=content or "", created_at=now, updated_at=now)
    db.session.add(entry)
    db.session.commit()
    analysis = analyze_entry(entry) if entry.content.strip() else None
    return entry, analysis


def update_entry(
    user_id: int, entry_id: int, content: str
) -> Optional[Tuple[JournalEntry, Optional[AnnotationResult], bool]]:
    """Replace an entry's content; returns (entry, analysis, changed) or None if not owned.

    Unchanged content is neither written nor re-analyzed.
    """
    entry = get_entry(user_id, entry_id)
    if not entry:
        return None
    if content == entry.content:
        return entry, None, False
    entry.content = content
    entry.updated_at = datetime.utcnow()
    db.session.commit()
    analysis = analyze_entry(entry) if content.strip() else None
    return entry, analysis, True


def delete_entry(user_id: int, entry_id: int) -> bool:
    entry = get_entry(user_id, entry_id)
    if not entry:
        return False
    # Analysis, sentiment record and bookmarks go with it via cascade.
    db.session.delete(entry)
    db.session.commit()
    return True


def get_entry(user_id: int, entry_id: int) -> Optional[JournalEntry]:
    return JournalEntry.query.filter_by(id=entry_id, user_id=user_id).first()


def list_entries(user_id: int, *, page: int = 1, per_page: int = 20) -> Tuple[List[JournalEntry], int]:
    query = JournalEntry.query.filter_by(user_id=user_id)
    total = query.count()
    entries = (
        query.order_by(JournalEntry.updated_at.desc(), JournalEntry.id.desc())
        .offset((max(page, 1) - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return entries, total


def analyze_entry(entry: JournalEntry) -> Optional[AnnotationResult]:
    """Annotate ``entry`` and persist the analysis plus its sentiment projection.

    Model failures are logged and yield None. If persisting fails the validated
    annotation is still returned. When another writer inserts the analysis rows
    first, the write is retried once as an update of those rows.
    """
    client = current_app.extensions["annotation_client"]
    try:
        result = client.annotate(entry.content)
    except AnnotationError as exc:
        logger.warning("Annotation failed for entry %s: %s", entry.id, exc)
        return None
    except Exception:
        logger.exception("Unexpected annotation error for entry %s", entry.id)
        return None

    for attempt in range(2):
        try:
            _persist_analysis(entry, result)
            break
        except IntegrityError:
            # Rollback expires the entry, so the retry reloads the rows that won.
            db.session.rollback()
            if attempt:
                logger.exception("Failed to persist analysis for entry %s", entry.id)
            else:
                logger.info("Analysis for entry %s written concurrently; retrying as update", entry.id)
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to persist analysis for entry %s", entry.id)
            break
    return result


def _persist_analysis(entry: JournalEntry, result: AnnotationResult) -> None:
    _upsert_analysis(entry, result)
    entry.sentiment_record = record_score(entry.id, entry.updated_at, result, commit=False)
    db.session.commit()


def _upsert_analysis(entry: JournalEntry, result: AnnotationResult) -> JournalAnalysis:
    analysis = entry.analysis
    if analysis is None:
        analysis = JournalAnalysis()
        entry.analysis = analysis
    analysis.mood = result.mood
    analysis.subject = result.subject
    analysis.summary = result.summary
    analysis.color = result.color
    analysis.negative = result.negative
    analysis.sentiment_score = result.sentiment_score
    analysis.updated_at = datetime.utcnow()
    return analysis
