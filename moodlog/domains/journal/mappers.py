"""Journal mappers for DTO responses."""

from __future__ import annotations

from typing import Optional

from moodlog.domains.journal.models import JournalAnalysis, JournalEntry, SentimentRecord
from moodlog.domains.journal.schemas.journal_schemas import (
    AnalysisResponse,
    AnnotationResult,
    JournalEntryResponse,
    SentimentRecordResponse,
)


def _iso(value) -> str:
    return value.isoformat() if value else ""


def map_analysis(analysis: JournalAnalysis | AnnotationResult | None) -> Optional[dict]:
    if analysis is None:
        return None
    return AnalysisResponse(
        mood=analysis.mood,
        subject=analysis.subject,
        summary=analysis.summary,
        color=analysis.color,
        negative=bool(analysis.negative),
        sentiment_score=int(analysis.sentiment_score),
    ).model_dump()


def map_entry(entry: JournalEntry, *, is_bookmarked: bool = False) -> dict:
    return JournalEntryResponse(
        id=entry.id,
        content=entry.content,
        created_at=_iso(entry.created_at),
        updated_at=_iso(entry.updated_at),
        is_bookmarked=is_bookmarked,
        analysis=map_analysis(entry.analysis),
    ).model_dump()


def map_sentiment_record(record: SentimentRecord) -> dict:
    return SentimentRecordResponse(
        id=record.id,
        entry_id=record.entry_id,
        entry_updated_at=_iso(record.entry_updated_at),
        mood=record.mood,
        color=record.color,
        score=record.score,
        created_at=_iso(record.created_at),
        updated_at=_iso(record.updated_at),
    ).model_dump()
