"""Sentiment aggregation: averages, extremes, mood frequency and history summaries.

The helpers are pure and accept any objects exposing ``score``, ``mood`` and
``created_at`` (normally SentimentRecord rows). Input order matters only for
``most_common_mood`` ties, so pass records oldest first.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from flask import current_app

from moodlog.domains.journal.schemas.journal_schemas import (
    ChartPoint,
    DateRange,
    HistorySummary,
    SentimentStats,
)
from moodlog.domains.journal.services import sentiment_service

NO_DATA = "N/A"
_TWO_PLACES = Decimal("0.01")


class ScoreLike(Protocol):
    score: int
    mood: str
    created_at: datetime


def average(records: Sequence[ScoreLike]) -> Optional[float]:
    """Mean score rounded half-up to 2 places; None when there is no data."""
    if not records:
        return None
    total = sum(int(r.score) for r in records)
    mean = Decimal(total) / Decimal(len(records))
    return float(mean.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def extremes(records: Sequence[ScoreLike]) -> Dict[str, Optional[int]]:
    if not records:
        return {"highest": None, "lowest": None}
    scores = [int(r.score) for r in records]
    return {"highest": max(scores), "lowest": min(scores)}


def most_common_mood(records: Iterable[ScoreLike]) -> Optional[str]:
    """Mood with the highest count.

    Ties go to the label that reached the winning count first while walking the
    records in order, so [A, B, A, B] yields A and [A, B, B, A] yields B.
    """
    counts: Dict[str, int] = {}
    best: Optional[str] = None
    best_count = 0
    for record in records:
        mood = record.mood
        if not mood:
            continue
        counts[mood] = counts.get(mood, 0) + 1
        if counts[mood] > best_count:
            best, best_count = mood, counts[mood]
    return best


def date_range_summary(records: Sequence[ScoreLike]) -> Dict[str, str]:
    if not records:
        return {"start": NO_DATA, "end": NO_DATA}
    ordered = sorted(records, key=lambda r: r.created_at)
    return {
        "start": ordered[0].created_at.date().isoformat(),
        "end": ordered[-1].created_at.date().isoformat(),
    }


def stats(records: Sequence[ScoreLike]) -> Dict[str, object]:
    if not records:
        return {"total": 0, "average": None, "highest": None, "lowest": None, "most_common_mood": None}
    bounds = extremes(records)
    return {
        "total": len(records),
        "average": average(records),
        "highest": bounds["highest"],
        "lowest": bounds["lowest"],
        "most_common_mood": most_common_mood(records),
    }


def window(records: Iterable[ScoreLike], days: int, now: Optional[datetime] = None) -> List[ScoreLike]:
    """Records created within the trailing ``days`` days."""
    threshold = (now or datetime.utcnow()) - timedelta(days=days)
    return [r for r in records if r.created_at >= threshold]


def chart_label(moment: datetime) -> str:
    return f"{moment:%b} {moment.day}"


def build_history_summary(user_id: int, days: Optional[int] = None) -> HistorySummary:
    """Chart payload: windowed series and average, all-time stats."""
    days = days or current_app.config.get("HISTORY_WINDOW_DAYS", 30)
    recent = sentiment_service.get_scores_for_user(user_id, since_days_ago=days)
    all_records = sentiment_service.get_scores_for_user(user_id)
    return HistorySummary(
        chart_data=[
            ChartPoint(date=chart_label(r.created_at), score=r.score, mood=r.mood, color=r.color)
            for r in recent
        ],
        average=average(recent),
        stats=SentimentStats(**stats(all_records)),
        date_range=DateRange(**date_range_summary(recent)),
    )
