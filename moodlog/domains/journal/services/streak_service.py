"""Daily writing streaks."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from flask import current_app

from moodlog.domains.journal.models import JournalEntry
from moodlog.domains.journal.schemas.journal_schemas import StreakProgress
from moodlog.extensions import db

# (fraction of max, tier) checked from the top down.
_TIERS = ((0.85, "max"), (0.7, "fire"), (0.4, "hot"), (0.2, "warm"))


def _local_date(moment: datetime, tz: Optional[ZoneInfo]) -> date:
    if tz is None:
        return moment.date()
    if moment.tzinfo is None:
        # Stored timestamps are naive UTC.
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).date()


def compute_streak(timestamps: Iterable[datetime], tz: Optional[ZoneInfo] = None) -> int:
    """Consecutive calendar days with activity, counted back from the newest timestamp.

    ``timestamps`` must already be sorted newest first. Several timestamps on one
    day count once; the first gap of more than a day ends the streak.
    """
    streak = 0
    cursor: Optional[date] = None
    for moment in timestamps:
        day = _local_date(moment, tz)
        if cursor is None:
            cursor = day
            streak = 1
            continue
        gap = (cursor - day).days
        if gap == 0:
            continue
        if gap == 1:
            streak += 1
            cursor = day
            continue
        break
    return streak


def get_current_streak(user_id: int) -> int:
    rows = (
        db.session.query(JournalEntry.updated_at)
        .filter(JournalEntry.user_id == user_id)
        .order_by(JournalEntry.updated_at.desc())
        .all()
    )
    tz_name = current_app.config.get("STREAK_TIMEZONE") or "UTC"
    return compute_streak((row.updated_at for row in rows), ZoneInfo(tz_name))


def streak_progress(streak: int, max_days: int = 7) -> StreakProgress:
    """Clamp a streak into the 0..max_days range used by the progress ring."""
    max_days = max(max_days, 1)
    clamped = max(0, min(streak, max_days))
    tier = "none"
    if streak > 0:
        tier = "low"
        for fraction, name in _TIERS:
            if streak >= max_days * fraction:
                tier = name
                break
    return StreakProgress(value=clamped, max=max_days, ratio=round(clamped / max_days, 4), tier=tier)
