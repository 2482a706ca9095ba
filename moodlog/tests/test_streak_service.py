"""Streak calculator tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from moodlog.domains.journal.models import JournalEntry
from moodlog.domains.journal.services import streak_service
from moodlog.extensions import db


# ==================== compute_streak ====================


@pytest.mark.unit
def test_streak_empty_is_zero():
    assert streak_service.compute_streak([]) == 0


@pytest.mark.unit
def test_streak_counts_consecutive_days_and_stops_at_gap():
    """05, 04, 04, 03 count three days; the jump to 01 ends the run."""
    timestamps = [
        datetime(2024, 1, 5, 9),
        datetime(2024, 1, 4, 20),
        datetime(2024, 1, 4, 7),
        datetime(2024, 1, 3, 12),
        datetime(2024, 1, 1, 12),
    ]
    assert streak_service.compute_streak(timestamps) == 3


@pytest.mark.unit
def test_streak_same_day_counts_once():
    timestamps = [datetime(2024, 6, 1, 23), datetime(2024, 6, 1, 8), datetime(2024, 6, 1, 0)]
    assert streak_service.compute_streak(timestamps) == 1


@pytest.mark.unit
def test_streak_is_anchored_at_newest_entry_not_today():
    """An old run still counts; the calculator does not look at the clock."""
    timestamps = [datetime(2020, 2, 29), datetime(2020, 2, 28), datetime(2020, 2, 27)]
    assert streak_service.compute_streak(timestamps) == 3


@pytest.mark.unit
def test_streak_crosses_month_boundary():
    timestamps = [datetime(2024, 3, 1, 10), datetime(2024, 2, 29, 10), datetime(2024, 2, 28, 10)]
    assert streak_service.compute_streak(timestamps) == 3


@pytest.mark.unit
def test_streak_uses_local_calendar_days():
    """Two UTC days can be one local day once shifted into the configured zone."""
    spread = [datetime(2024, 1, 5, 4, 30), datetime(2024, 1, 4, 6, 0)]
    assert streak_service.compute_streak(spread) == 2
    assert streak_service.compute_streak(spread, ZoneInfo("UTC")) == 2
    # 04:30 UTC is 23:30 on the 4th in New York, same local day as 01:00 there.
    assert streak_service.compute_streak(spread, ZoneInfo("America/New_York")) == 1


# ==================== streak_progress ====================


@pytest.mark.unit
@pytest.mark.parametrize(
    "streak, value, tier",
    [
        (0, 0, "none"),
        (1, 1, "low"),
        (2, 2, "warm"),
        (3, 3, "hot"),
        (5, 5, "fire"),
        (6, 6, "max"),
        (40, 7, "max"),
    ],
)
def test_streak_progress_clamps_and_tiers(streak, value, tier):
    progress = streak_service.streak_progress(streak, 7)
    assert progress.value == value
    assert progress.max == 7
    assert progress.tier == tier
    assert 0 <= progress.ratio <= 1


# ==================== get_current_streak ====================


@pytest.mark.integration
def test_current_streak_reads_entry_update_times(app, user, other_user):
    now = datetime.utcnow()
    for days_ago in (0, 1, 2, 5):
        moment = now - timedelta(days=days_ago)
        db.session.add(JournalEntry(user_id=user.id, content="x", created_at=moment, updated_at=moment))
    # Another user's activity never extends this user's streak.
    moment = now - timedelta(days=3)
    db.session.add(JournalEntry(user_id=other_user.id, content="y", created_at=moment, updated_at=moment))
    db.session.commit()

    assert streak_service.get_current_streak(user.id) == 3
    assert streak_service.get_current_streak(other_user.id) == 1


@pytest.mark.integration
def test_current_streak_without_entries(app, user):
    assert streak_service.get_current_streak(user.id) == 0
