"""Maintenance command tests (check-tables, backfill-sentiment)."""

from __future__ import annotations

from datetime import datetime

import pytest

pytestmark = pytest.mark.integration

from moodlog.domains.journal.models import JournalAnalysis, JournalEntry, SentimentRecord
from moodlog.domains.journal.services import journal_service
from moodlog.extensions import db
from moodlog.scripts.maintenance import backfill_sentiment_records, find_missing_tables


def _analyzed_entry_without_record(user_id, mood="calm", score=3):
    now = datetime.utcnow()
    entry = JournalEntry(user_id=user_id, content="legacy", created_at=now, updated_at=now)
    entry.analysis = JournalAnalysis(
        mood=mood, subject="work", summary="Legacy row.", color="#123456", negative=False, sentiment_score=score
    )
    db.session.add(entry)
    db.session.commit()
    return entry


def test_migrated_schema_has_every_table(app):
    assert find_missing_tables() == []


def test_check_tables_command(app):
    result = app.test_cli_runner().invoke(args=["check-tables"])
    assert result.exit_code == 0
    assert "journal_sentiment_record" in result.output


def test_backfill_creates_missing_records(app, user):
    entry = _analyzed_entry_without_record(user.id)

    stats = backfill_sentiment_records()

    assert stats == {"checked": 1, "created": 1, "updated": 0}
    record = SentimentRecord.query.filter_by(entry_id=entry.id).one()
    assert (record.mood, record.score) == ("calm", 3)


def test_backfill_updates_stale_and_skips_current(app, user):
    current, _ = journal_service.create_entry(user.id, "annotated normally")
    stale = _analyzed_entry_without_record(user.id, score=-5)
    backfill_sentiment_records()
    stale.analysis.sentiment_score = -1
    db.session.commit()

    stats = backfill_sentiment_records()

    assert stats == {"checked": 2, "created": 0, "updated": 1}
    assert SentimentRecord.query.filter_by(entry_id=stale.id).one().score == -1
    assert SentimentRecord.query.filter_by(entry_id=current.id).one().score == 7


def test_backfill_limited_to_user(app, user, other_user):
    _analyzed_entry_without_record(user.id)
    _analyzed_entry_without_record(other_user.id)

    stats = backfill_sentiment_records(other_user.id)

    assert stats["created"] == 1
    assert SentimentRecord.query.count() == 1


def test_backfill_command_output(app, user):
    _analyzed_entry_without_record(user.id)
    result = app.test_cli_runner().invoke(args=["backfill-sentiment"])
    assert result.exit_code == 0
    assert "Created: 1" in result.output
