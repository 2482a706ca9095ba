"""Maintenance CLI commands.

Usage:
    flask check-tables                   # Report which expected tables exist
    flask backfill-sentiment             # Rebuild missing/stale sentiment records
    flask backfill-sentiment --user 1    # Only for one user
"""

from __future__ import annotations

import click
from flask.cli import with_appcontext
from sqlalchemy import inspect

EXPECTED_TABLES = (
    "user",
    "journal_entry",
    "journal_analysis",
    "journal_sentiment_record",
    "journal_bookmark",
)


def find_missing_tables() -> list[str]:
    from moodlog.extensions import db

    existing = set(inspect(db.engine).get_table_names())
    return [name for name in EXPECTED_TABLES if name not in existing]


def backfill_sentiment_records(user_id: int | None = None) -> dict:
    """Upsert a sentiment record for every analysis whose projection is missing or stale."""
    from moodlog.domains.journal.models import JournalAnalysis, JournalEntry, SentimentRecord
    from moodlog.domains.journal.services.sentiment_service import record_score
    from moodlog.extensions import db

    query = (
        db.session.query(JournalAnalysis, JournalEntry, SentimentRecord)
        .join(JournalEntry, JournalAnalysis.entry_id == JournalEntry.id)
        .outerjoin(SentimentRecord, SentimentRecord.entry_id == JournalEntry.id)
    )
    if user_id:
        query = query.filter(JournalEntry.user_id == user_id)

    stats = {"checked": 0, "created": 0, "updated": 0}
    for analysis, entry, record in query.all():
        stats["checked"] += 1
        if record is not None and (record.score, record.mood, record.color) == (
            analysis.sentiment_score,
            analysis.mood,
            analysis.color,
        ):
            continue
        record_score(entry.id, entry.updated_at, analysis, commit=False)
        stats["created" if record is None else "updated"] += 1
    db.session.commit()
    return stats


@click.command("check-tables")
@with_appcontext
def check_tables_command():
    """Report which expected tables exist."""
    missing = find_missing_tables()
    for name in EXPECTED_TABLES:
        mark = "✗" if name in missing else "✓"
        click.echo(f"  {mark} {name}")
    if missing:
        raise click.ClickException(f"Missing tables: {', '.join(missing)}. Run `flask db upgrade`.")


@click.command("backfill-sentiment")
@click.option("--user", "-u", type=int, help="Backfill for specific user ID only")
@with_appcontext
def backfill_sentiment_command(user: int | None):
    """Rebuild sentiment records from stored analyses."""
    stats = backfill_sentiment_records(user)
    click.echo(
        f"  ✓ Checked {stats['checked']} analyses | Created: {stats['created']}, Updated: {stats['updated']}"
    )


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(check_tables_command)
    app.cli.add_command(backfill_sentiment_command)
