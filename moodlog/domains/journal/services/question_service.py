"""Free-text questions answered from a user's journal corpus."""

from __future__ import annotations

from flask import current_app

from moodlog.domains.journal.models import JournalEntry
from moodlog.extensions import db

NO_ENTRIES_ANSWER = (
    "You don't have any journal entries yet. Start writing to ask questions about your journals!"
)


def answer_question(user_id: int, question: str) -> str:
    """Ask the model about the user's most recent entries.

    Raises AnnotationError when the model call fails.
    """
    limit = current_app.config.get("QUESTION_ENTRY_LIMIT", 50)
    rows = (
        db.session.query(JournalEntry.content)
        .filter(JournalEntry.user_id == user_id, JournalEntry.content != "")
        .order_by(JournalEntry.updated_at.desc())
        .limit(limit)
        .all()
    )
    contents = [row.content for row in rows if row.content.strip()]
    if not contents:
        return NO_ENTRIES_ANSWER
    client = current_app.extensions["annotation_client"]
    return client.answer_question(question, contents)
