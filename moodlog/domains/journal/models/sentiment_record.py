"""Query-optimized projection of an entry's latest sentiment."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship

from moodlog.extensions import db


class SentimentRecord(db.Model):
    """One row per analyzed entry; mood/color are copied so charts skip the join."""

    __tablename__ = "journal_sentiment_record"
    __table_args__ = (db.Index("ix_journal_sentiment_record_created_at", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    entry_id: Mapped[int] = mapped_column(
        db.ForeignKey("journal_entry.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    entry_updated_at: Mapped[datetime] = mapped_column(nullable=False)
    mood: Mapped[str] = mapped_column(db.String(100), nullable=False)
    color: Mapped[str] = mapped_column(db.String(7), nullable=False)
    score: Mapped[int] = mapped_column(db.Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    entry = relationship("JournalEntry", back_populates="sentiment_record")
