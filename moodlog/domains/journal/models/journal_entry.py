"""Journal entry and its per-entry analysis."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship

from moodlog.extensions import db


class JournalEntry(db.Model):
    __tablename__ = "journal_entry"
    __table_args__ = (db.Index("ix_journal_entry_user_updated_at", "user_id", "updated_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False
    )
    content: Mapped[str] = mapped_column(db.Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    # Set explicitly by the service on content changes.
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    user = relationship("User", back_populates="entries")
    analysis = relationship(
        "JournalAnalysis",
        back_populates="entry",
        uselist=False,
        cascade="all, delete-orphan",
    )
    sentiment_record = relationship(
        "SentimentRecord",
        back_populates="entry",
        uselist=False,
        cascade="all, delete-orphan",
    )
    bookmarks = relationship(
        "Bookmark",
        back_populates="entry",
        cascade="all, delete-orphan",
    )


class JournalAnalysis(db.Model):
    """Latest model annotation of an entry; replaced in place on re-analysis."""

    __tablename__ = "journal_analysis"

    id: Mapped[int] = mapped_column(primary_key=True)
    entry_id: Mapped[int] = mapped_column(
        db.ForeignKey("journal_entry.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    mood: Mapped[str] = mapped_column(db.String(100), nullable=False)
    subject: Mapped[str] = mapped_column(db.String(255), nullable=False)
    summary: Mapped[str] = mapped_column(db.Text, nullable=False)
    color: Mapped[str] = mapped_column(db.String(7), nullable=False)
    negative: Mapped[bool] = mapped_column(nullable=False, default=False)
    sentiment_score: Mapped[int] = mapped_column(db.Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    entry: Mapped[JournalEntry] = relationship("JournalEntry", back_populates="analysis")
