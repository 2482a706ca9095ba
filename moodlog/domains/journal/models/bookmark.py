"""User bookmarks on journal entries."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship

from moodlog.extensions import db


class Bookmark(db.Model):
    __tablename__ = "journal_bookmark"
    __table_args__ = (
        db.UniqueConstraint("user_id", "entry_id", name="ux_journal_bookmark_user_entry"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        db.ForeignKey("user.id", ondelete="CASCADE"), index=True, nullable=False
    )
    entry_id: Mapped[int] = mapped_column(
        db.ForeignKey("journal_entry.id", ondelete="CASCADE"), index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    user = relationship("User", back_populates="bookmarks")
    entry = relationship("JournalEntry", back_populates="bookmarks")
