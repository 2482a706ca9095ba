"""User model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship

from moodlog.extensions import db


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)


class User(db.Model, TimestampMixin):
    __tablename__ = "user"

    id: Mapped[int] = mapped_column(primary_key=True)
    # Subject issued by the external identity provider.
    external_id: Mapped[str] = mapped_column(db.String(255), unique=True, nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(db.String(255), unique=True)

    entries: Mapped[list["JournalEntry"]] = relationship(  # noqa: F821
        "JournalEntry",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    bookmarks: Mapped[list["Bookmark"]] = relationship(  # noqa: F821
        "Bookmark",
        back_populates="user",
        cascade="all, delete-orphan",
    )
