"""create user and journal tables

Revision ID: 20260101_journal_initial
Revises:
Create Date: 2026-01-01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20260101_journal_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("external_id", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), unique=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_user_external_id", "user", ["external_id"], unique=True)

    op.create_table(
        "journal_entry",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_journal_entry_user_id", "journal_entry", ["user_id"])
    op.create_index("ix_journal_entry_user_updated_at", "journal_entry", ["user_id", "updated_at"])

    op.create_table(
        "journal_analysis",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "entry_id",
            sa.Integer(),
            sa.ForeignKey("journal_entry.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("mood", sa.String(length=100), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("color", sa.String(length=7), nullable=False),
        sa.Column("negative", sa.Boolean(), nullable=False),
        sa.Column("sentiment_score", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "journal_sentiment_record",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "entry_id",
            sa.Integer(),
            sa.ForeignKey("journal_entry.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("entry_updated_at", sa.DateTime(), nullable=False),
        sa.Column("mood", sa.String(length=100), nullable=False),
        sa.Column("color", sa.String(length=7), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_journal_sentiment_record_created_at", "journal_sentiment_record", ["created_at"]
    )

    op.create_table(
        "journal_bookmark",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "entry_id",
            sa.Integer(),
            sa.ForeignKey("journal_entry.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "entry_id", name="ux_journal_bookmark_user_entry"),
    )
    op.create_index("ix_journal_bookmark_user_id", "journal_bookmark", ["user_id"])
    op.create_index("ix_journal_bookmark_entry_id", "journal_bookmark", ["entry_id"])


def downgrade():
    op.drop_table("journal_bookmark")
    op.drop_table("journal_sentiment_record")
    op.drop_table("journal_analysis")
    op.drop_table("journal_entry")
    op.drop_table("user")
