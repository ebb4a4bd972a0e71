"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("default_currency", sa.String(3), nullable=False, server_default="GBP"),
        sa.Column("beverage_type", sa.String(10), nullable=False, server_default="wine"),
        sa.Column("scoring_mode", sa.String(10), nullable=False, server_default="casual"),
        sa.Column("preferred_language", sa.String(5), nullable=True),
        *timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        *timestamps(),
    )
    op.create_index("ix_locations_id", "locations", ["id"])
    op.create_index("ix_locations_user_id", "locations", ["user_id"])

    op.create_table(
        "bottles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("producer", sa.String(255), nullable=True),
        sa.Column("vintage", sa.Integer(), nullable=True),
        sa.Column("grapes", sa.JSON(), nullable=True),
        sa.Column("country", sa.String(255), nullable=True),
        sa.Column("region", sa.String(255), nullable=True),
        sa.Column("beverage_type", sa.String(10), nullable=False, server_default="wine"),
        sa.Column("status", sa.String(20), nullable=False, server_default="in_cellar"),
        sa.Column("location_id", sa.Integer(), sa.ForeignKey("locations.id"), nullable=True),
        sa.Column("sub_location_text", sa.String(255), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("purchase_date", sa.Date(), nullable=True),
        sa.Column("purchase_source_type", sa.String(20), nullable=True),
        sa.Column("purchase_source_name", sa.String(255), nullable=True),
        sa.Column("price_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("price_currency", sa.String(3), nullable=True),
        sa.Column("notes_short", sa.String(500), nullable=True),
        sa.Column("notes_long", sa.Text(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        *timestamps(),
    )
    op.create_index("ix_bottles_id", "bottles", ["id"])
    op.create_index("ix_bottles_user_id", "bottles", ["user_id"])
    op.create_index("ix_bottles_status", "bottles", ["status"])
    op.create_index("ix_bottles_location_id", "bottles", ["location_id"])

    op.create_table(
        "drink_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("bottle_id", sa.Integer(), sa.ForeignKey("bottles.id"), nullable=False),
        sa.Column(
            "drank_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column("context", sa.String(255), nullable=True),
        sa.Column("venue", sa.String(255), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("tasting_notes", sa.JSON(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )
    op.create_index("ix_drink_logs_id", "drink_logs", ["id"])
    op.create_index("ix_drink_logs_user_id", "drink_logs", ["user_id"])
    op.create_index("ix_drink_logs_bottle_id", "drink_logs", ["bottle_id"])

    op.create_table(
        "tasting_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "tasted_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column("venue", sa.String(255), nullable=True),
        sa.Column("participants", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("is_social_mode", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("session_code", sa.String(8), nullable=True),
        sa.Column("invite_expires_at", sa.DateTime(timezone=True), nullable=True),
        *timestamps(),
    )
    op.create_index("ix_tasting_sessions_id", "tasting_sessions", ["id"])
    op.create_index("ix_tasting_sessions_user_id", "tasting_sessions", ["user_id"])
    op.create_index(
        "ix_tasting_sessions_session_code", "tasting_sessions", ["session_code"], unique=True
    )

    op.create_table(
        "session_guests",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "tasting_session_id",
            sa.Integer(),
            sa.ForeignKey("tasting_sessions.id"),
            nullable=False,
        ),
        sa.Column("guest_name", sa.String(100), nullable=False),
        sa.Column("guest_token_hash", sa.String(64), nullable=False),
        sa.Column(
            "joined_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index(
        "ix_session_guests_tasting_session_id", "session_guests", ["tasting_session_id"]
    )

    op.create_table(
        "tasting_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "tasting_session_id",
            sa.Integer(),
            sa.ForeignKey("tasting_sessions.id"),
            nullable=False,
        ),
        sa.Column("bottle_id", sa.Integer(), sa.ForeignKey("bottles.id"), nullable=True),
        sa.Column("ad_hoc_name", sa.String(255), nullable=True),
        sa.Column("ad_hoc_photo_url", sa.Text(), nullable=True),
        sa.Column("save_to_cellar", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("appearance_score", sa.Integer(), nullable=True),
        sa.Column("nose_score", sa.Integer(), nullable=True),
        sa.Column("palate_score", sa.Integer(), nullable=True),
        sa.Column("finish_score", sa.Integer(), nullable=True),
        sa.Column("balance_score", sa.Integer(), nullable=True),
        sa.Column("total_score", sa.Integer(), nullable=True),
        sa.Column("tasting_notes", sa.JSON(), nullable=True),
        sa.Column("entry_photo_url", sa.Text(), nullable=True),
        sa.Column("notes_short", sa.String(500), nullable=True),
        sa.Column("notes_long", sa.Text(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("guest_id", sa.String(36), sa.ForeignKey("session_guests.id"), nullable=True),
        sa.Column("guest_name", sa.String(100), nullable=True),
        sa.Column(
            "parent_entry_id", sa.Integer(), sa.ForeignKey("tasting_entries.id"), nullable=True
        ),
        *timestamps(),
        sa.UniqueConstraint(
            "tasting_session_id",
            "guest_id",
            "parent_entry_id",
            name="uq_tasting_entry_guest_parent",
        ),
    )
    op.create_index("ix_tasting_entries_id", "tasting_entries", ["id"])
    op.create_index(
        "ix_tasting_entries_tasting_session_id", "tasting_entries", ["tasting_session_id"]
    )
    op.create_index("ix_tasting_entries_total_score", "tasting_entries", ["total_score"])
    op.create_index("ix_tasting_entries_guest_id", "tasting_entries", ["guest_id"])
    op.create_index("ix_tasting_entries_parent_entry_id", "tasting_entries", ["parent_entry_id"])


def downgrade() -> None:
    op.drop_table("tasting_entries")
    op.drop_table("session_guests")
    op.drop_table("tasting_sessions")
    op.drop_table("drink_logs")
    op.drop_table("bottles")
    op.drop_table("locations")
    op.drop_table("users")
