"""Initial schema: users, country catalogue, preferences, travel lists, planning, attractions

Revision ID: roampedia_001
Revises:
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID

revision = "roampedia_001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def _owner() -> list[sa.Column]:
    return [
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_email", sa.String(255), nullable=False),
    ]


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100)),
        sa.Column("last_name", sa.String(100)),
        sa.Column("display_name", sa.String(150)),
        sa.Column("avatar", sa.String(500)),
        sa.Column("is_email_verified", sa.Boolean, server_default="false"),
        sa.Column("is_active", sa.Boolean, server_default="true"),
        sa.Column("role", sa.String(20), server_default="user"),
        sa.Column("preferences", JSONB),
        sa.Column("last_login", sa.DateTime(timezone=True)),
        sa.Column("refresh_tokens", JSONB, server_default="[]"),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_is_active", "users", ["is_active"])

    # --- countries ---
    op.create_table(
        "countries",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("country", sa.String(150), nullable=False, unique=True),
        sa.Column("code", sa.String(3)),
        sa.Column("capital", sa.String(150)),
        sa.Column("currency", sa.String(100)),
        sa.Column("vibe_tags", ARRAY(sa.String(50)), server_default="{}"),
        sa.Column("activity_tags", ARRAY(sa.String(50)), server_default="{}"),
        sa.Column("region", sa.String(50)),
        sa.Column("subregion", sa.String(100)),
        sa.Column("climate", sa.String(50)),
        sa.Column("best_season", sa.String(100)),
        sa.Column("description", sa.Text),
        sa.Column("image_url", sa.String(500)),
        sa.Column("flag_url", sa.String(500)),
        sa.Column("popularity_score", sa.Integer, server_default="0"),
        sa.Column("budget_level", sa.String(20)),
        sa.Column("languages", ARRAY(sa.String(50))),
        *_timestamps(),
    )
    op.create_index("ix_countries_country", "countries", ["country"])
    op.create_index("ix_countries_code", "countries", ["code"])
    op.create_index("ix_countries_region", "countries", ["region"])
    op.create_index("ix_countries_vibe_tags", "countries", ["vibe_tags"], postgresql_using="gin")
    op.create_index("ix_countries_activity_tags", "countries", ["activity_tags"], postgresql_using="gin")

    # --- user_preferences ---
    op.create_table(
        "user_preferences",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False, unique=True,
        ),
        sa.Column("preferred_vibes", JSONB, server_default="[]"),
        sa.Column("preferred_activities", JSONB, server_default="[]"),
        sa.Column("liked_countries", JSONB, server_default="[]"),
        sa.Column("disliked_countries", JSONB, server_default="[]"),
        sa.Column("feedback_history", JSONB, server_default="[]"),
        sa.Column("preferred_regions", JSONB, server_default="[]"),
        sa.Column("budget_preference", sa.String(20)),
        sa.Column("last_query", JSONB),
        *_timestamps(),
    )

    # --- visited / wishlist ---
    for table, extra in (("visited", "date_visited"), ("wishlist", "added_at")):
        op.create_table(
            table,
            sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
            *_owner(),
            sa.Column("country_code", sa.String(10), nullable=False),
            sa.Column("country_name", sa.String(150)),
            sa.Column("region", sa.String(50)),
            sa.Column("flag_url", sa.String(500)),
            sa.Column(extra, sa.DateTime(timezone=True), server_default=sa.func.now()),
            *_timestamps(),
            sa.UniqueConstraint("user_id", "country_code", name=f"uq_{table}_user_country"),
        )
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])
        op.create_index(f"ix_{table}_user_email", table, ["user_email"])

    # --- travel_notes ---
    op.create_table(
        "travel_notes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        *_owner(),
        sa.Column("country_name", sa.String(150), nullable=False),
        sa.Column("country_code", sa.String(10), nullable=False),
        sa.Column("notes", sa.Text, server_default=""),
        sa.Column("priority", sa.String(20), server_default=""),
        sa.Column("flag_url", sa.String(500)),
        sa.Column("region", sa.String(50)),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "country_code", name="uq_travel_note_user_country"),
    )
    op.create_index("ix_travel_notes_user_id", "travel_notes", ["user_id"])
    op.create_index("ix_travel_notes_user_email", "travel_notes", ["user_email"])

    # --- user_experiences ---
    op.create_table(
        "user_experiences",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        *_owner(),
        sa.Column("country", sa.String(150), nullable=False),
        sa.Column("experience", sa.Text, nullable=False),
        sa.Column("themes", ARRAY(sa.String(50)), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("from_date", sa.Date, nullable=False),
        sa.Column("to_date", sa.Date, nullable=False),
        *_timestamps(),
        sa.CheckConstraint("rating BETWEEN 1 AND 10", name="ck_user_experiences_rating"),
    )
    op.create_index("ix_user_experiences_user_id", "user_experiences", ["user_id"])
    op.create_index("ix_user_experiences_user_email", "user_experiences", ["user_email"])

    # --- itineraries / tasks / expenses ---
    op.create_table(
        "itineraries",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("home_country", sa.String(150)),
        sa.Column("destination", sa.String(150)),
        sa.Column("departure_date", sa.Date),
        sa.Column("return_date", sa.Date),
        sa.Column("adults", sa.Integer, server_default="1"),
        sa.Column("children", sa.Integer, server_default="0"),
        sa.Column("infants", sa.Integer, server_default="0"),
        sa.Column("budget_min", sa.Numeric(12, 2)),
        sa.Column("budget_max", sa.Numeric(12, 2)),
        sa.Column("currency", sa.String(3), server_default="USD"),
        *_timestamps(),
    )
    op.create_index("ix_itineraries_user_id", "itineraries", ["user_id"])

    op.create_table(
        "tasks",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column(
            "itinerary_id", UUID(as_uuid=True), sa.ForeignKey("itineraries.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("text", sa.String(500), nullable=False),
        sa.Column("done", sa.Boolean, server_default="false"),
        *_timestamps(),
    )
    op.create_index("ix_tasks_itinerary_id", "tasks", ["itinerary_id"])

    op.create_table(
        "expenses",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("trip_id", UUID(as_uuid=True), sa.ForeignKey("itineraries.id", ondelete="SET NULL")),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("budget", sa.Numeric(12, 2), server_default="0"),
        sa.Column("actual", sa.Numeric(12, 2), server_default="0"),
        sa.Column("notes", sa.Text),
        *_timestamps(),
    )
    op.create_index("ix_expenses_user_id", "expenses", ["user_id"])
    op.create_index("ix_expenses_trip_id", "expenses", ["trip_id"])

    # --- attractions ---
    op.create_table(
        "attractions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("site_name", sa.String(500), nullable=False),
        sa.Column("country", sa.String(500)),
        sa.Column("country_iso", sa.String(50)),
        sa.Column("category", sa.String(50)),
        sa.Column("year_inscribed", sa.Integer),
        sa.Column("lat", sa.Float),
        sa.Column("lon", sa.Float),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_attractions_country_iso", "attractions", ["country_iso"])


def downgrade() -> None:
    for table in (
        "attractions", "expenses", "tasks", "itineraries", "user_experiences", "travel_notes",
        "wishlist", "visited", "user_preferences", "countries", "users",
    ):
        op.drop_table(table)
