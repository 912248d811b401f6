"""Create users, source tables and reports.

Revision ID: 001_initial_report_engine
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial_report_engine"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
    )


def upgrade() -> None:
    """Create all tables read or written by the report engine."""

    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("uid", sa.String(128), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("role", sa.String(20), server_default="user", nullable=False),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("last_login_at", sa.TIMESTAMP(timezone=True), nullable=True),
    )
    op.create_index("ix_users_uid", "users", ["uid"], unique=True)
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "trips",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_uid", sa.String(128), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("destination", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("trip_type", sa.String(20), server_default="Solo", nullable=False),
        sa.Column("start_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("end_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("duration_days", sa.Integer, nullable=True),
        sa.Column("budget", sa.Float, server_default="0", nullable=False),
        sa.Column("is_eco_friendly", sa.Boolean, server_default="false", nullable=False),
        sa.Column("eco_score", sa.Float, server_default="0", nullable=False),
        sa.Column("carbon_footprint", sa.Float, server_default="0", nullable=False),
        sa.Column("carbon_saved", sa.Float, server_default="0", nullable=False),
        _created_at(),
    )
    op.create_index("ix_trips_owner_uid", "trips", ["owner_uid"])
    op.create_index("ix_trips_destination", "trips", ["destination"])
    op.create_index("ix_trips_start_date", "trips", ["start_date"])

    op.create_table(
        "packing_lists",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_uid", sa.String(128), nullable=False),
        sa.Column("trip_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("is_ai_generated", sa.Boolean, server_default="false", nullable=False),
        sa.Column("categories", postgresql.JSONB, server_default="[]", nullable=False),
        _created_at(),
    )
    op.create_index("ix_packing_lists_owner_uid", "packing_lists", ["owner_uid"])
    op.create_index("ix_packing_lists_created_at", "packing_lists", ["created_at"])

    op.create_table(
        "posts",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_uid", sa.String(128), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("tags", postgresql.JSONB, server_default="[]", nullable=False),
        sa.Column("status", sa.String(20), server_default="published", nullable=False),
        sa.Column("like_count", sa.Integer, server_default="0", nullable=False),
        sa.Column("comments", postgresql.JSONB, server_default="[]", nullable=False),
        _created_at(),
    )
    op.create_index("ix_posts_owner_uid", "posts", ["owner_uid"])
    op.create_index("ix_posts_created_at", "posts", ["created_at"])

    op.create_table(
        "products",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("brand", sa.String(255), nullable=True),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("eco_rating", sa.Integer, server_default="1", nullable=False),
        sa.Column("price", sa.Float, server_default="0", nullable=False),
        sa.Column("is_available", sa.Boolean, server_default="true", nullable=False),
        sa.Column("available_locations", postgresql.JSONB, server_default="[]", nullable=False),
        _created_at(),
    )
    op.create_index("ix_products_category", "products", ["category"])

    op.create_table(
        "news",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("link", sa.String(1000), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("content", sa.Text, nullable=True),
        sa.Column("image", sa.String(1000), nullable=True),
        sa.Column("source_id", sa.String(100), nullable=False),
        sa.Column("tags", postgresql.JSONB, server_default="[]", nullable=False),
        sa.Column("published_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index("ix_news_source_id", "news", ["source_id"])
    op.create_index("ix_news_published_at", "news", ["published_at"])

    op.create_table(
        "reports",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_uid", sa.String(128), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("report_type", sa.String(50), nullable=False),
        sa.Column("filters", postgresql.JSONB, server_default="{}", nullable=False),
        sa.Column("selected_fields", postgresql.JSONB, nullable=True),
        sa.Column("data", postgresql.JSONB, server_default="{}", nullable=False),
        sa.Column("status", sa.String(20), server_default="pending", nullable=False),
        sa.Column("error_message", sa.Text, nullable=True),
        sa.Column("generated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("is_scheduled", sa.Boolean, server_default="false", nullable=False),
        sa.Column("schedule_frequency", sa.String(20), nullable=True),
        sa.Column("last_generated", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("tags", postgresql.JSONB, server_default="[]", nullable=False),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
        sa.CheckConstraint(
            "status <> 'completed' OR generated_at IS NOT NULL",
            name="ck_reports_completed_has_generated_at",
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'generating', 'completed', 'failed')",
            name="ck_reports_status",
        ),
    )
    op.create_index("ix_reports_owner_uid", "reports", ["owner_uid"])
    op.create_index("ix_reports_owner_generated", "reports", ["owner_uid", "generated_at"])
    op.create_index("ix_reports_owner_type", "reports", ["owner_uid", "report_type"])


def downgrade() -> None:
    """Drop all report engine tables."""

    for index, table in (
        ("ix_reports_owner_type", "reports"),
        ("ix_reports_owner_generated", "reports"),
        ("ix_reports_owner_uid", "reports"),
    ):
        op.drop_index(index, table_name=table)
    op.drop_table("reports")
    op.drop_table("news")
    op.drop_table("products")
    op.drop_table("posts")
    op.drop_table("packing_lists")
    op.drop_table("trips")
    op.drop_table("users")
