"""Itinerary schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates trip, place, itinerary and itinerary_item.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        "trip",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("destination_city", sa.String(255), nullable=True),
        sa.Column("destination_country", sa.String(255), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "place",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("trip_id", sa.Uuid(), nullable=True),
        sa.Column("google_place_id", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("place_type", sa.String(100), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("city", sa.String(255), nullable=True),
        sa.Column("country", sa.String(255), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["trip_id"], ["trip.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("google_place_id"),
    )

    op.create_table(
        "itinerary",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("trip_id", sa.Uuid(), nullable=False),
        sa.Column("day_number", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["trip_id"], ["trip.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("trip_id", "day_number", name="uq_itinerary_trip_day"),
    )

    op.create_table(
        "itinerary_item",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("itinerary_id", sa.Uuid(), nullable=False),
        sa.Column("place_id", sa.Uuid(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("item_type", sa.String(50), nullable=False),
        sa.Column("status", sa.String(50), nullable=False),
        sa.Column("cost", sa.Numeric(10, 2), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("distance_from_previous_meters", sa.Integer(), nullable=True),
        sa.Column("distance_from_previous_text", sa.String(50), nullable=True),
        sa.Column("travel_time_from_previous_seconds", sa.Integer(), nullable=True),
        sa.Column("travel_time_from_previous_text", sa.String(50), nullable=True),
        sa.Column("transport_mode", sa.String(20), nullable=True),
        sa.Column("transport_mode_pinned", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("is_starting_point", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("distance_status", sa.String(32), nullable=True),
        sa.Column("distance_error", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["itinerary_id"], ["itinerary.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["place_id"], ["place.id"], ondelete="SET NULL"),
    )
    op.create_index("idx_item_itinerary_order", "itinerary_item", ["itinerary_id", "order_index"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("idx_item_itinerary_order", table_name="itinerary_item")
    op.drop_table("itinerary_item")
    op.drop_table("itinerary")
    op.drop_table("place")
    op.drop_table("trip")
