"""SQLAlchemy ORM models for trips, places, itineraries and their items."""

import datetime as dt
import uuid
from datetime import date, datetime, time
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Trip(Base):
    """Trip table - the engine only reads the destination pair from it."""

    __tablename__ = "trip"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    destination_city: Mapped[str | None] = mapped_column(String(255), nullable=True)
    destination_country: Mapped[str | None] = mapped_column(String(255), nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    itineraries: Mapped[list["Itinerary"]] = relationship(
        "Itinerary",
        back_populates="trip",
        cascade="all, delete-orphan",
        order_by="Itinerary.day_number",
    )
    places: Mapped[list["Place"]] = relationship("Place", back_populates="trip")


class Place(Base):
    """Place table - geocoded point of interest referenced by items."""

    __tablename__ = "place"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("trip.id", ondelete="CASCADE"), nullable=True
    )
    google_place_id: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    place_type: Mapped[str] = mapped_column(String(100), nullable=False, default="attraction")
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(String(255), nullable=True)
    country: Mapped[str | None] = mapped_column(String(255), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    details: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    trip: Mapped["Trip | None"] = relationship("Trip", back_populates="places")


class Itinerary(Base):
    """Itinerary table - one calendar day of a trip."""

    __tablename__ = "itinerary"
    __table_args__ = (UniqueConstraint("trip_id", "day_number", name="uq_itinerary_trip_day"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trip.id", ondelete="CASCADE"), nullable=False
    )
    day_number: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    trip: Mapped["Trip"] = relationship("Trip", back_populates="itineraries")
    # Positions are owned by the collection: insert/remove/reorder renumber 0..n-1.
    items: Mapped[list["ItineraryItem"]] = relationship(
        "ItineraryItem",
        back_populates="itinerary",
        cascade="all, delete-orphan",
        order_by="ItineraryItem.order_index",
        collection_class=ordering_list("order_index"),
    )


class ItineraryItem(Base):
    """Itinerary item table - one scheduled activity within a day."""

    __tablename__ = "itinerary_item"
    __table_args__ = (Index("idx_item_itinerary_order", "itinerary_id", "order_index"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    itinerary_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("itinerary.id", ondelete="CASCADE"), nullable=False
    )
    place_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("place.id", ondelete="SET NULL"), nullable=True
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True, default=60)
    item_type: Mapped[str] = mapped_column(String(50), nullable=False, default="activity")
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="planned")
    cost: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Transport from the previous item
    distance_from_previous_meters: Mapped[int | None] = mapped_column(Integer, nullable=True)
    distance_from_previous_text: Mapped[str | None] = mapped_column(String(50), nullable=True)
    travel_time_from_previous_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    travel_time_from_previous_text: Mapped[str | None] = mapped_column(String(50), nullable=True)
    transport_mode: Mapped[str | None] = mapped_column(String(20), nullable=True)
    transport_mode_pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_starting_point: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    distance_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    distance_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    itinerary: Mapped["Itinerary"] = relationship("Itinerary", back_populates="items")
    place: Mapped["Place | None"] = relationship("Place")

    def clear_transport(self) -> None:
        """Drop transport-from-previous data (starting point has no predecessor)."""
        self.distance_from_previous_meters = None
        self.distance_from_previous_text = None
        self.travel_time_from_previous_seconds = None
        self.travel_time_from_previous_text = None
        self.distance_status = None
        self.distance_error = None
        self.transport_mode = None
        self.transport_mode_pinned = False
