"""Itinerary models - request and response payloads for the scheduling API."""

import uuid
from datetime import date, time

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.common import DistanceStatus, TransportMode


class PlaceRead(BaseModel):
    """Place summary embedded in an item."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    google_place_id: str | None
    address: str | None
    city: str | None
    country: str | None
    latitude: float | None
    longitude: float | None
    place_type: str


class ItineraryItemCreate(BaseModel):
    """Body for inserting an item into a day.

    ``order_index`` is the target position; omitted means append.
    A ``transport_mode`` given here is pinned for the item.
    """

    itinerary_id: uuid.UUID
    order_index: int | None = Field(None, ge=0)
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    place_id: uuid.UUID | None = None
    google_place_id: str | None = None
    duration_minutes: int | None = Field(None, gt=0)
    transport_mode: TransportMode | None = None
    item_type: str = "activity"
    status: str = "planned"
    cost: float | None = Field(None, ge=0)
    notes: str | None = None


class ItineraryItemPatch(BaseModel):
    """Partial update of an item. Only fields present in the body are applied.

    Sending ``transport_mode: null`` clears the pin and lets the classifier choose again.
    """

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    notes: str | None = None
    start_time: time | None = None
    duration_minutes: int | None = Field(None, gt=0)
    transport_mode: TransportMode | None = None
    item_type: str | None = None
    status: str | None = None
    cost: float | None = Field(None, ge=0)


class ItineraryItemRead(BaseModel):
    """Item as returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    itinerary_id: uuid.UUID
    place_id: uuid.UUID | None
    order_index: int
    title: str
    description: str | None
    start_time: time | None
    end_time: time | None
    duration_minutes: int | None
    item_type: str
    status: str
    cost: float | None
    notes: str | None
    distance_from_previous_meters: int | None
    distance_from_previous_text: str | None
    travel_time_from_previous_seconds: int | None
    travel_time_from_previous_text: str | None
    transport_mode: TransportMode | None
    transport_mode_pinned: bool
    is_starting_point: bool
    distance_status: DistanceStatus | None
    distance_error: str | None
    place: PlaceRead | None = None


class ItineraryRead(BaseModel):
    """One day of a trip with its ordered items."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    trip_id: uuid.UUID
    day_number: int
    date: date
    title: str | None
    items: list[ItineraryItemRead]


class ReorderRequest(BaseModel):
    """Body for a bulk reorder."""

    item_ids: list[uuid.UUID] = Field(..., min_length=1)
