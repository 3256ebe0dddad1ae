"""Itinerary endpoints - one day of a trip."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Path

from backend.app.api.deps import SchedulerDep
from backend.app.models.itinerary import ItineraryRead

router = APIRouter(tags=["itineraries"])


@router.post("/trips/{trip_id}/days/{day_number}", response_model=ItineraryRead)
async def get_or_create_day(
    trip_id: uuid.UUID,
    day_number: Annotated[int, Path(ge=1)],
    scheduler: SchedulerDep,
) -> ItineraryRead:
    """Get a trip's day, creating it on first request."""
    itinerary = await scheduler.get_or_create_itinerary(trip_id, day_number)
    return ItineraryRead.model_validate(itinerary)


@router.get("/itineraries/{itinerary_id}", response_model=ItineraryRead)
async def get_itinerary(itinerary_id: uuid.UUID, scheduler: SchedulerDep) -> ItineraryRead:
    """Itinerary with its items in order."""
    itinerary = await scheduler.get_itinerary(itinerary_id)
    return ItineraryRead.model_validate(itinerary)
