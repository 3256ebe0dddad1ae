"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.config import Settings, get_settings
from backend.app.db.engine import get_session
from backend.app.routing.resolver import (
    LocationResolver,
    PlaceDetailsLookup,
    get_location_resolver,
    get_place_details_lookup,
)
from backend.app.scheduling.engine import ItineraryScheduler


def get_scheduler(
    session: Annotated[AsyncSession, Depends(get_session)],
    resolver: Annotated[LocationResolver, Depends(get_location_resolver)],
    place_details: Annotated[PlaceDetailsLookup, Depends(get_place_details_lookup)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ItineraryScheduler:
    """Scheduler bound to the request's session."""
    return ItineraryScheduler(session, resolver, place_details=place_details, settings=settings)


SchedulerDep = Annotated[ItineraryScheduler, Depends(get_scheduler)]
