"""Itinerary queries.

Every loader eagerly fetches the ordered items with their places (and the
trip for its destination), so the scheduling engine never triggers a lazy
load inside an async session.
"""

import uuid
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.app.db.models import Itinerary, ItineraryItem, Trip
from backend.app.scheduling.errors import ItemNotFound, ItineraryNotFound, TripNotFound


def _with_items():
    return (
        selectinload(Itinerary.items).selectinload(ItineraryItem.place),
        selectinload(Itinerary.trip),
    )


async def load_itinerary(session: AsyncSession, itinerary_id: uuid.UUID) -> Itinerary:
    """Load an itinerary with its ordered items.

    Raises:
        ItineraryNotFound: No itinerary with this id
    """
    stmt = (
        select(Itinerary)
        .where(Itinerary.id == itinerary_id)
        .options(*_with_items())
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    itinerary = result.scalar_one_or_none()
    if itinerary is None:
        raise ItineraryNotFound(itinerary_id)
    return itinerary


async def load_item(session: AsyncSession, item_id: uuid.UUID) -> ItineraryItem:
    """Load a single item (with its place).

    Raises:
        ItemNotFound: No item with this id
    """
    stmt = (
        select(ItineraryItem)
        .where(ItineraryItem.id == item_id)
        .options(selectinload(ItineraryItem.place))
    )
    result = await session.execute(stmt)
    item = result.scalar_one_or_none()
    if item is None:
        raise ItemNotFound(item_id)
    return item


async def itinerary_id_for_item(session: AsyncSession, item_id: uuid.UUID) -> uuid.UUID:
    """Id of the itinerary owning an item, without loading the item.

    Raises:
        ItemNotFound: No item with this id
    """
    stmt = select(ItineraryItem.itinerary_id).where(ItineraryItem.id == item_id)
    itinerary_id = (await session.execute(stmt)).scalar_one_or_none()
    if itinerary_id is None:
        raise ItemNotFound(item_id)
    return itinerary_id


async def get_or_create_itinerary(
    session: AsyncSession, trip_id: uuid.UUID, day_number: int
) -> tuple[Itinerary, bool]:
    """Get a trip's day, creating it on first request.

    The day's date is ``trip.start_date + (day_number - 1)``.

    Returns:
        (itinerary, created)

    Raises:
        TripNotFound: No trip with this id
    """
    stmt = (
        select(Itinerary)
        .where(Itinerary.trip_id == trip_id, Itinerary.day_number == day_number)
        .options(*_with_items())
    )
    result = await session.execute(stmt)
    itinerary = result.scalar_one_or_none()
    if itinerary is not None:
        return itinerary, False

    trip = await session.get(Trip, trip_id)
    if trip is None:
        raise TripNotFound(trip_id)

    itinerary = Itinerary(
        trip=trip,
        day_number=day_number,
        date=trip.start_date + timedelta(days=day_number - 1),
        title=f"Day {day_number}",
        items=[],
    )
    session.add(itinerary)
    return itinerary, True
