"""Place lookups: coordinates for the annotator, resolution of external place ids."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.adapters.place_details import PlaceDetails
from backend.app.db.models import Place
from backend.app.models.common import Geo

logger = logging.getLogger(__name__)

# Provider type -> place_type, first match wins
_TYPE_PRECEDENCE: list[tuple[str, str]] = [
    ("museum", "museum"),
    ("park", "park"),
    ("restaurant", "restaurant"),
    ("lodging", "hotel"),
    ("shopping_mall", "shopping"),
]

DEFAULT_PLACE_TYPE = "attraction"

DURATION_BY_PLACE_TYPE: dict[str, int] = {
    "museum": 120,
    "park": 90,
    "restaurant": 90,
    "shopping": 180,
}


def get_coordinates(place: Place | None) -> Geo | None:
    """Coordinates of a place, or None when it has none stored."""
    if place is None or place.latitude is None or place.longitude is None:
        return None
    return Geo(lat=place.latitude, lng=place.longitude)


def derive_place_type(types: list[str]) -> str:
    """Map provider place types onto our place_type vocabulary."""
    for provider_type, place_type in _TYPE_PRECEDENCE:
        if provider_type in types:
            return place_type
    return DEFAULT_PLACE_TYPE


def estimate_duration_minutes(place_type: str | None, default: int = 60) -> int:
    """Typical visit length for a place type."""
    return DURATION_BY_PLACE_TYPE.get(place_type or "", default)


async def get_place(session: AsyncSession, place_id: uuid.UUID) -> Place | None:
    """Load a place by id."""
    return await session.get(Place, place_id)


async def get_place_by_google_id(session: AsyncSession, google_place_id: str) -> Place | None:
    """Load a place by its external Google id."""
    stmt = select(Place).where(Place.google_place_id == google_place_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


def place_from_details(
    details: PlaceDetails | None,
    google_place_id: str,
    fallback_name: str,
    trip_id: uuid.UUID | None,
) -> Place:
    """Build a Place from provider details, or a bare one when there are none."""
    if details is None:
        logger.info(f"[place] google_place_id={google_place_id} unresolved, no coordinates")
        return Place(
            trip_id=trip_id,
            google_place_id=google_place_id,
            name=fallback_name,
            place_type=DEFAULT_PLACE_TYPE,
        )

    return Place(
        trip_id=trip_id,
        google_place_id=google_place_id,
        name=details.name or fallback_name,
        place_type=derive_place_type(details.types),
        address=details.formatted_address or None,
        city=details.city,
        country=details.country,
        latitude=details.lat,
        longitude=details.lng,
        rating=details.rating,
        details={"types": details.types},
    )
