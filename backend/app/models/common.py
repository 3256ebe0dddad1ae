"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, Field


class Geo(BaseModel):
    """Geographic coordinates (WGS84)."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class TransportMode(str, Enum):
    """Transport mode between two consecutive itinerary items.

    The classifier only ever produces walking, driving or transit;
    bicycling is accepted as a user-pinned mode and by the resolvers.
    """

    walking = "walking"
    driving = "driving"
    transit = "transit"
    bicycling = "bicycling"


class DistanceStatus(str, Enum):
    """Outcome of the last distance annotation for an item."""

    ok = "ok"
    unavailable = "unavailable"
    missing_coordinates = "missing_coordinates"


class DistanceQuery(BaseModel):
    """Routing lookup payload (also the cache key)."""

    origin: Geo
    destination: Geo
    mode: TransportMode


class DistanceResult(BaseModel):
    """Distance and duration between two points for one mode."""

    distance_meters: int = Field(..., ge=0)
    distance_text: str
    duration_seconds: int = Field(..., ge=0)
    duration_text: str
