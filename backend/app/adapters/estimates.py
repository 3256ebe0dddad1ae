"""Offline distance estimates (great-circle distance with per-mode speeds)."""

import math

from backend.app.models.common import DistanceQuery, DistanceResult, Geo, TransportMode

EARTH_RADIUS_M = 6_371_000
ROAD_FACTOR = 1.3

# Average door-to-door speeds (km/h)
SPEED_KMH: dict[TransportMode, float] = {
    TransportMode.walking: 5.0,
    TransportMode.bicycling: 15.0,
    TransportMode.transit: 20.0,
    TransportMode.driving: 30.0,
}


def haversine_meters(origin: Geo, destination: Geo) -> float:
    """Great-circle distance between two points in meters."""
    lat1, lat2 = math.radians(origin.lat), math.radians(destination.lat)
    dlat = lat2 - lat1
    dlng = math.radians(destination.lng - origin.lng)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))


def format_distance(meters: int) -> str:
    """Human-readable distance, e.g. ``850 m`` or ``2.5 km``."""
    if meters >= 1000:
        return f"{meters / 1000:.1f} km"
    return f"{meters} m"


def format_duration(seconds: int) -> str:
    """Human-readable duration, e.g. ``12 min`` or ``1 h 5 min``."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60

    if hours > 0:
        return f"{hours} h {minutes} min"
    return f"{minutes} min"


async def estimate_distance(query: DistanceQuery) -> DistanceResult:
    """Estimate road distance and travel time without calling a provider."""
    meters = round(haversine_meters(query.origin, query.destination) * ROAD_FACTOR)
    meters_per_second = SPEED_KMH[query.mode] * 1000 / 3600
    seconds = round(meters / meters_per_second)

    return DistanceResult(
        distance_meters=meters,
        distance_text=format_distance(meters),
        duration_seconds=seconds,
        duration_text=format_duration(seconds),
    )
