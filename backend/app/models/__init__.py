"""Models package - re-exports for convenience."""

from backend.app.models.common import (
    DistanceQuery,
    DistanceResult,
    DistanceStatus,
    Geo,
    TransportMode,
)
from backend.app.models.itinerary import (
    ItineraryItemCreate,
    ItineraryItemPatch,
    ItineraryItemRead,
    ItineraryRead,
    PlaceRead,
    ReorderRequest,
)

__all__ = [
    # Common
    "Geo",
    "TransportMode",
    "DistanceStatus",
    "DistanceQuery",
    "DistanceResult",
    # Itinerary
    "PlaceRead",
    "ItineraryItemCreate",
    "ItineraryItemPatch",
    "ItineraryItemRead",
    "ItineraryRead",
    "ReorderRequest",
]
