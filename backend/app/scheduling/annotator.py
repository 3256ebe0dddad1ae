"""Distance annotation: transport from the previous item, best effort."""

import logging

from backend.app.db.models import Itinerary, ItineraryItem
from backend.app.db.places import get_coordinates
from backend.app.models.common import DistanceResult, DistanceStatus, TransportMode
from backend.app.routing.resolver import LocationResolver
from backend.app.scheduling.classifier import WALKING_THRESHOLD_MINUTES, classify_transport_mode
from backend.app.scheduling.density import is_dense_destination
from backend.app.scheduling.errors import DistanceUnavailable
from backend.app.utils.metrics import distance_annotations_total

logger = logging.getLogger(__name__)


class DistanceAnnotator:
    """Fills an item's distance/travel-time/mode from its predecessor.

    Never raises on resolver failures: the outcome is recorded on the item
    (``distance_status``/``distance_error``) and the mutation carries on.
    """

    def __init__(
        self,
        resolver: LocationResolver,
        walking_threshold_minutes: int = WALKING_THRESHOLD_MINUTES,
    ) -> None:
        self._resolver = resolver
        self._walking_threshold = walking_threshold_minutes

    async def annotate(self, itinerary: Itinerary, item: ItineraryItem) -> DistanceStatus | None:
        """Annotate one item in place.

        Args:
            itinerary: Loaded itinerary (items in order, trip available)
            item: Member of ``itinerary.items``

        Returns:
            The recorded status, or None for the starting item (nothing to do)
        """
        position = itinerary.items.index(item)
        if position == 0:
            return None

        previous = itinerary.items[position - 1]
        origin = get_coordinates(previous.place)
        destination = get_coordinates(item.place)

        if origin is None or destination is None:
            logger.info(f"[annotate] item_id={item.id} skipped: missing coordinates")
            item.distance_status = DistanceStatus.missing_coordinates.value
            item.distance_error = None
            distance_annotations_total.labels(outcome="missing_coordinates").inc()
            return DistanceStatus.missing_coordinates

        try:
            if item.transport_mode_pinned and item.transport_mode:
                mode = TransportMode(item.transport_mode)
                result = await self._resolver.get_distance(origin, destination, mode)
            else:
                driving = await self._resolver.get_distance(
                    origin, destination, TransportMode.driving
                )
                mode = classify_transport_mode(
                    driving.duration_seconds,
                    self._is_dense(itinerary),
                    self._walking_threshold,
                )
                if mode == TransportMode.driving:
                    result = driving
                else:
                    result = await self._resolver.get_distance(origin, destination, mode)
        except DistanceUnavailable as e:
            logger.warning(f"[annotate] item_id={item.id} distance unavailable: {e}")
            item.distance_status = DistanceStatus.unavailable.value
            item.distance_error = str(e)[:500]
            distance_annotations_total.labels(outcome="unavailable").inc()
            return DistanceStatus.unavailable

        self._apply(item, mode, result)
        distance_annotations_total.labels(outcome="ok").inc()
        logger.info(
            f"[annotate] item_id={item.id} mode={mode.value} "
            f"meters={result.distance_meters} seconds={result.duration_seconds}"
        )
        return DistanceStatus.ok

    @staticmethod
    def _is_dense(itinerary: Itinerary) -> bool:
        trip = itinerary.trip
        return is_dense_destination(trip.destination_city, trip.destination_country)

    @staticmethod
    def _apply(item: ItineraryItem, mode: TransportMode, result: DistanceResult) -> None:
        item.distance_from_previous_meters = result.distance_meters
        item.distance_from_previous_text = result.distance_text
        item.travel_time_from_previous_seconds = result.duration_seconds
        item.travel_time_from_previous_text = result.duration_text
        item.transport_mode = mode.value
        item.distance_status = DistanceStatus.ok.value
        item.distance_error = None
