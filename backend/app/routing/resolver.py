"""Location resolver contract and the provider-backed implementations."""

import logging
from functools import lru_cache
from typing import Protocol

from pydantic import BaseModel

from backend.app.adapters.distance_matrix import NoRouteError, fetch_distance
from backend.app.adapters.estimates import estimate_distance
from backend.app.adapters.place_details import PlaceDetails, fetch_place_details
from backend.app.config import Settings, get_settings
from backend.app.models.common import DistanceQuery, DistanceResult, Geo, TransportMode
from backend.app.routing.executor import (
    LookupCache,
    LookupConfig,
    LookupContext,
    LookupExecutor,
    RoutingLookupError,
)
from backend.app.scheduling.errors import DistanceUnavailable
from backend.app.utils.logging import StructuredLookupLogger
from backend.app.utils.metrics import PrometheusLookupMetrics

logger = logging.getLogger(__name__)


class LocationResolver(Protocol):
    """Distance/duration between two coordinates for a transport mode."""

    async def get_distance(
        self, origin: Geo, destination: Geo, mode: TransportMode
    ) -> DistanceResult:
        """Resolve distance and duration.

        Raises:
            DistanceUnavailable: No result (provider failure, no route, open breaker)
        """
        ...


class PlaceDetailsLookup(Protocol):
    """Details for an external place id, used when an item references an unknown place."""

    async def get_details(self, google_place_id: str) -> PlaceDetails | None:
        """Return details, or None when the place cannot be resolved."""
        ...


class ExecutorLocationResolver:
    """Runs a distance fetch through the lookup executor."""

    lookup_name: str

    def __init__(self, settings: Settings, executor: LookupExecutor | None = None) -> None:
        self._settings = settings
        self._config = LookupConfig.from_settings(settings)
        self._executor = executor or LookupExecutor()

    async def _fetch(self, query: DistanceQuery) -> DistanceResult:
        raise NotImplementedError

    async def get_distance(
        self, origin: Geo, destination: Geo, mode: TransportMode
    ) -> DistanceResult:
        """Resolve distance and duration, mapping every failure to DistanceUnavailable."""
        query = DistanceQuery(origin=origin, destination=destination, mode=mode)
        try:
            return await self._executor.execute(
                LookupContext(
                    lookup_name=self.lookup_name,
                    mode=mode.value,
                    subject=(
                        f"{origin.lat},{origin.lng}->{destination.lat},{destination.lng}"
                    ),
                ),
                self._config,
                self._fetch,
                query,
                passthrough=(NoRouteError,),
            )
        except NoRouteError as e:
            raise DistanceUnavailable(f"no route ({mode.value}): {e}") from e
        except RoutingLookupError as e:
            reason = e.__cause__ or e
            raise DistanceUnavailable(f"{type(reason).__name__}: {reason}") from e


class GoogleDistanceMatrixResolver(ExecutorLocationResolver):
    """Distances from the Google Distance Matrix API."""

    lookup_name = "distance_matrix.google"

    async def _fetch(self, query: DistanceQuery) -> DistanceResult:
        return await fetch_distance(
            query,
            api_key=self._settings.google_maps_api_key,
            base_url=self._settings.distance_matrix_url,
            language=self._settings.maps_language,
        )


class EstimatedDistanceResolver(ExecutorLocationResolver):
    """Offline estimates for local development and keyless deployments."""

    lookup_name = "distance.estimate"

    async def _fetch(self, query: DistanceQuery) -> DistanceResult:
        return await estimate_distance(query)


class PlaceIdQuery(BaseModel):
    """Lookup payload for place details."""

    place_id: str


class GooglePlaceDetailsLookup:
    """Place details through the lookup executor. Failures resolve to None."""

    lookup_name = "place_details.google"

    def __init__(self, settings: Settings, executor: LookupExecutor | None = None) -> None:
        self._settings = settings
        self._config = LookupConfig.from_settings(settings)
        self._executor = executor or LookupExecutor()

    async def _fetch(self, query: PlaceIdQuery) -> PlaceDetails | None:
        return await fetch_place_details(
            query.place_id,
            api_key=self._settings.google_maps_api_key,
            base_url=self._settings.place_details_url,
            language=self._settings.maps_language,
        )

    async def get_details(self, google_place_id: str) -> PlaceDetails | None:
        """Fetch place details, or None on any provider failure."""
        if not self._settings.google_maps_api_key:
            return None

        try:
            return await self._executor.execute(
                LookupContext(lookup_name=self.lookup_name, subject=google_place_id),
                self._config,
                self._fetch,
                PlaceIdQuery(place_id=google_place_id),
            )
        except RoutingLookupError as e:
            logger.warning(f"[place_details] google_place_id={google_place_id} failed: {e}")
            return None


def build_location_resolver(
    settings: Settings, executor: LookupExecutor | None = None
) -> LocationResolver:
    """Build the resolver selected by settings (``google`` or ``estimate``)."""
    kind = settings.resolver_kind()

    if kind == "google":
        return GoogleDistanceMatrixResolver(settings, executor)

    if kind == "estimate":
        return EstimatedDistanceResolver(settings, executor)

    raise ValueError(f"Unknown location_resolver: {kind}")


@lru_cache
def _shared_executor() -> LookupExecutor:
    return LookupExecutor(
        metrics=PrometheusLookupMetrics(),
        logger=StructuredLookupLogger(),
        cache=LookupCache(),
    )


def get_location_resolver() -> LocationResolver:
    """FastAPI dependency for the configured location resolver."""
    return build_location_resolver(get_settings(), _shared_executor())


def get_place_details_lookup() -> PlaceDetailsLookup:
    """FastAPI dependency for place details."""
    return GooglePlaceDetailsLookup(get_settings(), _shared_executor())
