"""Distance adapter using the Google Distance Matrix API."""

import httpx

from backend.app.models.common import DistanceQuery, DistanceResult

DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"


class NoRouteError(ValueError):
    """Provider answered but has no route for the pair (element status not OK)."""

    pass


class ProviderStatusError(RuntimeError):
    """Request rejected as a whole (REQUEST_DENIED, OVER_QUERY_LIMIT, ...)."""

    pass


def _waypoint(lat: float, lng: float) -> str:
    return f"{lat},{lng}"


async def fetch_distance(
    query: DistanceQuery,
    api_key: str,
    base_url: str = DISTANCE_MATRIX_URL,
    language: str = "en",
    client: httpx.AsyncClient | None = None,
) -> DistanceResult:
    """Fetch distance and duration for a single origin/destination pair.

    Args:
        query: Origin, destination and travel mode
        api_key: Google Maps API key
        base_url: Distance Matrix endpoint
        language: Language for the human-readable texts
        client: Optional httpx client (for testing with mocks)

    Returns:
        DistanceResult with meters/seconds and the provider's display texts

    Raises:
        httpx.HTTPError: On network or HTTP errors
        ProviderStatusError: When the provider rejects the request
        NoRouteError: When the provider has no result for the pair
    """
    params: dict[str, str] = {
        "origins": _waypoint(query.origin.lat, query.origin.lng),
        "destinations": _waypoint(query.destination.lat, query.destination.lng),
        "mode": query.mode.value,
        "units": "metric",
        "language": language,
        "key": api_key,
    }

    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=4.0)
        close_client = True

    try:
        response = await client.get(base_url, params=params)
        response.raise_for_status()
        data = response.json()

        # Response structure: {status, rows: [{elements: [{status, distance, duration}]}]}
        if data.get("status") != "OK":
            raise ProviderStatusError(f"distance matrix status {data.get('status')}")

        rows = data.get("rows") or []
        elements = rows[0].get("elements") if rows else None
        if not elements:
            raise NoRouteError("distance matrix returned no elements")

        element = elements[0]
        if element.get("status") != "OK":
            raise NoRouteError(f"element status {element.get('status')}")

        return DistanceResult(
            distance_meters=element["distance"]["value"],
            distance_text=element["distance"]["text"],
            duration_seconds=element["duration"]["value"],
            duration_text=element["duration"]["text"],
        )
    finally:
        if close_client:
            await client.aclose()
