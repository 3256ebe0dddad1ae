"""Place details adapter using the Google Places Details API."""

import httpx
from pydantic import BaseModel

PLACE_DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"

DETAIL_FIELDS = [
    "place_id",
    "name",
    "formatted_address",
    "address_components",
    "geometry",
    "types",
    "rating",
]


class PlaceDetails(BaseModel):
    """Subset of place details needed to create a Place."""

    place_id: str
    name: str
    formatted_address: str
    lat: float | None = None
    lng: float | None = None
    types: list[str]
    rating: float | None = None
    city: str | None = None
    country: str | None = None


def _component(components: list[dict], kind: str) -> str | None:
    for component in components:
        if kind in component.get("types", []):
            return component.get("long_name")
    return None


async def fetch_place_details(
    google_place_id: str,
    api_key: str,
    base_url: str = PLACE_DETAILS_URL,
    language: str = "en",
    client: httpx.AsyncClient | None = None,
) -> PlaceDetails | None:
    """Fetch details for a Google place id.

    Returns:
        PlaceDetails, or None when the provider has no result

    Raises:
        httpx.HTTPError: On network or HTTP errors
    """
    params = {
        "place_id": google_place_id,
        "fields": ",".join(DETAIL_FIELDS),
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

        if data.get("status") != "OK" or not data.get("result"):
            return None

        result = data["result"]
        location = result.get("geometry", {}).get("location", {})
        components = result.get("address_components", [])

        return PlaceDetails(
            place_id=result.get("place_id") or google_place_id,
            name=result.get("name", ""),
            formatted_address=result.get("formatted_address", ""),
            lat=location.get("lat"),
            lng=location.get("lng"),
            types=result.get("types", []),
            rating=result.get("rating"),
            city=_component(components, "locality"),
            country=_component(components, "country"),
        )
    finally:
        if close_client:
            await client.aclose()
