"""Transport mode classifier."""

from backend.app.models.common import TransportMode

WALKING_THRESHOLD_MINUTES = 10


def classify_transport_mode(
    travel_duration_seconds: float,
    is_dense_destination: bool,
    walking_threshold_minutes: int = WALKING_THRESHOLD_MINUTES,
) -> TransportMode:
    """Pick a transport mode from a driving-time estimate.

    First match wins:
    1. under the walking threshold (10 min by default) -> walking
    2. dense destination -> transit
    3. otherwise -> driving

    The threshold itself is not walking: 600s classifies as driving/transit.
    """
    if travel_duration_seconds / 60 < walking_threshold_minutes:
        return TransportMode.walking
    if is_dense_destination:
        return TransportMode.transit
    return TransportMode.driving
