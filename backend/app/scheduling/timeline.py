"""Wall-clock arithmetic for itinerary times (single day, wraps at 24h)."""

import math
from datetime import time

MINUTES_PER_DAY = 24 * 60


def parse_clock(value: str) -> time:
    """Parse ``HH:MM`` or ``HH:MM:SS`` into a time."""
    return time.fromisoformat(value)


def add_minutes(start: time, minutes: int) -> time:
    """Add minutes to a wall-clock time, wrapping modulo 24h."""
    total = (start.hour * 60 + start.minute + minutes) % MINUTES_PER_DAY
    return time(total // 60, total % 60)


def travel_minutes(travel_time_seconds: int | None) -> int:
    """Whole minutes of travel buffer, rounded up. Unset travel counts as zero."""
    if not travel_time_seconds:
        return 0
    return math.ceil(travel_time_seconds / 60)


def next_start_time(
    previous_start: time,
    previous_duration_minutes: int,
    travel_time_seconds: int | None,
) -> time:
    """Start of an item: previous start + previous duration + ceil(travel / 60)."""
    return add_minutes(
        previous_start, previous_duration_minutes + travel_minutes(travel_time_seconds)
    )


def end_time(start: time, duration_minutes: int | None) -> time | None:
    """End of an item, or None when it has no duration."""
    if not duration_minutes:
        return None
    return add_minutes(start, duration_minutes)
