"""Time cascade: a left-to-right fold over the ordered items of a day."""

import logging
from datetime import time

from backend.app.db.models import Itinerary
from backend.app.scheduling import timeline
from backend.app.utils.metrics import cascade_items_recomputed_total

logger = logging.getLogger(__name__)

DAY_START = time(9, 0)


def recalculate_from(
    itinerary: Itinerary,
    from_index: int,
    day_start: time = DAY_START,
    default_duration_minutes: int = 60,
) -> int:
    """Recompute start/end times of every item after ``from_index``.

    At ``from_index == 0`` the first item is anchored at ``day_start``
    whatever its stored start was. Each later item starts at
    previous start + previous duration + ceil(travel / 60), reading the
    values just computed for its predecessor. Items whose predecessor has
    no start time keep their stored values.

    Returns:
        Number of items whose times were recomputed
    """
    items = itinerary.items
    if not items:
        return 0

    from_index = max(from_index, 0)
    recomputed = 0

    if from_index == 0:
        first = items[0]
        first.start_time = day_start
        first.end_time = timeline.end_time(day_start, first.duration_minutes)
        recomputed += 1

    for i in range(from_index + 1, len(items)):
        previous, current = items[i - 1], items[i]
        if previous.start_time is None:
            logger.warning(
                f"[cascade] itinerary_id={itinerary.id} position={i} skipped: "
                "previous item has no start time"
            )
            continue

        start = timeline.next_start_time(
            previous.start_time,
            previous.duration_minutes or default_duration_minutes,
            current.travel_time_from_previous_seconds,
        )
        current.start_time = start
        current.end_time = timeline.end_time(start, current.duration_minutes)
        recomputed += 1

    cascade_items_recomputed_total.inc(recomputed)
    logger.info(
        f"[cascade] itinerary_id={itinerary.id} from_index={from_index} recomputed={recomputed}"
    )
    return recomputed
