"""Tests for the time cascade over an in-memory itinerary."""

from datetime import time

import pytest

from backend.app.db.models import Itinerary, ItineraryItem
from backend.app.scheduling.cascade import recalculate_from
from backend.app.scheduling.timeline import travel_minutes


def _item(title: str, duration: int | None, travel_seconds: int | None = None) -> ItineraryItem:
    return ItineraryItem(
        title=title,
        duration_minutes=duration,
        travel_time_from_previous_seconds=travel_seconds,
    )


def _itinerary(*items: ItineraryItem) -> Itinerary:
    itinerary = Itinerary(day_number=1)
    for item in items:
        itinerary.items.append(item)
    return itinerary


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def test_scenario_anchor_and_travel_buffers() -> None:
    a, b, c = _item("A", 60), _item("B", 90, 300), _item("C", 30, 900)
    itinerary = _itinerary(a, b, c)

    recomputed = recalculate_from(itinerary, 0)

    assert recomputed == 3
    assert (a.start_time, a.end_time) == (time(9, 0), time(10, 0))
    assert (b.start_time, b.end_time) == (time(10, 5), time(11, 35))
    assert (c.start_time, c.end_time) == (time(11, 50), time(12, 20))


def test_anchor_overrides_stored_first_start() -> None:
    a = _item("A", 60)
    a.start_time = time(13, 0)

    recalculate_from(_itinerary(a), 0)

    assert a.start_time == time(9, 0)


def test_custom_day_start() -> None:
    a, b = _item("A", 30), _item("B", 30)

    recalculate_from(_itinerary(a, b), 0, day_start=time(7, 30))

    assert b.start_time == time(8, 0)


def test_cascade_from_middle_keeps_prefix() -> None:
    a, b, c = _item("A", 60), _item("B", 60, 120), _item("C", 60)
    a.start_time, b.start_time = time(9, 0), time(14, 0)

    recomputed = recalculate_from(_itinerary(a, b, c), 1)

    assert recomputed == 1
    assert a.start_time == time(9, 0)
    assert b.start_time == time(14, 0)
    assert c.start_time == time(15, 0)


def test_unset_travel_means_back_to_back() -> None:
    a, b = _item("A", 45), _item("B", 30, None)

    recalculate_from(_itinerary(a, b), 0)

    assert b.start_time == time(9, 45)


def test_missing_duration_leaves_end_unset_and_uses_default_for_next() -> None:
    a, b = _item("A", None), _item("B", None)

    recalculate_from(_itinerary(a, b), 0, default_duration_minutes=60)

    assert a.end_time is None
    assert b.start_time == time(10, 0)
    assert b.end_time is None


def test_wraps_past_midnight() -> None:
    a, b = _item("A", 14 * 60), _item("B", 120, 3600)

    recalculate_from(_itinerary(a, b), 0)

    assert a.end_time == time(23, 0)
    assert b.start_time == time(0, 0)
    assert b.end_time == time(2, 0)


def test_item_after_unscheduled_predecessor_is_skipped() -> None:
    a, b, c = _item("A", 60), _item("B", 60), _item("C", 60)
    c.start_time = time(18, 0)

    recomputed = recalculate_from(_itinerary(a, b, c), 1)

    assert recomputed == 0
    assert b.start_time is None
    assert c.start_time == time(18, 0)


def test_empty_itinerary() -> None:
    assert recalculate_from(_itinerary(), 0) == 0


@pytest.mark.parametrize("durations", [[60, 90, 30, 45], [15, 240, 600, 5, 90], [1440, 30]])
def test_every_start_follows_its_predecessor(durations: list[int]) -> None:
    items = [_item(f"I{i}", d, (i * 137) % 2000 or None) for i, d in enumerate(durations)]
    itinerary = _itinerary(*items)

    recalculate_from(itinerary, 0)

    for previous, current in zip(items, items[1:]):
        expected = (
            _minutes(previous.start_time)
            + previous.duration_minutes
            + travel_minutes(current.travel_time_from_previous_seconds)
        ) % (24 * 60)
        assert _minutes(current.start_time) == expected
