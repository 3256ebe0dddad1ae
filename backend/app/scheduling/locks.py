"""Per-itinerary mutation locks."""

import asyncio
import uuid
import weakref


class ItineraryLocks:
    """One asyncio.Lock per itinerary id.

    Mutations of the same itinerary run one at a time; different
    itineraries proceed concurrently. Entries are weak: a lock nobody
    holds or waits on is dropped, so the registry only tracks itineraries
    with a mutation in flight.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[uuid.UUID, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def for_itinerary(self, itinerary_id: uuid.UUID) -> asyncio.Lock:
        """Get the lock guarding an itinerary, creating it when none is alive."""
        lock = self._locks.get(itinerary_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[itinerary_id] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)

    def clear(self) -> None:
        """Forget all locks (useful for testing)."""
        self._locks.clear()


_global_locks = ItineraryLocks()


def get_itinerary_locks() -> ItineraryLocks:
    """Get the process-wide lock registry."""
    return _global_locks
