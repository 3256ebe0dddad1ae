"""Exception types raised by the scheduling engine."""

import uuid


class SchedulingError(Exception):
    """Base class for scheduling failures."""

    pass


class DistanceUnavailable(SchedulingError):
    """Location resolver could not produce a distance (recovered locally)."""

    pass


class ItemNotFound(SchedulingError):
    """Referenced itinerary item does not exist."""

    def __init__(self, item_id: uuid.UUID) -> None:
        super().__init__(f"Itinerary item {item_id} not found")
        self.item_id = item_id


class ItineraryNotFound(SchedulingError):
    """Referenced itinerary does not exist."""

    def __init__(self, itinerary_id: uuid.UUID) -> None:
        super().__init__(f"Itinerary {itinerary_id} not found")
        self.itinerary_id = itinerary_id


class TripNotFound(SchedulingError):
    """Referenced trip does not exist."""

    def __init__(self, trip_id: uuid.UUID) -> None:
        super().__init__(f"Trip {trip_id} not found")
        self.trip_id = trip_id


class InvalidReorder(SchedulingError):
    """Reorder list is not a permutation of the itinerary's items."""

    pass


class PersistenceFailure(SchedulingError):
    """Backing store rejected a read or write; the mutation was rolled back."""

    pass


class PlaceNotFound(SchedulingError):
    """Insert references a place id that does not exist."""

    def __init__(self, place_id: uuid.UUID) -> None:
        super().__init__(f"Place {place_id} not found")
        self.place_id = place_id
