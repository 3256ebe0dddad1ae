"""Itinerary scheduling engine - the mutations callers invoke.

Each mutation runs under the itinerary's lock as a single transaction:
load the ordered items, apply the change, re-flag the starting point,
annotate the affected edges, cascade times, commit. Resolver failures are
recorded on items; store failures roll everything back.
"""

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.config import Settings, get_settings
from backend.app.db import itineraries as itinerary_queries
from backend.app.db import places as place_queries
from backend.app.db.models import Itinerary, ItineraryItem, Place
from backend.app.models.itinerary import ItineraryItemCreate, ItineraryItemPatch
from backend.app.routing.resolver import LocationResolver, PlaceDetailsLookup
from backend.app.scheduling import timeline
from backend.app.scheduling.annotator import DistanceAnnotator
from backend.app.scheduling.cascade import recalculate_from
from backend.app.scheduling.errors import (
    InvalidReorder,
    ItemNotFound,
    PersistenceFailure,
    PlaceNotFound,
    SchedulingError,
)
from backend.app.scheduling.locks import ItineraryLocks, get_itinerary_locks

logger = logging.getLogger(__name__)

# Plain fields a patch may set without side effects
_PASSIVE_FIELDS = ("title", "description", "notes", "item_type", "status", "cost")


class ItineraryScheduler:
    """Insert, delete, reorder and edit items while keeping times and distances consistent."""

    def __init__(
        self,
        session: AsyncSession,
        resolver: LocationResolver,
        place_details: PlaceDetailsLookup | None = None,
        settings: Settings | None = None,
        locks: ItineraryLocks | None = None,
    ) -> None:
        self._session = session
        self._place_details = place_details
        self._settings = settings or get_settings()
        self._locks = locks or get_itinerary_locks()
        self._annotator = DistanceAnnotator(resolver, self._settings.walking_threshold_minutes)
        self._day_start = timeline.parse_clock(self._settings.day_start_time)

    # ---- reads ----

    async def get_itinerary(self, itinerary_id: uuid.UUID) -> Itinerary:
        """Itinerary with its ordered items."""
        async with self._read("get_itinerary"):
            return await itinerary_queries.load_itinerary(self._session, itinerary_id)

    async def get_item(self, item_id: uuid.UUID) -> ItineraryItem:
        """Single item."""
        async with self._read("get_item"):
            return await itinerary_queries.load_item(self._session, item_id)

    # ---- mutations ----

    async def get_or_create_itinerary(self, trip_id: uuid.UUID, day_number: int) -> Itinerary:
        """Get a trip's day, creating it (with its date) on first request."""
        async with self._transaction("get_or_create_itinerary"):
            itinerary, created = await itinerary_queries.get_or_create_itinerary(
                self._session, trip_id, day_number
            )
        if created:
            logger.info(f"[itinerary] trip_id={trip_id} day={day_number} created")
        return itinerary

    async def insert_item(self, data: ItineraryItemCreate) -> ItineraryItem:
        """Insert an item at ``data.order_index`` (clamped; omitted means append).

        The new item's incoming edge is annotated (unless it becomes the
        starting point), as is the edge into the item that now follows it.
        Times cascade from the position before the new item.
        """
        async with self._mutation(data.itinerary_id, "insert_item"):
            itinerary = await itinerary_queries.load_itinerary(self._session, data.itinerary_id)
            place = await self._resolve_place(data, itinerary)

            duration = data.duration_minutes
            if duration is None:
                duration = (
                    place_queries.estimate_duration_minutes(
                        place.place_type, self._settings.default_duration_minutes
                    )
                    if place is not None
                    else self._settings.default_duration_minutes
                )

            item = ItineraryItem(
                id=uuid.uuid4(),
                title=data.title,
                description=data.description,
                place=place,
                duration_minutes=duration,
                item_type=data.item_type,
                status=data.status,
                cost=data.cost,
                notes=data.notes,
                transport_mode=data.transport_mode.value if data.transport_mode else None,
                transport_mode_pinned=data.transport_mode is not None,
                is_starting_point=False,
            )

            items = itinerary.items
            position = len(items) if data.order_index is None else min(data.order_index, len(items))
            items.insert(position, item)
            self._flag_starting_point(itinerary)

            if position > 0:
                await self._annotator.annotate(itinerary, item)
            if position + 1 < len(items):
                await self._annotator.annotate(itinerary, items[position + 1])

            self._cascade(itinerary, max(position - 1, 0))

        logger.info(
            f"[insert] itinerary_id={data.itinerary_id} item_id={item.id} position={position}"
        )
        return item

    async def delete_item(self, item_id: uuid.UUID, recalculate: bool = False) -> None:
        """Remove an item; positions close up and position 0 is re-flagged.

        Times are left as they are unless ``recalculate`` is set, in which
        case the edge into the item that took the deleted position is
        re-annotated and the whole day cascades from position 0.
        """
        itinerary_id = await self._itinerary_id_for_item(item_id)

        async with self._mutation(itinerary_id, "delete_item"):
            itinerary = await itinerary_queries.load_itinerary(self._session, itinerary_id)
            item = self._find_item(itinerary, item_id)
            position = itinerary.items.index(item)

            itinerary.items.remove(item)
            self._flag_starting_point(itinerary)

            if recalculate:
                if 0 < position < len(itinerary.items):
                    await self._annotator.annotate(itinerary, itinerary.items[position])
                self._cascade(itinerary, 0)

        logger.info(
            f"[delete] itinerary_id={itinerary_id} item_id={item_id} recalculate={recalculate}"
        )

    async def reorder_items(
        self, itinerary_id: uuid.UUID, item_ids: list[uuid.UUID]
    ) -> Itinerary:
        """Apply a new ordering, re-annotate every edge and cascade from the top.

        Raises:
            InvalidReorder: ``item_ids`` is not a permutation of the day's items
        """
        async with self._mutation(itinerary_id, "reorder_items"):
            itinerary = await itinerary_queries.load_itinerary(self._session, itinerary_id)
            items = itinerary.items

            existing = {item.id for item in items}
            if len(item_ids) != len(existing) or set(item_ids) != existing:
                raise InvalidReorder(
                    f"Reorder for itinerary {itinerary_id} must list each of its "
                    f"{len(existing)} items exactly once"
                )

            rank = {item_id: i for i, item_id in enumerate(item_ids)}
            items.sort(key=lambda item: rank[item.id])
            items.reorder()
            self._flag_starting_point(itinerary)

            for item in list(items[1:]):
                await self._annotator.annotate(itinerary, item)

            self._cascade(itinerary, 0)

        logger.info(f"[reorder] itinerary_id={itinerary_id} items={len(item_ids)}")
        return itinerary

    async def update_item(self, item_id: uuid.UUID, patch: ItineraryItemPatch) -> ItineraryItem:
        """Apply a partial update.

        - ``transport_mode`` present: pin it (null unpins) and re-annotate the
          incoming edge, then cascade from the previous position
        - ``start_time`` or ``duration_minutes`` present: cascade from this item
        - anything else: stored as is, nothing is recomputed
        """
        fields = patch.model_fields_set
        itinerary_id = await self._itinerary_id_for_item(item_id)

        async with self._mutation(itinerary_id, "update_item"):
            itinerary = await itinerary_queries.load_itinerary(self._session, itinerary_id)
            item = self._find_item(itinerary, item_id)
            position = itinerary.items.index(item)

            for name in _PASSIVE_FIELDS:
                if name in fields:
                    setattr(item, name, getattr(patch, name))

            times_changed = False
            if "start_time" in fields:
                item.start_time = patch.start_time
                times_changed = True
            if "duration_minutes" in fields:
                item.duration_minutes = patch.duration_minutes
                times_changed = True

            cascade_from: int | None = None

            if "transport_mode" in fields:
                mode = patch.transport_mode
                item.transport_mode = mode.value if mode else None
                item.transport_mode_pinned = mode is not None
                if position == 0:
                    item.clear_transport()
                else:
                    await self._annotator.annotate(itinerary, item)
                    cascade_from = position - 1

            if times_changed:
                if item.start_time is not None:
                    item.end_time = timeline.end_time(item.start_time, item.duration_minutes)
                else:
                    item.end_time = None
                cascade_from = position if cascade_from is None else min(cascade_from, position)

            if cascade_from is not None:
                self._cascade(itinerary, cascade_from)

        logger.info(f"[update] item_id={item_id} fields={sorted(fields)}")
        return item

    async def recalculate_distances(self, itinerary_id: uuid.UUID) -> Itinerary:
        """Re-annotate every non-starting item. Times are not touched."""
        async with self._mutation(itinerary_id, "recalculate_distances"):
            itinerary = await itinerary_queries.load_itinerary(self._session, itinerary_id)
            self._flag_starting_point(itinerary)
            for item in list(itinerary.items[1:]):
                await self._annotator.annotate(itinerary, item)

        logger.info(f"[recalculate_distances] itinerary_id={itinerary_id}")
        return itinerary

    async def recalculate_from(self, itinerary_id: uuid.UUID, from_index: int = 0) -> Itinerary:
        """Cascade times from ``from_index`` (0 re-anchors the day start)."""
        async with self._mutation(itinerary_id, "recalculate_from"):
            itinerary = await itinerary_queries.load_itinerary(self._session, itinerary_id)
            self._cascade(itinerary, from_index)
        return itinerary

    # ---- helpers ----

    def _cascade(self, itinerary: Itinerary, from_index: int) -> None:
        recalculate_from(
            itinerary,
            from_index,
            day_start=self._day_start,
            default_duration_minutes=self._settings.default_duration_minutes,
        )

    @staticmethod
    def _flag_starting_point(itinerary: Itinerary) -> None:
        for position, item in enumerate(itinerary.items):
            item.is_starting_point = position == 0
            if position == 0:
                item.clear_transport()

    @staticmethod
    def _find_item(itinerary: Itinerary, item_id: uuid.UUID) -> ItineraryItem:
        for item in itinerary.items:
            if item.id == item_id:
                return item
        raise ItemNotFound(item_id)

    async def _itinerary_id_for_item(self, item_id: uuid.UUID) -> uuid.UUID:
        async with self._read("lookup_item"):
            return await itinerary_queries.itinerary_id_for_item(self._session, item_id)

    async def _resolve_place(
        self, data: ItineraryItemCreate, itinerary: Itinerary
    ) -> Place | None:
        if data.place_id is not None:
            place = await place_queries.get_place(self._session, data.place_id)
            if place is None:
                raise PlaceNotFound(data.place_id)
            return place

        if not data.google_place_id:
            return None

        place = await place_queries.get_place_by_google_id(self._session, data.google_place_id)
        if place is not None:
            return place

        details = None
        if self._place_details is not None:
            details = await self._place_details.get_details(data.google_place_id)

        place = place_queries.place_from_details(
            details, data.google_place_id, data.title, itinerary.trip_id
        )
        self._session.add(place)
        return place

    @asynccontextmanager
    async def _read(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"[{operation}] store read failed: {e}")
            raise PersistenceFailure(f"{operation} failed: {type(e).__name__}") from e

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error(f"[{operation}] rolled back: {e}")
            raise PersistenceFailure(f"{operation} failed: {type(e).__name__}") from e
        except SchedulingError:
            await self._session.rollback()
            raise

    @asynccontextmanager
    async def _mutation(self, itinerary_id: uuid.UUID, operation: str) -> AsyncIterator[None]:
        async with self._locks.for_itinerary(itinerary_id):
            async with self._transaction(operation):
                yield
