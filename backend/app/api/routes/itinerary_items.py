"""Itinerary item endpoints - insert, edit, delete, reorder and recalculation."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from backend.app.api.deps import SchedulerDep
from backend.app.models.itinerary import (
    ItineraryItemCreate,
    ItineraryItemPatch,
    ItineraryItemRead,
    ItineraryRead,
    ReorderRequest,
)

router = APIRouter(prefix="/itinerary-items", tags=["itinerary-items"])


@router.post("", response_model=ItineraryItemRead, status_code=status.HTTP_201_CREATED)
async def create_item(body: ItineraryItemCreate, scheduler: SchedulerDep) -> ItineraryItemRead:
    """Insert an item at ``order_index`` (append when omitted)."""
    item = await scheduler.insert_item(body)
    return ItineraryItemRead.model_validate(item)


@router.get("/itinerary/{itinerary_id}", response_model=list[ItineraryItemRead])
async def list_items(itinerary_id: uuid.UUID, scheduler: SchedulerDep) -> list[ItineraryItemRead]:
    """Items of an itinerary in order."""
    itinerary = await scheduler.get_itinerary(itinerary_id)
    return [ItineraryItemRead.model_validate(item) for item in itinerary.items]


@router.put("/reorder/{itinerary_id}", response_model=ItineraryRead)
async def reorder_items(
    itinerary_id: uuid.UUID, body: ReorderRequest, scheduler: SchedulerDep
) -> ItineraryRead:
    """Reorder all items of an itinerary.

    ``item_ids`` must list every item exactly once.
    """
    itinerary = await scheduler.reorder_items(itinerary_id, body.item_ids)
    return ItineraryRead.model_validate(itinerary)


@router.post("/recalculate-distances/{itinerary_id}", response_model=ItineraryRead)
async def recalculate_distances(itinerary_id: uuid.UUID, scheduler: SchedulerDep) -> ItineraryRead:
    """Re-annotate transport for every item after the first."""
    itinerary = await scheduler.recalculate_distances(itinerary_id)
    return ItineraryRead.model_validate(itinerary)


@router.post("/recalculate-times/{itinerary_id}", response_model=ItineraryRead)
async def recalculate_times(
    itinerary_id: uuid.UUID,
    scheduler: SchedulerDep,
    from_index: Annotated[int, Query(ge=0)] = 0,
) -> ItineraryRead:
    """Cascade start/end times from ``from_index``."""
    itinerary = await scheduler.recalculate_from(itinerary_id, from_index)
    return ItineraryRead.model_validate(itinerary)


@router.get("/{item_id}", response_model=ItineraryItemRead)
async def get_item(item_id: uuid.UUID, scheduler: SchedulerDep) -> ItineraryItemRead:
    """Single item."""
    item = await scheduler.get_item(item_id)
    return ItineraryItemRead.model_validate(item)


@router.put("/{item_id}", response_model=ItineraryItemRead)
async def update_item(
    item_id: uuid.UUID, body: ItineraryItemPatch, scheduler: SchedulerDep
) -> ItineraryItemRead:
    """Partial update; only fields present in the body are applied."""
    item = await scheduler.update_item(item_id, body)
    return ItineraryItemRead.model_validate(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: uuid.UUID,
    scheduler: SchedulerDep,
    recalculate: Annotated[bool, Query()] = False,
) -> Response:
    """Delete an item. ``recalculate=true`` also cascades times from the top."""
    await scheduler.delete_item(item_id, recalculate=recalculate)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
