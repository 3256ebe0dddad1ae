"""FastAPI application - itinerary scheduling service."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.itineraries import router as itineraries_router
from backend.app.api.routes.itinerary_items import router as itinerary_items_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.scheduling.errors import (
    InvalidReorder,
    ItemNotFound,
    ItineraryNotFound,
    PersistenceFailure,
    PlaceNotFound,
    SchedulingError,
    TripNotFound,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Itinerary Scheduler API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(itineraries_router)
app.include_router(itinerary_items_router)

_STATUS_BY_ERROR: list[tuple[type[SchedulingError], int]] = [
    (ItemNotFound, status.HTTP_404_NOT_FOUND),
    (ItineraryNotFound, status.HTTP_404_NOT_FOUND),
    (TripNotFound, status.HTTP_404_NOT_FOUND),
    (PlaceNotFound, status.HTTP_404_NOT_FOUND),
    (InvalidReorder, status.HTTP_400_BAD_REQUEST),
    (PersistenceFailure, status.HTTP_503_SERVICE_UNAVAILABLE),
]


@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError) -> JSONResponse:
    """Map scheduling failures onto HTTP statuses."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status_code = code
            break

    if status_code >= 500:
        logger.error(f"[api] {request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Itinerary Scheduler API", "version": "0.1.0"}
