"""Shared pytest fixtures for all test suites."""

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable, Iterator
from datetime import date
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine

from backend.app.config import Settings
from backend.app.db.models import Base, Itinerary, Place, Trip
from backend.app.routing.executor import get_breaker_registry
from backend.app.scheduling.engine import ItineraryScheduler
from backend.app.scheduling.locks import ItineraryLocks
from tests.fakes import ScriptedResolver


@pytest.fixture(autouse=True)
def reset_breakers() -> Iterator[None]:
    """Circuit breakers are process-wide; start every test closed."""
    get_breaker_registry().clear()
    yield
    get_breaker_registry().clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(google_maps_api_key="", location_resolver="estimate")


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Async engine on a throwaway SQLite file with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest_asyncio.fixture
async def trip(session: AsyncSession) -> Trip:
    """Trip to a destination that is not on the dense list."""
    trip = Trip(
        id=uuid.uuid4(),
        title="Road trip",
        destination_city="Springfield",
        destination_country="United States",
        start_date=date(2026, 5, 1),
    )
    session.add(trip)
    await session.commit()
    return trip


@pytest_asyncio.fixture
async def itinerary(session: AsyncSession, trip: Trip) -> Itinerary:
    """Empty day 1 of ``trip``."""
    itinerary = Itinerary(
        id=uuid.uuid4(),
        trip_id=trip.id,
        day_number=1,
        date=trip.start_date,
        title="Day 1",
    )
    session.add(itinerary)
    await session.commit()
    return itinerary


@pytest.fixture
def make_place(session: AsyncSession) -> Callable[..., Awaitable[Place]]:
    """Factory for persisted places with coordinates."""

    async def _make(
        name: str, lat: float | None, lng: float | None, place_type: str = "attraction"
    ) -> Place:
        place = Place(
            id=uuid.uuid4(),
            name=name,
            latitude=lat,
            longitude=lng,
            place_type=place_type,
        )
        session.add(place)
        await session.commit()
        return place

    return _make


@pytest.fixture
def resolver() -> ScriptedResolver:
    return ScriptedResolver()


@pytest.fixture
def scheduler(
    session: AsyncSession, resolver: ScriptedResolver, settings: Settings
) -> ItineraryScheduler:
    return ItineraryScheduler(session, resolver, settings=settings, locks=ItineraryLocks())
