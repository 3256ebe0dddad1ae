"""Health check endpoints.

- /health: liveness only
- /healthz: database connectivity plus routing breaker state
"""

import json
from typing import Any

from fastapi import APIRouter, Response
from sqlalchemy import text

from backend.app.config import Settings, get_settings
from backend.app.db.engine import create_engine_from_settings, create_session_factory
from backend.app.routing.executor import BreakerState, get_breaker_registry

router = APIRouter()


async def check_db(settings: Settings) -> tuple[bool, str]:
    """Check database connectivity.

    Returns:
        (is_ok, status_message)
    """
    try:
        engine = create_engine_from_settings(settings)
        session_factory = create_session_factory(engine)

        with session_factory() as session:
            session.execute(text("SELECT 1"))

        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


async def check_routing(settings: Settings) -> tuple[bool, str]:
    """Report the active location resolver and any open circuit breakers.

    Open breakers degrade distance annotation only, so this never fails the check.
    """
    kind = settings.resolver_kind()
    open_lookups = sorted(
        name
        for name, breaker in get_breaker_registry().items()
        if breaker.state == BreakerState.OPEN
    )
    if open_lookups:
        return (True, f"{kind} (breaker open: {', '.join(open_lookups)})")
    return (True, kind)


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz() -> dict[str, Any] | Response:
    """Health check endpoint.

    Returns:
        200 with component status if the database is reachable
        503 otherwise
    """
    settings = get_settings()

    db_ok, db_status = await check_db(settings)
    _, routing_status = await check_routing(settings)

    response_body = {
        "status": "ok" if db_ok else "degraded",
        "components": {
            "db": db_status,
            "routing": routing_status,
        },
    }

    if not db_ok:
        return Response(
            content=json.dumps(response_body),
            status_code=503,
            media_type="application/json",
        )

    return response_body
