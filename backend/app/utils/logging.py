"""Structured logging for map provider lookups."""

import logging
from typing import Any

from backend.app.routing.executor import LookupContext

logger = logging.getLogger(__name__)

# Outcomes that are not provider failures
_QUIET_OUTCOMES = frozenset({"success", "cache_hit", "no_result"})


class StructuredLookupLogger:
    """Logs every lookup attempt with a ``structured`` record in ``extra``.

    The record carries the lookup name, the travel mode and what was looked
    up, so a slow or failing provider can be traced to a concrete leg or place.
    """

    def log_attempt(
        self,
        ctx: LookupContext,
        attempt: int,
        outcome: str,
        latency_ms: float,
        cache_hit: bool = False,
        error_reason: str | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "lookup": ctx.lookup_name,
            "mode": ctx.mode,
            "subject": ctx.subject,
            "attempt": attempt,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
            "cache_hit": cache_hit,
        }
        if ctx.trace_id:
            record["trace_id"] = ctx.trace_id
        if error_reason:
            record["error_reason"] = error_reason

        leg = f" {ctx.mode}" if ctx.mode else ""
        message = f"[routing] {ctx.lookup_name}{leg} {ctx.subject or '-'}: {outcome}"
        level = logging.INFO if outcome in _QUIET_OUTCOMES else logging.WARNING
        logger.log(level, message, extra={"structured": record})
