"""Async executor for map-provider lookups with timeouts, retries, circuit breaker, and caching.

Every routing/place call goes through ``LookupExecutor.execute``:
- Hard timeout per attempt
- Bounded retries with jitter (0 by default; mutations never retry on their own)
- Per-lookup circuit breaker (shared state via registry)
- TTL cache keyed on the request payload
- Metrics and structured logging
"""

import asyncio
import hashlib
import json
import random
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from backend.app.config import Settings

T = TypeVar("T")
P = TypeVar("P", bound=BaseModel)


class RoutingLookupError(Exception):
    """Base class for lookup failures."""

    pass


class LookupTimeoutError(RoutingLookupError):
    """Lookup exceeded its hard timeout on every attempt."""

    pass


class LookupCircuitOpenError(RoutingLookupError):
    """Circuit breaker is open for this lookup."""

    pass


class LookupExecutionError(RoutingLookupError):
    """Lookup failed after all attempts."""

    pass


@dataclass(frozen=True)
class LookupContext:
    """Context for one lookup call."""

    lookup_name: str
    trace_id: str | None = None
    # Travel mode for distance lookups
    mode: str | None = None
    # What was looked up, e.g. "48.8606,2.3376->48.853,2.3499" or a place id
    subject: str | None = None


@dataclass
class LookupConfig:
    """Configuration for lookup execution."""

    hard_timeout_ms: int
    retry_count: int = 0
    retry_jitter_min_ms: int = 200
    retry_jitter_max_ms: int = 500
    breaker_failure_threshold: int = 5
    breaker_window_seconds: int = 60
    breaker_half_open_seconds: int = 30
    cache_ttl_seconds: int = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> "LookupConfig":
        """Build the routing call policy from settings."""
        return cls(
            hard_timeout_ms=settings.routing_hard_timeout_ms,
            retry_count=settings.routing_retry_count,
            retry_jitter_min_ms=settings.retry_jitter_min_ms,
            retry_jitter_max_ms=settings.retry_jitter_max_ms,
            breaker_failure_threshold=settings.circuit_breaker_failures,
            breaker_window_seconds=settings.circuit_breaker_window_sec,
            breaker_half_open_seconds=settings.circuit_breaker_half_open_sec,
            cache_ttl_seconds=settings.routing_cache_ttl_seconds,
        )


class BreakerState(str, Enum):
    """Circuit breaker state."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class CircuitBreaker:
    """Per-lookup circuit breaker.

    Tracks failures within a time window and opens after threshold.
    """

    lookup_name: str
    failure_threshold: int
    window_seconds: int
    half_open_seconds: int
    state: BreakerState = BreakerState.CLOSED
    failure_times: list[datetime] = field(default_factory=list)
    opened_at: datetime | None = None

    def record_success(self) -> None:
        """Record successful execution."""
        if self.state == BreakerState.HALF_OPEN:
            self.state = BreakerState.CLOSED
            self.failure_times.clear()
            self.opened_at = None

    def record_failure(self, now: datetime) -> None:
        """Record failed execution."""
        cutoff = now - timedelta(seconds=self.window_seconds)
        self.failure_times = [t for t in self.failure_times if t > cutoff]
        self.failure_times.append(now)

        if len(self.failure_times) >= self.failure_threshold:
            self.state = BreakerState.OPEN
            self.opened_at = now

    def check_and_update_state(self, now: datetime) -> BreakerState:
        """Check if breaker should transition states."""
        if self.state == BreakerState.OPEN:
            if self.opened_at and (now - self.opened_at).total_seconds() >= self.half_open_seconds:
                self.state = BreakerState.HALF_OPEN

        return self.state

    def is_open(self, now: datetime) -> bool:
        """Check if breaker is currently open (rejecting calls)."""
        return self.check_and_update_state(now) == BreakerState.OPEN


class BreakerRegistry:
    """Registry of per-lookup circuit breakers with shared state."""

    def __init__(self) -> None:
        self._by_lookup: dict[str, CircuitBreaker] = {}

    def get_or_create(self, lookup_name: str, config: LookupConfig) -> CircuitBreaker:
        """Get existing breaker for a lookup or create one from config."""
        if lookup_name not in self._by_lookup:
            self._by_lookup[lookup_name] = CircuitBreaker(
                lookup_name=lookup_name,
                failure_threshold=config.breaker_failure_threshold,
                window_seconds=config.breaker_window_seconds,
                half_open_seconds=config.breaker_half_open_seconds,
            )
        return self._by_lookup[lookup_name]

    def items(self) -> list[tuple[str, CircuitBreaker]]:
        """Snapshot of (lookup_name, breaker) pairs."""
        return list(self._by_lookup.items())

    def clear(self) -> None:
        """Clear all breakers (useful for testing)."""
        self._by_lookup.clear()


_global_breaker_registry = BreakerRegistry()


def get_breaker_registry() -> BreakerRegistry:
    """Get the global breaker registry instance."""
    return _global_breaker_registry


@dataclass
class CacheEntry(Generic[T]):
    """Cached lookup result with metadata."""

    value: T
    cached_at: datetime
    ttl_seconds: int

    def is_fresh(self, now: datetime) -> bool:
        """Check if cache entry is still valid."""
        return (now - self.cached_at).total_seconds() < self.ttl_seconds


class LookupCache:
    """In-memory cache for lookup results."""

    def __init__(self) -> None:
        self._cache: dict[str, CacheEntry[Any]] = {}

    def make_key(self, lookup_name: str, payload: BaseModel) -> str:
        """Generate deterministic cache key from payload."""
        data = payload.model_dump(mode="json")
        sorted_json = json.dumps(data, sort_keys=True)
        hash_digest = hashlib.sha256(sorted_json.encode()).hexdigest()
        return f"{lookup_name}:{hash_digest}"

    def get(self, key: str, now: datetime) -> Any | None:
        """Get cached value if fresh, None otherwise."""
        entry = self._cache.get(key)
        if entry and entry.is_fresh(now):
            return entry.value
        elif entry:
            del self._cache[key]
        return None

    def set(self, key: str, value: Any, ttl_seconds: int, now: datetime) -> None:
        """Store value in cache with TTL."""
        self._cache[key] = CacheEntry(value=value, cached_at=now, ttl_seconds=ttl_seconds)

    def clear(self) -> None:
        """Drop every entry."""
        self._cache.clear()


class LookupMetrics:
    """Interface for lookup metrics (no-op default)."""

    def record_latency(self, lookup: str, outcome: str, latency_ms: float) -> None:
        """Record lookup latency."""
        pass

    def inc_error(self, lookup: str, reason: str) -> None:
        """Increment error counter."""
        pass

    def inc_cache_hit(self, lookup: str) -> None:
        """Increment cache hit counter."""
        pass


class LookupLogger:
    """Interface for structured attempt logging (no-op default)."""

    def log_attempt(
        self,
        ctx: LookupContext,
        attempt: int,
        outcome: str,
        latency_ms: float,
        cache_hit: bool = False,
        error_reason: str | None = None,
    ) -> None:
        """Log one lookup attempt."""
        pass


class LookupExecutor:
    """Runs a single async lookup under the configured call policy."""

    def __init__(
        self,
        metrics: LookupMetrics | None = None,
        logger: LookupLogger | None = None,
        sleep_fn: Callable[[float], Awaitable[None]] | None = None,
        cache: LookupCache | None = None,
        breakers: BreakerRegistry | None = None,
    ) -> None:
        """Initialize executor.

        Args:
            metrics: Metrics recorder (optional, defaults to no-op)
            logger: Structured logger (optional, defaults to no-op)
            sleep_fn: Injectable sleep function (default: asyncio.sleep)
            cache: Result cache shared across calls (default: private cache)
            breakers: Breaker registry (default: global registry)
        """
        self._metrics = metrics or LookupMetrics()
        self._logger = logger or LookupLogger()
        self._sleep = sleep_fn or asyncio.sleep
        self._cache = cache or LookupCache()
        self._breakers = breakers or get_breaker_registry()

    async def execute(
        self,
        ctx: LookupContext,
        config: LookupConfig,
        fn: Callable[[P], Awaitable[T]],
        payload: P,
        passthrough: tuple[type[Exception], ...] = (),
    ) -> T:
        """Execute a lookup with timeout, breaker, retries and cache.

        Args:
            ctx: Lookup context
            config: Execution configuration
            fn: Async function performing the actual call
            payload: Lookup input payload (also the cache key)
            passthrough: Exception types re-raised as-is, without retry or breaker failure

        Returns:
            The value returned by ``fn``

        Raises:
            LookupTimeoutError: Every attempt exceeded the hard timeout
            LookupCircuitOpenError: Circuit breaker is open
            LookupExecutionError: Other failures after all attempts
        """
        start_time = time.monotonic()
        breaker = self._breakers.get_or_create(ctx.lookup_name, config)

        # Cached results bypass the breaker
        now = datetime.now()
        cache_key = ""
        if config.cache_ttl_seconds > 0:
            cache_key = self._cache.make_key(ctx.lookup_name, payload)
            cached = self._cache.get(cache_key, now)
            if cached is not None:
                elapsed_ms = (time.monotonic() - start_time) * 1000
                self._metrics.record_latency(ctx.lookup_name, "cache_hit", elapsed_ms)
                self._metrics.inc_cache_hit(ctx.lookup_name)
                self._logger.log_attempt(ctx, 0, "cache_hit", elapsed_ms, cache_hit=True)
                return cached  # type: ignore[no-any-return]

        if breaker.is_open(now):
            elapsed_ms = (time.monotonic() - start_time) * 1000
            self._metrics.record_latency(ctx.lookup_name, "breaker_open", elapsed_ms)
            self._metrics.inc_error(ctx.lookup_name, "breaker_open")
            self._logger.log_attempt(
                ctx, 0, "breaker_open", elapsed_ms, error_reason="breaker_open"
            )
            raise LookupCircuitOpenError(f"Circuit breaker open for {ctx.lookup_name}")

        last_error: Exception | None = None
        for attempt in range(config.retry_count + 1):
            attempt_start = time.monotonic()

            try:
                result = await asyncio.wait_for(
                    fn(payload), timeout=config.hard_timeout_ms / 1000
                )

                elapsed_ms = (time.monotonic() - attempt_start) * 1000
                breaker.record_success()
                self._metrics.record_latency(ctx.lookup_name, "success", elapsed_ms)
                self._logger.log_attempt(ctx, attempt + 1, "success", elapsed_ms)

                if config.cache_ttl_seconds > 0:
                    self._cache.set(cache_key, result, config.cache_ttl_seconds, now)

                return result

            except passthrough:
                elapsed_ms = (time.monotonic() - attempt_start) * 1000
                self._logger.log_attempt(ctx, attempt + 1, "no_result", elapsed_ms)
                raise

            except TimeoutError as e:
                elapsed_ms = (time.monotonic() - attempt_start) * 1000
                last_error = e
                self._metrics.inc_error(ctx.lookup_name, "timeout")
                self._logger.log_attempt(
                    ctx, attempt + 1, "timeout", elapsed_ms, error_reason="timeout"
                )
                breaker.record_failure(datetime.now())

            except Exception as e:
                elapsed_ms = (time.monotonic() - attempt_start) * 1000
                last_error = e
                self._metrics.inc_error(ctx.lookup_name, "execution_error")
                self._logger.log_attempt(
                    ctx, attempt + 1, "error", elapsed_ms, error_reason=type(e).__name__
                )
                breaker.record_failure(datetime.now())

            if attempt < config.retry_count:
                jitter_ms = random.uniform(config.retry_jitter_min_ms, config.retry_jitter_max_ms)
                await self._sleep(jitter_ms / 1000)

        if isinstance(last_error, TimeoutError):
            raise LookupTimeoutError(f"Lookup {ctx.lookup_name} timed out after all retries")
        raise LookupExecutionError(
            f"Lookup {ctx.lookup_name} failed after all retries"
        ) from last_error
