"""Prometheus metrics for routing lookups and scheduling."""

from prometheus_client import Counter, Histogram

# Routing lookup metrics
routing_latency_ms = Histogram(
    "routing_latency_ms",
    "Map provider lookup latency in milliseconds",
    ["lookup", "outcome"],
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 4000, 8000],
)

routing_errors_total = Counter(
    "routing_errors_total",
    "Total map provider lookup errors",
    ["lookup", "reason"],
)

routing_cache_hits_total = Counter(
    "routing_cache_hits_total",
    "Total map provider lookup cache hits",
    ["lookup"],
)

# Scheduling metrics
distance_annotations_total = Counter(
    "distance_annotations_total",
    "Distance annotations by outcome",
    ["outcome"],
)

cascade_items_recomputed_total = Counter(
    "cascade_items_recomputed_total",
    "Itinerary items whose start/end time was recomputed by a cascade",
)


class PrometheusLookupMetrics:
    """Prometheus-based lookup metrics implementation."""

    def record_latency(self, lookup: str, outcome: str, latency_ms: float) -> None:
        """Record lookup latency."""
        routing_latency_ms.labels(lookup=lookup, outcome=outcome).observe(latency_ms)

    def inc_error(self, lookup: str, reason: str) -> None:
        """Increment error counter."""
        routing_errors_total.labels(lookup=lookup, reason=reason).inc()

    def inc_cache_hit(self, lookup: str) -> None:
        """Increment cache hit counter."""
        routing_cache_hits_total.labels(lookup=lookup).inc()
