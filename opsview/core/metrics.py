"""
Prometheus metrics for the OpsView backend.

Every Metrics instance owns its own CollectorRegistry, so an application
(or a test) never shares counters with another one through the process-wide
default registry.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

HTTP_DURATION_BUCKETS = (0.1, 0.3, 0.5, 0.7, 1, 3, 5, 7, 10)


class Metrics:
    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()

        # process, platform and GC defaults
        ProcessCollector(registry=self.registry)
        PlatformCollector(registry=self.registry)
        GCCollector(registry=self.registry)

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "Duration of HTTP requests in seconds",
            ["method", "route", "code"],
            buckets=HTTP_DURATION_BUCKETS,
            registry=self.registry,
        )
        self.stats_cache_hits = Counter(
            "opsview_stats_cache_hits",
            "Stats requests served from the cached snapshot",
            registry=self.registry,
        )
        self.stats_cache_misses = Counter(
            "opsview_stats_cache_misses",
            "Stats requests that recomputed the snapshot from the database",
            registry=self.registry,
        )
        self.events_ingested = Counter(
            "opsview_events_ingested",
            "Events appended to the event log",
            registry=self.registry,
        )

    def observe_request(self, method: str, route: str, code: int, seconds: float):
        self.http_request_duration.labels(
            method=method, route=route, code=str(code)
        ).observe(seconds)

    def render(self) -> bytes:
        return generate_latest(self.registry)
