import logging
from datetime import datetime, timezone
from typing import Any

from redis.exceptions import RedisError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from opsview.api.stats_utils.cache import StatsCache
from opsview.core.metrics import Metrics
from opsview.models.db.Event import Event
from opsview.models.stats.StatsSnapshot import SYSTEM_STATUS_HEALTHY, StatsSnapshot

logger = logging.getLogger(__name__)


class StatsService:
    """
    Cache-aside access to the dashboard statistics.

    Reads go to the cached snapshot first and fall back to counting the event
    log. Writes append to the event log and then delete the snapshot, so the
    next read recomputes. The database is always the source of truth; on reads a
    broken cache only costs a recount.
    """

    def __init__(self, db: AsyncSession, cache: StatsCache, metrics: Metrics):
        self.db = db
        self.cache = cache
        self.metrics = metrics

    async def get_stats(self) -> StatsSnapshot:
        cached = await self._read_cached_snapshot()
        if cached is not None:
            self.metrics.stats_cache_hits.inc()
            return cached

        self.metrics.stats_cache_misses.inc()
        snapshot = await self.compute_snapshot()

        try:
            await self.cache.store_snapshot(snapshot)
        except RedisError as e:
            logger.warning("Could not cache stats snapshot: %s", e)

        return snapshot

    async def compute_snapshot(self) -> StatsSnapshot:
        result = await self.db.execute(select(func.count()).select_from(Event))
        events_count = result.scalar_one()

        # no real health probe yet, the status is a constant
        return StatsSnapshot(
            events_count=events_count,
            system_status=SYSTEM_STATUS_HEALTHY,
            last_updated=datetime.now(timezone.utc),
        )

    async def ingest_event(self, event_type: str, payload: Any) -> Event:
        event = Event(type=event_type, payload=payload)
        self.db.add(event)
        await self.db.commit()
        self.metrics.events_ingested.inc()

        # a failed delete propagates; the committed row stays
        await self.cache.invalidate()

        return event

    async def _read_cached_snapshot(self):
        try:
            return await self.cache.get_snapshot()
        except RedisError as e:
            logger.warning("Stats cache unavailable, reading from database: %s", e)
            return None
