"""
Redis-backed cache for the dashboard stats snapshot.

Cache Configuration:
- One fixed key (default "opsview:stats") holding the snapshot as JSON
- 10-second TTL set by Redis itself (SET ... EX), no local bookkeeping
- Ingestion deletes the key instead of overwriting it
"""

import logging
from typing import Optional

from pydantic import ValidationError
from redis.asyncio import Redis, from_url

from opsview.core.config import Settings
from opsview.models.stats.StatsSnapshot import StatsSnapshot

logger = logging.getLogger(__name__)

STATS_CACHE_KEY = "opsview:stats"
STATS_CACHE_TTL_SECONDS = 10


def create_redis_client(settings: Settings) -> Redis:
    return from_url(settings.redis_url, decode_responses=True)


async def check_redis(client: Redis) -> bool:
    """Pings Redis once. Failures are logged, never raised."""
    try:
        await client.ping()
    except Exception as e:
        logger.error("Failed to connect to Redis: %s", e)
        return False
    logger.info("Connected to Redis")
    return True


class StatsCache:
    def __init__(
        self,
        client: Redis,
        key: str = STATS_CACHE_KEY,
        ttl_seconds: int = STATS_CACHE_TTL_SECONDS,
    ):
        self.client = client
        self.key = key
        self.ttl_seconds = ttl_seconds

    async def get_snapshot(self) -> Optional[StatsSnapshot]:
        """
        Retrieve the cached snapshot.

        Returns:
            StatsSnapshot on a hit, None on a miss or an unreadable value
        """
        cached = await self.client.get(self.key)
        if not cached:
            return None

        try:
            return StatsSnapshot.model_validate_json(cached)
        except ValidationError:
            logger.warning("Discarding malformed stats snapshot under %s", self.key)
            return None

    async def store_snapshot(self, snapshot: StatsSnapshot) -> None:
        await self.client.set(
            self.key, snapshot.model_dump_json(by_alias=True), ex=self.ttl_seconds
        )

    async def invalidate(self) -> None:
        await self.client.delete(self.key)
