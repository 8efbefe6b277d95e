from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from opsview.api.stats_utils.cache import StatsCache
from opsview.api.stats_utils.stats_service import StatsService
from opsview.core.metrics import Metrics
from opsview.database import get_db


def get_metrics(request: Request) -> Metrics:
    return request.app.state.metrics


def get_stats_cache(request: Request) -> StatsCache:
    settings = request.app.state.settings
    return StatsCache(
        request.app.state.redis,
        key=settings.stats_cache_key,
        ttl_seconds=settings.stats_cache_ttl_seconds,
    )


def get_stats_service(
    db: AsyncSession = Depends(get_db),
    cache: StatsCache = Depends(get_stats_cache),
    metrics: Metrics = Depends(get_metrics),
) -> StatsService:
    return StatsService(db, cache, metrics)
