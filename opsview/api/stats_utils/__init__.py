"""
Stats utilities package.

Re-exports the snapshot cache and the cache-aside service.
"""

from opsview.api.stats_utils.cache import (
    StatsCache,
    check_redis,
    create_redis_client,
)
from opsview.api.stats_utils.stats_service import StatsService

__all__ = [
    "StatsCache",
    "StatsService",
    "check_redis",
    "create_redis_client",
]
