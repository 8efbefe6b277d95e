from dotenv import load_dotenv

load_dotenv()

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncEngine

from opsview.api import stats
from opsview.api import system
from opsview.api.stats_utils.cache import check_redis, create_redis_client
from opsview.api.system_utils.request_metrics import track_request_metrics
from opsview.core.config import Settings, get_settings
from opsview.core.metrics import Metrics
from opsview.database import (
    check_database,
    create_engine_from_settings,
    create_session_factory,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # an unreachable store or cache is logged, the API still starts
    await check_redis(app.state.redis)
    await check_database(app.state.engine)

    yield

    await app.state.redis.aclose()
    await app.state.engine.dispose()
    logger.info("Closed database and Redis connections")


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
    redis_client: Optional[Redis] = None,
    metrics: Optional[Metrics] = None,
) -> FastAPI:
    settings = settings or get_settings()
    engine = engine or create_engine_from_settings(settings)

    app = FastAPI(
        title="OpsView API",
        description="""
        Backend for the OpsView system monitor.
        Ingests events and serves cached dashboard statistics.
        """,
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.redis = redis_client or create_redis_client(settings)
    app.state.metrics = metrics or Metrics()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def middleware(request, call_next):
        return await track_request_metrics(request, call_next)

    app.include_router(stats.router, prefix="/api", tags=["Statistics"])
    app.include_router(system.router, tags=["System"])

    @app.get("/")
    async def root():
        return {"message": "OpsView API is running"}

    return app


logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=get_settings().port)
