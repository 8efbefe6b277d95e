import logging
import re

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from opsview.core.config import Settings

logger = logging.getLogger(__name__)

_POSTGRES_SCHEME = re.compile(r"^postgres(ql)?://")


class Base(DeclarativeBase):
    pass


def normalize_database_url(url: str) -> str:
    """Rewrites plain postgres URLs to the asyncpg driver form."""
    return _POSTGRES_SCHEME.sub("postgresql+asyncpg://", url)


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    url = normalize_database_url(settings.database_url)
    options = {
        "echo": settings.sql_echo,
        "pool_pre_ping": True,  # verify connections are alive before using them
    }
    if url.startswith("postgresql"):
        options.update(pool_size=10, max_overflow=20)
    return create_async_engine(url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def check_database(engine: AsyncEngine) -> bool:
    """Pings the store once. Failures are logged, never raised."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Failed to connect to the database: %s", e)
        return False
    logger.info("Connected to the database")
    return True


async def get_db(request: Request):
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
