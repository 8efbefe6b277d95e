import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from main import create_app
from opsview.api.stats_utils.cache import STATS_CACHE_KEY, StatsCache
from opsview.core.config import Settings
from opsview.core.metrics import Metrics
from opsview.database import Base
from opsview.models.db.Event import Event



class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis with a failure switch."""

    def __init__(self):
        self.store = {}
        self.expirations = {}
        self.calls = []
        self.fail = False
        self.closed = False

    def _record(self, op):
        self.calls.append(op)
        if self.fail:
            raise RedisConnectionError("Error connecting to redis")

    async def ping(self):
        self._record("ping")
        return True

    async def get(self, key):
        self._record("get")
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self._record("set")
        self.store[key] = value
        self.expirations[key] = ex
        return True

    async def delete(self, *keys):
        self._record("delete")
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.expirations.pop(key, None)
        return removed

    def expire(self, key):
        """Simulates the TTL running out."""
        self.store.pop(key, None)
        self.expirations.pop(key, None)

    async def aclose(self):
        self.closed = True


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "opsview.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return path


@pytest.fixture
def seed_events(db_path):
    def _seed(count):
        sync_engine = create_engine(f"sqlite:///{db_path}")
        with Session(sync_engine) as session:
            session.add_all(
                Event(type="seed", payload={"n": i}) for i in range(count)
            )
            session.commit()
        sync_engine.dispose()

    return _seed


@pytest.fixture
def engine(db_path):
    return create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)


@pytest.fixture
def broken_engine(tmp_path):
    return create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path}/missing/dir/opsview.db", poolclass=NullPool
    )


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def metrics():
    return Metrics()


@pytest.fixture
def stats_cache(fake_redis):
    return StatsCache(fake_redis, key=STATS_CACHE_KEY, ttl_seconds=10)


@pytest.fixture
def make_client(fake_redis, metrics):
    def _make(engine):
        app = create_app(
            settings=Settings(),
            engine=engine,
            redis_client=fake_redis,
            metrics=metrics,
        )
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client, engine):
    with make_client(engine) as client:
        yield client


@pytest.fixture
def broken_client(make_client, broken_engine):
    with make_client(broken_engine) as client:
        yield client
