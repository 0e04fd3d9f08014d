# conftest.py
import asyncio
from typing import Any, AsyncGenerator, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.cache import CacheAdapter
from app.core.config import Settings
from app.main import app
from products.adapters.source_inmemory import InMemoryProductSource
from shared import wiring


# ---- Fakes ------------------------------------------------------------------

class FakeRedis:
    """
    Just enough of redis.asyncio.Redis for the cache adapter: PING, GET, SET EX.
    TTLs run on a manual clock (`now`) so tests can expire entries.
    Set fail_* to an exception instance to make that command raise it.
    """

    def __init__(self) -> None:
        self.store: Dict[str, Tuple[Any, Optional[float]]] = {}
        self.calls: List[tuple] = []
        self.factory_kwargs: List[dict] = []
        self.now = 0.0
        self.ping_delay = 0.0
        self.op_delay = 0.0
        self.fail_ping: Optional[BaseException] = None
        self.fail_get: Optional[BaseException] = None
        self.fail_set: Optional[BaseException] = None
        self.closed = False

    # used as the adapter's client_factory
    def __call__(self, **kwargs):
        self.factory_kwargs.append(kwargs)
        return self

    async def ping(self):
        self.calls.append(("ping",))
        if self.ping_delay:
            await asyncio.sleep(self.ping_delay)
        if self.fail_ping is not None:
            raise self.fail_ping
        return True

    async def get(self, key: str):
        self.calls.append(("get", key))
        if self.op_delay:
            await asyncio.sleep(self.op_delay)
        if self.fail_get is not None:
            raise self.fail_get
        item = self.store.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at is not None and self.now >= expires_at:
            del self.store[key]
            return None
        return value

    async def set(self, key: str, value: Any, ex: Optional[int] = None):
        self.calls.append(("set", key, value, ex))
        if self.op_delay:
            await asyncio.sleep(self.op_delay)
        if self.fail_set is not None:
            raise self.fail_set
        self.store[key] = (value, self.now + ex if ex else None)
        return True

    async def aclose(self):
        self.closed = True

    # handy helpers used by tests
    def ttl_of(self, key: str) -> Optional[float]:
        _, expires_at = self.store[key]
        return None if expires_at is None else expires_at - self.now

    def commands(self, name: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == name]


class CountingSource(InMemoryProductSource):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.calls: List[str] = []

    async def fetch(self, key: str):
        self.calls.append(key)
        return await super().fetch(key)


def make_settings(**overrides) -> Settings:
    values = dict(
        cache_enabled=True,
        cache_host="cache.test",
        cache_port=6380,
        source_delay_seconds=0,
        cache_connect_timeout_seconds=0.2,
        cache_op_timeout_seconds=0.2,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


# ---- Fixtures ---------------------------------------------------------------

@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest_asyncio.fixture
async def ready_cache(settings: Settings, fake_redis: FakeRedis) -> CacheAdapter:
    cache = CacheAdapter(settings, client_factory=fake_redis)
    await cache.initialize()
    assert cache.ready
    return cache


@pytest.fixture
def counting_source(settings: Settings) -> CountingSource:
    return CountingSource(settings)


@pytest_asyncio.fixture
async def app_cache(settings: Settings, fake_redis: FakeRedis) -> CacheAdapter:
    """Adapter installed on app.state the way the lifespan does; tests may tweak it first."""
    cache = CacheAdapter(settings, client_factory=fake_redis)
    app.state.cache = cache
    return cache


@pytest_asyncio.fixture
async def client(settings: Settings, app_cache: CacheAdapter, counting_source: CountingSource) -> AsyncGenerator[AsyncClient, None]:
    # ASGITransport skips the lifespan, so tests decide when the cache is initialized.
    app.dependency_overrides[wiring.get_settings] = lambda: settings
    app.dependency_overrides[wiring.get_product_source] = lambda: counting_source
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as c:
            yield c
    finally:
        app.dependency_overrides.pop(wiring.get_settings, None)
        app.dependency_overrides.pop(wiring.get_product_source, None)
        if hasattr(app.state, "cache"):
            del app.state.cache
