# app/core/cache.py
from __future__ import annotations

from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Tuple
import asyncio
import inspect
import logging

# IMPORTANT: use the asyncio namespace
import redis.asyncio as redis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from app.core.config import Settings, settings as default_settings
from shared.errors import CacheConnectionError

logger = logging.getLogger(__name__)

# Transport-level failures: after one of these the connection is considered gone.
_CONNECTION_LOST = (RedisConnectionError, RedisTimeoutError, asyncio.TimeoutError)


class CacheState(str, Enum):
    UNCONFIGURED = "unconfigured"
    DISABLED = "disabled"
    CONNECTING = "connecting"
    READY = "ready"
    FAILED = "failed"


class CacheAdapter:
    """
    Owns the single connection to the external cache for the life of the process.

    Nothing here raises to the caller: connect, get and set failures are logged
    and turned into "cache not usable" (None / no-op). The connection is single-shot:
    once it is lost the adapter stays FAILED until the process restarts.
    """

    def __init__(
        self,
        settings: Settings = default_settings,
        client_factory: Optional[Callable[..., Any]] = None,
    ) -> None:
        self._settings = settings
        self._client_factory = client_factory or redis.Redis
        self._endpoint: Tuple[str, int] = (settings.cache_host, settings.cache_port)
        self._enabled: bool = settings.cache_enabled
        self._ready: bool = False
        self._state = CacheState.UNCONFIGURED
        self._client: Optional[Any] = None

    @property
    def endpoint(self) -> Tuple[str, int]:
        return self._endpoint

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def state(self) -> CacheState:
        return self._state

    # ---------- Lifecycle ----------

    async def initialize(self) -> None:
        if self._state is not CacheState.UNCONFIGURED:
            return
        if not self._enabled:
            self._state = CacheState.DISABLED
            logger.info("Cache disabled via configuration")
            return

        host, port = self._endpoint
        self._state = CacheState.CONNECTING
        client = None
        try:
            # No retry/backoff loop: one attempt, bounded by the connect timeout.
            client = self._client_factory(
                host=host,
                port=port,
                db=self._settings.cache_db,
                decode_responses=True,
                socket_connect_timeout=self._settings.cache_connect_timeout_seconds,
                socket_timeout=self._settings.cache_op_timeout_seconds,
                retry_on_timeout=False,
                retry=Retry(NoBackoff(), 0),
            )
            await asyncio.wait_for(client.ping(), timeout=self._settings.cache_connect_timeout_seconds)
        except Exception as e:
            self._state = CacheState.FAILED
            self._ready = False
            logger.warning("Cache unavailable at startup (%s:%s): %r. Serving without cache.", host, port, e)
            if client is not None:
                await _close_quietly(client)
            return

        self._client = client
        self._ready = True
        self._state = CacheState.READY
        logger.info("Cache ready at %s:%s", host, port)

    async def close(self) -> None:
        client, self._client = self._client, None
        self._ready = False
        if self._state is CacheState.READY:
            self._state = CacheState.FAILED
        if client is not None:
            await _close_quietly(client)

    def current_connection(self) -> Optional[Any]:
        """Usable client handle, or None when caching must be skipped."""
        if not (self._enabled and self._ready):
            return None
        return self._client

    # ---------- Operations ----------

    async def read(self, key: str) -> Optional[str]:
        client = self.current_connection()
        if client is None:
            return None
        try:
            value = await self._run("get", key, client.get, key)
        except CacheConnectionError as e:
            logger.warning("Cache read failed, skipping cache: %s", e)
            return None
        logger.debug("Cache %s: %s", "HIT" if value is not None else "MISS", key)
        return value

    async def write(self, key: str, value: Any, ttl_seconds: int) -> None:
        client = self.current_connection()
        if client is None:
            return
        try:
            await self._run("set", key, client.set, key, value, ex=ttl_seconds)
        except CacheConnectionError as e:
            logger.warning("Cache write failed: %s", e)
            return
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl_seconds)

    async def _run(self, op: str, key: str, fn: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
        try:
            return await asyncio.wait_for(fn(*args, **kwargs), timeout=self._settings.cache_op_timeout_seconds)
        except _CONNECTION_LOST as e:
            self._mark_failed(e)
            raise CacheConnectionError(f"{op} {key!r}: {e!r}") from e
        except RedisError as e:
            raise CacheConnectionError(f"{op} {key!r}: {e!r}") from e
        except Exception as e:
            raise CacheConnectionError(f"{op} {key!r}: unexpected {e!r}") from e

    def _mark_failed(self, cause: BaseException) -> None:
        if self._state is CacheState.READY:
            logger.warning("Cache connection lost (%r); caching disabled until restart", cause)
        self._ready = False
        self._state = CacheState.FAILED


async def _close_quietly(client: Any) -> None:
    # redis-py v5 has aclose(); v4 uses close()
    close = getattr(client, "aclose", None) or getattr(client, "close", None)
    if not callable(close):
        return
    try:
        result = close()
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        logger.debug("Ignoring error while closing cache client: %r", e)
