from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from products.ports.cache_port import CachePort
from products.ports.source_port import SourcePort
from shared.entities.fetch_result import FetchResult, Provenance
from shared.errors import CacheDeserializationError, SourceFetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReadThroughHandler(Generic[T]):
    """
    Serves a named resource through an optional cache:
      - cache hit            -> value from cache, source untouched
      - miss / cache down    -> value from source, then a best-effort cache write
    Cache problems never reach the caller; only SourceFetchError does.
    No request coalescing: concurrent misses each go to the source.
    """

    def __init__(self, cache: CachePort, source: SourcePort, value_type: Any, ttl_seconds: int) -> None:
        self.cache = cache
        self.source = source
        self.ttl = ttl_seconds
        self._codec: TypeAdapter = value_type if isinstance(value_type, TypeAdapter) else TypeAdapter(value_type)

    async def fetch(self, resource_key: str) -> FetchResult:
        if self.cache.current_connection() is not None:
            raw = await self.cache.read(resource_key)
            if raw:
                try:
                    value = self._decode(resource_key, raw)
                except CacheDeserializationError as e:
                    logger.warning("%s; treating as a miss", e)
                else:
                    return FetchResult(value=value, provenance=Provenance.cache)

        value = await self._from_source(resource_key)
        await self._populate(resource_key, value)
        return FetchResult(value=value, provenance=Provenance.source)

    # ---------- internals ----------

    def _decode(self, key: str, raw: str | bytes) -> T:
        try:
            return self._codec.validate_json(raw)
        except ValidationError as e:
            raise CacheDeserializationError(key, f"{e.error_count()} validation error(s)") from e

    async def _from_source(self, key: str) -> T:
        try:
            return await self.source.fetch(key)
        except SourceFetchError:
            raise
        except Exception as e:
            raise SourceFetchError(key, repr(e)) from e

    async def _populate(self, key: str, value: T) -> None:
        # The connection may have dropped while the source was being queried.
        if self.cache.current_connection() is None:
            return
        try:
            payload = self._codec.dump_json(value).decode("utf-8")
        except PydanticSerializationError as e:
            logger.warning("Not caching %s: value is not serializable (%s)", key, e)
            return
        await self.cache.write(key, payload, self.ttl)
