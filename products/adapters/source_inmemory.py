import asyncio
import logging
from typing import List, Optional, Sequence

from app.core.config import Settings, settings as default_settings
from products.domain.entities.product import ProductOut
from shared.errors import SourceFetchError

logger = logging.getLogger(__name__)

DEFAULT_PRODUCTS: Sequence[ProductOut] = (
    ProductOut(id=1, name="Laptop"),
    ProductOut(id=2, name="Phone"),
)


class InMemoryProductSource:
    """
    Stand-in for the product database: a fixed list behind a simulated query delay.
    Any real store with an async `fetch(key)` can replace it.
    """

    def __init__(
        self,
        settings: Settings = default_settings,
        products: Optional[Sequence[ProductOut]] = None,
        delay_seconds: Optional[float] = None,
    ) -> None:
        self._products = tuple(DEFAULT_PRODUCTS if products is None else products)
        self._delay = settings.source_delay_seconds if delay_seconds is None else delay_seconds
        self._known_keys = {settings.products_cache_key}

    async def fetch(self, key: str) -> List[ProductOut]:
        if key not in self._known_keys:
            raise SourceFetchError(key, "unknown resource")
        logger.debug("Querying product source for %s (delay %.2fs)", key, self._delay)
        if self._delay > 0:
            await asyncio.sleep(self._delay)
        return [p.model_copy() for p in self._products]
