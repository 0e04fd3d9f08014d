from typing import Any, Optional, Protocol


class CachePort(Protocol):
    """
    Fail-soft view of the cache tier used by read-through handlers.
    None of these raise: an unusable cache looks like a permanent miss.
    """

    def current_connection(self) -> Optional[Any]: ...

    async def read(self, key: str) -> Optional[str]: ...

    async def write(self, key: str, value: Any, ttl_seconds: int) -> None: ...
