from typing import Any, Protocol


class SourcePort(Protocol):
    """Authoritative producer of a resource value. Slow, but always right."""

    async def fetch(self, key: str) -> Any: ...
