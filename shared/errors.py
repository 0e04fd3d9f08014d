class CacheError(Exception):
    """Base for failures of the optional cache tier. Never leaves the cache layer."""


class CacheConnectionError(CacheError):
    """Connect, read or write against the cache service failed at transport/protocol level."""


class CacheDeserializationError(CacheError):
    """A cached payload could not be decoded into the expected value type."""

    def __init__(self, key: str, reason: str = "") -> None:
        self.key = key
        super().__init__(f"malformed cached payload for {key!r}: {reason}" if reason else f"malformed cached payload for {key!r}")


class SourceFetchError(Exception):
    """The authoritative source failed to produce a value; the request cannot be served."""

    def __init__(self, resource_key: str, reason: str = "") -> None:
        self.resource_key = resource_key
        super().__init__(f"source fetch failed for {resource_key!r}: {reason}" if reason else f"source fetch failed for {resource_key!r}")
