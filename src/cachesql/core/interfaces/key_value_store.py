"""Key-value store interface."""

from collections.abc import AsyncIterator
from datetime import timedelta
from typing import Protocol


class IKeyValueStore(Protocol):
    """Contract for pluggable out-of-process or in-process key-value stores.

    Stores own their TTL semantics: a value written with a TTL must
    read back as missing once the TTL has elapsed.
    """

    async def get(self, key: str) -> bytes | None:
        """Retrieve a value, or None if missing or expired."""
        ...

    async def set(self, key: str, value: bytes, ttl: timedelta | None = None) -> None:
        """Store a value, optionally expiring after ``ttl``."""
        ...

    async def delete(self, key: str) -> bool:
        """Delete a value, returning True if it existed."""
        ...

    async def clear(self) -> None:
        """Delete every value of this store's namespace."""
        ...

    def iterate(self) -> AsyncIterator[tuple[str, bytes]]:
        """Iterate over the live ``(key, value)`` pairs."""
        ...

    async def disconnect(self) -> None:
        """Release the resources held by the store."""
        ...
