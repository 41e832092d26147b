"""Cache entry entity."""

import time
from dataclasses import dataclass


def now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class CacheEntry:
    """Immutable view of one stored cache row.

    Timestamps are epoch milliseconds, the unit persisted in the
    ``expires`` and ``last_access`` columns.
    """

    key: str
    value: bytes
    expires_at: int | None
    last_access: int
    compressed: bool = False
