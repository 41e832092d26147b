"""Cache configuration entities."""

from dataclasses import dataclass
from datetime import timedelta

SUPPORTED_DIALECTS = ("sqlite", "postgresql", "postgres", "mysql", "mariadb")


@dataclass
class CacheConfig:
    """Cache service configuration.

    Attributes:
        enabled: When False the service bypasses the cache and always
            executes the query.
        default_ttl: TTL handed to the backend on every write. None lets
            the backend apply its own configured TTL.
        key_prefix: Prefix of every derived cache key.
    """

    enabled: bool = True
    default_ttl: timedelta | None = None
    key_prefix: str = "cachesql"

    def __post_init__(self) -> None:
        """Validate the TTL."""
        if self.default_ttl is not None and self.default_ttl <= timedelta(0):
            raise ValueError("default_ttl must be a positive duration")


@dataclass
class SQLCacheConfig:
    """Relational cache backend configuration.

    Attributes:
        max: Maximum number of rows kept after a sweep. 0 disables LRU
            eviction.
        ttl: Time-to-live of every written row.
        dialect: One of ``sqlite``, ``postgresql`` (or ``postgres``),
            ``mysql`` or ``mariadb``.
            None uses the dialect of the engine.
        debounce_time: Window during which repeated post-write sweeps are
            suppressed. Zero disables the post-write sweep.
        sweep_interval: Period of the background sweep.
        compression: Compress values at or above ``compression_threshold``.
        compression_threshold: Size in bytes from which values get compressed.
        table_name: Name of the cache table.
    """

    max: int = 50
    ttl: timedelta = timedelta(milliseconds=60000)
    dialect: str | None = None
    debounce_time: timedelta = timedelta(milliseconds=500)
    sweep_interval: timedelta = timedelta(milliseconds=5000)
    compression: bool = False
    compression_threshold: int = 512
    table_name: str = "cache"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max < 0:
            raise ValueError("max must be zero or a positive integer")
        if self.ttl <= timedelta(0):
            raise ValueError("ttl must be a positive duration")
        if self.debounce_time < timedelta(0):
            raise ValueError("debounce_time must not be negative")
        if self.sweep_interval <= timedelta(0):
            raise ValueError("sweep_interval must be a positive duration")
        if self.compression_threshold < 0:
            raise ValueError("compression_threshold must not be negative")
        if self.dialect is not None and self.dialect not in SUPPORTED_DIALECTS:
            raise ValueError(
                f"Unsupported dialect {self.dialect!r}, "
                f"expected one of {', '.join(SUPPORTED_DIALECTS)}"
            )
