"""Hashing utilities for cache key generation."""

import hashlib
import json
from typing import Any


def hash_value(value: Any) -> str:
    """Create a deterministic hash of a value.

    Args:
        value: Any JSON-serializable value. Values JSON cannot represent
            natively are tagged with their type name before hashing.

    Returns:
        A hexadecimal SHA-256 digest (64 chars).
    """
    # Normalize to JSON with sorted keys for determinism
    normalized = json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=_tag_value,
    )
    return hashlib.sha256(normalized.encode()).hexdigest()


def _tag_value(obj: Any) -> Any:
    """Tag a non-JSON value so that equal text of different types differs."""
    if isinstance(obj, bytes | bytearray | memoryview):
        return {"__type__": "bytes", "value": bytes(obj).hex()}
    if isinstance(obj, set | frozenset):
        return {"__type__": type(obj).__name__, "value": sorted(map(repr, obj))}
    return {"__type__": type(obj).__name__, "value": str(obj)}
