"""JSON serializer implementation."""

import base64
import json
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any
from uuid import UUID


class SerializationError(Exception):
    """Raised when a query result cannot be encoded or decoded."""


class JsonSerializer:
    """JSON serializer for cached query results.

    Handles serialization of rows (lists of dicts) to JSON bytes
    and back. Column types JSON lacks (datetime, date, time, Decimal,
    bytes, UUID) are tagged so they decode to the original type.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the JSON serializer.

        Args:
            encoding: Character encoding to use.
        """
        self._encoding = encoding

    def serialize(self, value: Any) -> bytes:
        """Encode rows as compact JSON.

        Raises:
            SerializationError: If a column value has no JSON encoding.
        """
        try:
            text = json.dumps(value, separators=(",", ":"), default=self._encode_value)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Cannot encode query result: {e}") from e
        return text.encode(self._encoding)

    def deserialize(self, data: bytes) -> Any:
        """Decode rows written by :meth:`serialize`.

        Raises:
            SerializationError: If ``data`` is not a valid encoding.
        """
        try:
            return json.loads(data.decode(self._encoding), object_hook=self._decode_value)
        except (UnicodeDecodeError, ValueError, ArithmeticError) as e:
            raise SerializationError(f"Cannot decode cached result: {e}") from e

    def _encode_value(self, obj: Any) -> Any:
        """Tag a column value JSON cannot represent."""
        if isinstance(obj, datetime):
            return {"__datetime__": obj.isoformat()}
        if isinstance(obj, date):
            return {"__date__": obj.isoformat()}
        if isinstance(obj, time):
            return {"__time__": obj.isoformat()}
        if isinstance(obj, Decimal):
            return {"__decimal__": str(obj)}
        if isinstance(obj, UUID):
            return {"__uuid__": str(obj)}
        if isinstance(obj, bytes | bytearray | memoryview):
            return {"__bytes__": base64.b64encode(bytes(obj)).decode("ascii")}
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

    @staticmethod
    def _decode_value(obj: dict[str, Any]) -> Any:
        """Restore a value tagged by :meth:`_encode_value`."""
        if len(obj) != 1:
            return obj
        tag, raw = next(iter(obj.items()))
        if tag == "__datetime__":
            return datetime.fromisoformat(raw)
        if tag == "__date__":
            return date.fromisoformat(raw)
        if tag == "__time__":
            return time.fromisoformat(raw)
        if tag == "__decimal__":
            return Decimal(raw)
        if tag == "__uuid__":
            return UUID(raw)
        if tag == "__bytes__":
            return base64.b64decode(raw)
        return obj
