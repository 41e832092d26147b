"""Row codec interface."""

from typing import Any, Protocol


class ISerializer(Protocol):
    """Converts query results to bytes and back.

    ``deserialize(serialize(rows))`` must equal ``rows`` for every result
    the executor can return: a list of row dicts, one row dict or None.
    """

    def serialize(self, value: Any) -> bytes:
        """Encode a query result.

        Raises:
            SerializationError: If a value in the result has no encoding.
        """
        ...

    def deserialize(self, data: bytes) -> Any:
        """Decode bytes produced by :meth:`serialize`.

        Raises:
            SerializationError: If the bytes are not a valid encoding.
        """
        ...
