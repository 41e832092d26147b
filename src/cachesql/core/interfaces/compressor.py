"""Compressor interface."""

from typing import Protocol


class ICompressor(Protocol):
    """Contract for byte-stream compressors used by storage backends."""

    def compress(self, data: bytes) -> bytes:
        """Compress bytes.

        Raises:
            CompressionError: If the data cannot be compressed.
        """
        ...

    def decompress(self, data: bytes) -> bytes:
        """Decompress bytes produced by :meth:`compress`.

        Raises:
            CompressionError: If the data is not a valid compressed stream.
        """
        ...
