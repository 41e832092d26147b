"""Zlib compressor implementation."""

import zlib


class CompressionError(Exception):
    """Raised when compression or decompression fails."""


class ZlibCompressor:
    """Byte-stream compressor backed by zlib (deflate)."""

    def __init__(self, level: int = 6) -> None:
        """Initialize the compressor.

        Args:
            level: Compression level from 0 (none) to 9 (best).
        """
        if not 0 <= level <= 9:
            raise ValueError("level must be between 0 and 9")
        self._level = level

    def compress(self, data: bytes) -> bytes:
        """Compress bytes.

        Raises:
            CompressionError: If the data cannot be compressed.
        """
        try:
            return zlib.compress(data, self._level)
        except (TypeError, zlib.error) as e:
            raise CompressionError(f"Failed to compress data: {e}") from e

    def decompress(self, data: bytes) -> bytes:
        """Decompress bytes.

        Raises:
            CompressionError: If the data is not a zlib stream.
        """
        try:
            return zlib.decompress(data)
        except (TypeError, zlib.error) as e:
            raise CompressionError(f"Failed to decompress data: {e}") from e
