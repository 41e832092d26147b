"""Compressors for cachesql."""

from cachesql.infrastructure.compressors.zlib import CompressionError, ZlibCompressor

__all__ = ["CompressionError", "ZlibCompressor"]
