"""
zlib compression of container bytes
"""

import zlib

from .errors import CompressionError

COMPRESSION_LEVEL = 9


def compress(data: bytes) -> bytes:
    """Compress data with zlib at the highest level."""
    try:
        return zlib.compress(data, COMPRESSION_LEVEL)
    except zlib.error as e:
        raise CompressionError(f"Compression failed: {e}") from e


def decompress(data: bytes) -> bytes:
    """
    Reverse compress().

    Raises:
        CompressionError: if the stream is not valid zlib data
    """
    try:
        return zlib.decompress(data)
    except zlib.error as e:
        raise CompressionError(f"Decompression failed: {e}") from e


def ratio(original_size: int, compressed_size: int) -> float:
    """Compressed size as a percentage of the original."""
    if original_size == 0:
        return 100.0
    return compressed_size * 100.0 / original_size
