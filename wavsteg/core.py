"""
Core LSB embedding/extraction

One bit per sample, walked in interleaved order (frame by frame, channel by
channel), which is the C-order flattening of a (frames, channels) array.

Integer samples have their quantized LSB overwritten directly. Float samples
are mapped onto a fixed-point grid with FLOAT_FRACTION_BITS fractional bits
and the LSB of that grid value is used instead.
"""

import logging

import numpy as np

from .container import EmbeddedFrame
from .errors import InsufficientCapacity, TruncatedStream
from .utils import LENGTH_SIZE, bytes_to_bits, bits_to_bytes, bytes_to_int

logger = logging.getLogger(__name__)

HEADER_BITS = LENGTH_SIZE * 8

# float32 carries a 24-bit significand, so q / 2**23 is exact for |q| < 2**23
FLOAT_FRACTION_BITS = 23
FLOAT_SCALE = float(1 << FLOAT_FRACTION_BITS)
FLOAT_LIMIT = 1 << FLOAT_FRACTION_BITS


def _float_to_grid(values: np.ndarray) -> np.ndarray:
    return np.rint(values.astype(np.float64) * FLOAT_SCALE).astype(np.int64)


def _sample_lsbs(flat: np.ndarray) -> np.ndarray:
    if np.issubdtype(flat.dtype, np.floating):
        return (_float_to_grid(flat) & 1).astype(np.uint8)
    return (flat.astype(np.int64) & 1).astype(np.uint8)


def _write_lsbs(flat: np.ndarray, bits: np.ndarray) -> np.ndarray:
    """Return new values for the first len(bits) samples of ``flat``."""
    head = flat[:bits.size]
    bits = bits.astype(np.int64)

    if np.issubdtype(flat.dtype, np.floating):
        q = (_float_to_grid(head) & ~1) | bits
        # Keep the grid strictly inside (-1, 1); stepping by 2 keeps the parity
        q = np.where(q >= FLOAT_LIMIT, q - 2, q)
        q = np.where(q <= -FLOAT_LIMIT, q + 2, q)
        return (q / FLOAT_SCALE).astype(flat.dtype)

    return ((head.astype(np.int64) & ~1) | bits).astype(flat.dtype)


def capacity_bits(samples: np.ndarray) -> int:
    """Number of bits a buffer can carry, length prefix included."""
    return int(samples.size)


def capacity_bytes(samples: np.ndarray) -> int:
    """
    Calculate maximum payload capacity in bytes.

    Args:
        samples: carrier samples

    Returns:
        Payload bytes available after the length prefix
    """
    return max(0, (capacity_bits(samples) - HEADER_BITS) // 8)


def embed(samples: np.ndarray, data: bytes) -> np.ndarray:
    """
    Embed data into samples using 1-bit LSB steganography.

    Args:
        samples: carrier samples, any shape (integer or float dtype)
        data: bytes to hide (ciphertext)

    Returns:
        New array of the same shape and dtype with the data hidden

    Raises:
        InsufficientCapacity: if the length prefix and data do not fit
    """
    frame = EmbeddedFrame(data)
    available = capacity_bits(samples)
    if frame.bit_length > available:
        raise InsufficientCapacity(
            f"Data too large: {frame.bit_length} bits required, "
            f"but only {available} bits available"
        )

    bits = bytes_to_bits(frame.to_bytes())
    flat = samples.reshape(-1).copy()
    flat[:bits.size] = _write_lsbs(flat, bits)

    logger.debug("Embedded %d bits into %d samples", bits.size, available)
    return flat.reshape(samples.shape)


def extract(samples: np.ndarray) -> bytes:
    """
    Extract data hidden by embed().

    Only the length prefix and the declared number of bytes are read.

    Raises:
        TruncatedStream: if the buffer cannot hold the declared length
    """
    flat = samples.reshape(-1)
    available = capacity_bits(samples)
    if available < HEADER_BITS:
        raise TruncatedStream(
            f"Not enough samples to hold a length header ({available} < {HEADER_BITS})"
        )

    length = bytes_to_int(bits_to_bytes(_sample_lsbs(flat[:HEADER_BITS])))
    needed = length * 8
    if needed > available - HEADER_BITS:
        raise TruncatedStream(
            f"Declared length of {length} bytes exceeds the "
            f"{(available - HEADER_BITS) // 8} bytes available"
        )

    payload = bits_to_bytes(_sample_lsbs(flat[HEADER_BITS:HEADER_BITS + needed]))
    logger.debug("Extracted %d bytes", length)
    return payload
