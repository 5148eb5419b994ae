"""
Utility functions for steganography operations
"""

import os
import tempfile
from pathlib import Path

import numpy as np

from .errors import FileAccessError

# Width of every length field (container and embedded frame)
LENGTH_SIZE = 4


def bytes_to_bits(data: bytes) -> np.ndarray:
    """Convert bytes to an array of bits, most significant bit first."""
    return np.unpackbits(np.frombuffer(data, dtype=np.uint8))


def bits_to_bytes(bits: np.ndarray) -> bytes:
    """Convert an array of bits back to bytes (zero padded to a whole byte)."""
    return np.packbits(np.asarray(bits, dtype=np.uint8)).tobytes()


def int_to_bytes(value: int, length: int = LENGTH_SIZE) -> bytes:
    """Convert integer to bytes (big-endian)."""
    return value.to_bytes(length, byteorder='big')


def bytes_to_int(data: bytes) -> int:
    """Convert bytes to integer (big-endian)."""
    return int.from_bytes(data, byteorder='big')


def basename(name: str) -> str:
    """Return the text after the last '/' of a stored path."""
    return name.rsplit('/', 1)[-1]


def get_file_data(path: str) -> bytes:
    """Read a whole file, mapping OS failures to FileAccessError."""
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise FileAccessError(f"Cannot read {path}: {e.strerror or e}") from e


def atomic_write(path: str, write_fn) -> str:
    """
    Write a file through a temporary sibling and move it into place.

    ``write_fn`` receives the temporary path. On any failure the temporary
    file is removed and nothing is left at ``path``.
    """
    target = Path(path)
    directory = target.parent
    try:
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix='.tmp', dir=directory
        )
    except OSError as e:
        raise FileAccessError(f"Cannot write to {directory}: {e.strerror or e}") from e
    os.close(fd)

    try:
        write_fn(tmp_path)
        # mkstemp creates 0600; give the result the mode open() would
        os.chmod(tmp_path, 0o666 & ~_current_umask())
        os.replace(tmp_path, target)
    except OSError as e:
        _remove_quietly(tmp_path)
        raise FileAccessError(f"Cannot write {target}: {e.strerror or e}") from e
    except BaseException:
        _remove_quietly(tmp_path)
        raise

    return str(target)


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def _remove_quietly(path: str):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


def save_file(data: bytes, filename: str, output_dir: str = ".") -> str:
    """Save data to file, overwriting any existing file of that name."""
    output_path = Path(output_dir) / filename

    def write(tmp_path):
        with open(tmp_path, 'wb') as f:
            f.write(data)

    return atomic_write(str(output_path), write)


def format_size(size_bytes: int) -> str:
    """Format bytes to human-readable string."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.2f} TB"
