"""
wavstego - hide compressed, encrypted messages and files in WAV audio
using 1-bit LSB steganography
"""

from .container import Container, EmbeddedFrame, encode_container, decode_container
from .core import embed, extract
from .samples import normalize, denormalize, capacity_bits
from .crypto import encrypt, decrypt
from .compress import compress, decompress
from .config import StegoConfig
from .pipeline import (
    encode_cycle, decode_cycle, hide_in_audio, extract_from_audio, get_audio_capacity
)
from .errors import StegoError

__version__ = "1.0.0"
__all__ = [
    "Container",
    "EmbeddedFrame",
    "encode_container",
    "decode_container",
    "embed",
    "extract",
    "normalize",
    "denormalize",
    "capacity_bits",
    "encrypt",
    "decrypt",
    "compress",
    "decompress",
    "StegoConfig",
    "encode_cycle",
    "decode_cycle",
    "hide_in_audio",
    "extract_from_audio",
    "get_audio_capacity",
    "StegoError",
]
