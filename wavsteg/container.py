"""
Message container and embedded frame formats

Container (plaintext, before compression):
- 4 bytes: name-or-text length
- N bytes: name-or-text
- 4 bytes: payload length (0 = text message, no file attached)
- M bytes: payload (file contents, only when M > 0)

Embedded frame (what actually goes into the samples):
- 4 bytes: ciphertext length
- L bytes: ciphertext

All lengths are big-endian.
"""

from dataclasses import dataclass
from typing import Optional, Union

from .errors import MalformedContainer
from .utils import LENGTH_SIZE, int_to_bytes, bytes_to_int, basename

MAX_LENGTH = 0xFFFFFFFF
MIN_CONTAINER_SIZE = 2 * LENGTH_SIZE


def _as_bytes(value: Union[str, bytes], field: str) -> bytes:
    if isinstance(value, str):
        return value.encode('utf-8')
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"{field} must be str or bytes, not {type(value).__name__}")


@dataclass(frozen=True)
class Container:
    """
    A text message, or a file name plus its contents.

    A missing payload and an empty payload are the same thing on the wire:
    both mean "text message".
    """
    name_or_text: bytes
    payload: Optional[bytes] = None

    def __post_init__(self):
        object.__setattr__(self, 'name_or_text', _as_bytes(self.name_or_text, 'name_or_text'))
        if self.payload is not None:
            payload = _as_bytes(self.payload, 'payload')
            object.__setattr__(self, 'payload', payload or None)
        if len(self.name_or_text) > MAX_LENGTH:
            raise ValueError("name_or_text does not fit in a 32-bit length")
        if self.payload is not None and len(self.payload) > MAX_LENGTH:
            raise ValueError("payload does not fit in a 32-bit length")

    @property
    def is_file(self) -> bool:
        return self.payload is not None

    def text(self) -> str:
        return self.name_or_text.decode('utf-8', errors='replace')

    def output_name(self) -> str:
        """File name to extract to: the final component of the stored path."""
        try:
            name = basename(self.name_or_text.decode('utf-8'))
        except UnicodeDecodeError as e:
            raise MalformedContainer("Stored file name is not valid UTF-8") from e
        if name in ('', '.', '..') or '\x00' in name:
            raise MalformedContainer(f"Stored file name is unusable: {name!r}")
        return name

    def to_bytes(self) -> bytes:
        payload = self.payload or b''
        return b''.join([
            int_to_bytes(len(self.name_or_text)),
            self.name_or_text,
            int_to_bytes(len(payload)),
            payload,
        ])

    @classmethod
    def from_bytes(cls, data: bytes) -> 'Container':
        if len(data) < MIN_CONTAINER_SIZE:
            raise MalformedContainer(
                f"Container too short: {len(data)} bytes (need at least {MIN_CONTAINER_SIZE})"
            )

        name_len = bytes_to_int(data[:LENGTH_SIZE])
        offset = LENGTH_SIZE
        if offset + name_len + LENGTH_SIZE > len(data):
            raise MalformedContainer("Declared name/text length exceeds container size")
        name_or_text = data[offset:offset + name_len]
        offset += name_len

        payload_len = bytes_to_int(data[offset:offset + LENGTH_SIZE])
        offset += LENGTH_SIZE
        if offset + payload_len != len(data):
            raise MalformedContainer("Declared payload length does not match container size")
        payload = data[offset:offset + payload_len] if payload_len else None

        return cls(name_or_text, payload)


@dataclass(frozen=True)
class EmbeddedFrame:
    """Length-prefixed ciphertext as written into the samples."""
    ciphertext: bytes

    def __post_init__(self):
        object.__setattr__(self, 'ciphertext', _as_bytes(self.ciphertext, 'ciphertext'))
        if len(self.ciphertext) > MAX_LENGTH:
            raise ValueError("ciphertext does not fit in a 32-bit length")

    @property
    def length(self) -> int:
        return len(self.ciphertext)

    @property
    def bit_length(self) -> int:
        return (LENGTH_SIZE + self.length) * 8

    def to_bytes(self) -> bytes:
        return int_to_bytes(self.length) + self.ciphertext


def encode_container(name_or_text: Union[str, bytes], payload: Optional[bytes] = None) -> bytes:
    """
    Serialize a container.

    Args:
        name_or_text: text message, or path of the hidden file
        payload: file contents; None (or empty) for a text message

    Returns:
        Container bytes
    """
    return Container(name_or_text, payload).to_bytes()


def decode_container(data: bytes) -> Container:
    """
    Parse container bytes.

    Raises:
        MalformedContainer: if the buffer is short or a length overruns it
    """
    return Container.from_bytes(bytes(data))
