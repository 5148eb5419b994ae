"""
Encode and decode cycles

Encode: message -> container -> zlib -> AES-GCM -> LSB embed -> WAV
Decode: WAV -> LSB extract -> AES-GCM -> zlib -> container -> text or file

Every stage raises a StegoError subclass on failure, which aborts the cycle.
No state is carried from one cycle to the next.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from . import core, samples as adapter
from .acquire import AudioAcquirer
from .compress import compress, decompress, ratio
from .config import StegoConfig, ENCODE, DECODE, CAPACITY
from .container import Container, encode_container, decode_container
from .crypto import encrypt, decrypt
from .errors import ArgumentError
from .utils import get_file_data, save_file
from .wavio import write_wav

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodeReport:
    output_path: str
    container_size: int
    compressed_size: int
    ciphertext_size: int
    capacity_bits: int
    is_file: bool

    @property
    def used_bits(self) -> int:
        return core.HEADER_BITS + self.ciphertext_size * 8


@dataclass(frozen=True)
class DecodeResult:
    container: Container
    saved_path: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.container.is_file

    @property
    def text(self) -> str:
        return self.container.text()


def load_message(message: str) -> tuple:
    """
    Resolve the message argument.

    A path to an existing, non-empty file hides that file under its path;
    anything else is hidden as a literal text message.

    Returns: (name_or_text, payload or None)
    """
    if os.path.isfile(message) and os.path.getsize(message) > 0:
        return message, get_file_data(message)
    return message, None


def _require_mode(config: StegoConfig, mode: str):
    if config.mode != mode:
        raise ArgumentError(f"Configuration is for {config.mode}, not {mode}")
    config.validate()


def encode_cycle(config: StegoConfig, acquirer: AudioAcquirer = None) -> EncodeReport:
    """
    Hide ``config.message`` in ``config.audio_path`` and write ``config.output_path``.

    Raises:
        StegoError: the first stage failure; no output file is left behind
    """
    _require_mode(config, ENCODE)
    acquirer = acquirer or config.acquirer()
    logger.info("Encode cycle started")

    name_or_text, payload = load_message(config.message)
    container = encode_container(name_or_text, payload)
    logger.info("%s prepared (%d bytes)", "File" if payload else "Message", len(container))

    samples, info = acquirer.acquire(config.audio_path)
    logger.info(
        "Audio file opened (%d frames, %d channel(s), %d-bit)",
        info.frames, info.channels, info.bit_depth,
    )
    normalized, scale = adapter.normalize(samples, info)

    compressed = compress(container)
    logger.info("Compression finished (ratio: %.1f%%)", ratio(len(container), len(compressed)))

    ciphertext = encrypt(compressed, config.passphrase)
    logger.info("Encryption finished")

    stego = core.embed(normalized, ciphertext)
    output = write_wav(config.output_path, adapter.denormalize(stego, scale, info), info)
    logger.info("Stego finished: %s", output)

    return EncodeReport(
        output_path=output,
        container_size=len(container),
        compressed_size=len(compressed),
        ciphertext_size=len(ciphertext),
        capacity_bits=adapter.capacity_bits(info),
        is_file=payload is not None,
    )


def decode_cycle(config: StegoConfig, acquirer: AudioAcquirer = None) -> DecodeResult:
    """
    Recover the hidden container from ``config.audio_path``.

    Text messages are returned; files are written into ``config.output_dir``
    under the final component of their stored name.
    """
    _require_mode(config, DECODE)
    acquirer = acquirer or config.acquirer()
    logger.info("Decode cycle started")

    samples, info = acquirer.acquire(config.audio_path)
    normalized, _ = adapter.normalize(samples, info)
    ciphertext = core.extract(normalized)
    logger.info("Destego finished (%d bytes)", len(ciphertext))

    compressed = decrypt(ciphertext, config.passphrase)
    logger.info("Decryption finished")

    container = decode_container(decompress(compressed))
    logger.info("Decompression finished")

    if not container.is_file:
        return DecodeResult(container)

    saved_path = save_file(container.payload, container.output_name(), config.output_dir)
    logger.info("A file (%s) is extracted", saved_path)
    return DecodeResult(container, saved_path)


def capacity_report(config: StegoConfig, acquirer: AudioAcquirer = None) -> dict:
    """Capacity of ``config.audio_path`` in bits and payload bytes."""
    _require_mode(config, CAPACITY)
    acquirer = acquirer or config.acquirer()
    samples, info = acquirer.acquire(config.audio_path)
    return {
        'capacity_bits': adapter.capacity_bits(info),
        'payload_bytes': core.capacity_bytes(samples),
        'channels': info.channels,
        'bit_depth': info.bit_depth,
        'is_float': info.is_float,
    }


def hide_in_audio(audio_path: str, message: str, output_path: str, password: str,
                  acquirer: AudioAcquirer = None) -> str:
    """
    Hide a text message or file in a WAV file.

    Args:
        audio_path: path to host audio file
        message: text, or path of a file to hide
        output_path: output WAV path
        password: passphrase (at most 16 bytes)

    Returns:
        Path to output WAV file
    """
    config = StegoConfig(ENCODE, audio_path, passphrase=password,
                         message=message, output_path=output_path)
    return encode_cycle(config, acquirer).output_path


def extract_from_audio(audio_path: str, password: str, output_dir: str = ".",
                       acquirer: AudioAcquirer = None) -> tuple:
    """
    Extract hidden data from a WAV file.

    Returns:
        (text or saved path, is_file, filename)
    """
    config = StegoConfig(DECODE, audio_path, passphrase=password, output_dir=output_dir)
    result = decode_cycle(config, acquirer)
    if result.is_file:
        return result.saved_path, True, result.container.output_name()
    return result.text, False, None


def get_audio_capacity(audio_path: str, acquirer: AudioAcquirer = None) -> int:
    """Maximum ciphertext size in bytes the audio file can carry."""
    config = StegoConfig(CAPACITY, audio_path)
    return capacity_report(config, acquirer)['payload_bytes']
