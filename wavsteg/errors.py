"""
Error kinds raised by the wavstego pipeline
"""


class StegoError(Exception):
    """Base class for every failure of an encode or decode cycle."""


class ArgumentError(StegoError, ValueError):
    """Bad or missing user input."""


class PassphraseTooLong(ArgumentError):
    """Passphrase exceeds the 16 byte limit."""


class FileAccessError(StegoError):
    """Source file unreadable or output location unwritable."""


class DecodeError(StegoError):
    """Audio could not be acquired as a sample buffer."""


class TranscodeError(DecodeError):
    """External transcoder failed, timed out or is missing."""


class EncodeError(StegoError):
    """Samples could not be written back as WAV."""


class MalformedContainer(StegoError, ValueError):
    """Recovered container does not parse."""


class InsufficientCapacity(StegoError, ValueError):
    """Payload does not fit in the carrier samples."""


class TruncatedStream(StegoError, ValueError):
    """Declared embedded length exceeds the available bits."""


class CompressionError(StegoError):
    """Compression or decompression failed."""


class CryptoError(StegoError, ValueError):
    """Encryption failed, or decryption failed (wrong passphrase or corrupted data)."""
