"""
Run configuration, built once from the command line
"""

from dataclasses import dataclass
from typing import Optional

from .acquire import DEFAULT_FFMPEG, DEFAULT_TIMEOUT, FfmpegTranscoder, FileAcquirer
from .crypto import check_passphrase
from .errors import ArgumentError

ENCODE = "encode"
DECODE = "decode"
CAPACITY = "capacity"
MODES = (ENCODE, DECODE, CAPACITY)


@dataclass(frozen=True)
class StegoConfig:
    mode: str
    audio_path: str
    passphrase: Optional[str] = None
    message: Optional[str] = None
    output_path: Optional[str] = None
    output_dir: str = "."
    ffmpeg: str = DEFAULT_FFMPEG
    transcode_timeout: float = DEFAULT_TIMEOUT

    def validate(self) -> 'StegoConfig':
        """
        Check that the fields needed by ``mode`` are present.

        Raises:
            ArgumentError: for an unknown mode or a missing field
            PassphraseTooLong: for a passphrase over 16 bytes
        """
        if self.mode not in MODES:
            raise ArgumentError(f"Unknown mode: {self.mode}")
        if not self.audio_path:
            raise ArgumentError("An audio file is required")

        if self.mode == ENCODE:
            missing = [name for name, value in (
                ("passphrase", self.passphrase),
                ("message", self.message),
                ("output path", self.output_path),
            ) if value is None]
            if missing:
                raise ArgumentError(f"Missing arguments for encode: {', '.join(missing)}")
        elif self.mode == DECODE and self.passphrase is None:
            raise ArgumentError("Missing arguments for decode: passphrase")

        if self.passphrase is not None:
            check_passphrase(self.passphrase)
        if self.transcode_timeout <= 0:
            raise ArgumentError("Transcode timeout must be positive")
        return self

    def acquirer(self) -> FileAcquirer:
        return FileAcquirer(FfmpegTranscoder(self.ffmpeg, self.transcode_timeout))
