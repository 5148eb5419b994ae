"""
Audio acquisition: turning a path into a sample buffer

WAV files are decoded natively. Anything else is handed once to ffmpeg,
which converts it to a temporary 16-bit PCM WAV that is read and removed.
"""

import abc
import logging
import os
import subprocess
import tempfile
from pathlib import Path

import numpy as np

from .errors import DecodeError, FileAccessError, TranscodeError
from .wavio import WaveInfo, read_wav

logger = logging.getLogger(__name__)

DEFAULT_FFMPEG = "ffmpeg"
DEFAULT_TIMEOUT = 60.0


class FfmpegTranscoder:
    """Converts arbitrary audio into 16-bit PCM WAV with an ffmpeg process."""

    def __init__(self, binary: str = DEFAULT_FFMPEG, timeout: float = DEFAULT_TIMEOUT):
        self.binary = binary
        self.timeout = timeout

    def command(self, input_path: str, output_path: str) -> list:
        return [
            self.binary, "-y", "-loglevel", "error",
            "-i", input_path,
            "-acodec", "pcm_s16le",
            output_path,
        ]

    def transcode(self, input_path: str, workdir: str) -> str:
        """
        Transcode ``input_path`` into a WAV inside ``workdir``.

        Returns:
            Path of the produced WAV

        Raises:
            TranscodeError: on a missing binary, timeout or failed exit
        """
        output_path = os.path.join(workdir, "transcoded.wav")
        cmd = self.command(input_path, output_path)
        logger.info("Transcoding %s with %s", input_path, self.binary)
        try:
            subprocess.run(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
                check=True,
            )
        except FileNotFoundError as e:
            raise TranscodeError(f"Transcoder not found: {self.binary}") from e
        except subprocess.TimeoutExpired as e:
            raise TranscodeError(
                f"Transcoding {input_path} timed out after {self.timeout:g}s"
            ) from e
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or b"").decode('utf-8', errors='replace').strip()
            raise TranscodeError(
                f"Transcoder exited with status {e.returncode}"
                + (f": {detail}" if detail else "")
            ) from e

        if not os.path.isfile(output_path):
            raise TranscodeError(f"Transcoder produced no output for {input_path}")
        return output_path


class AudioAcquirer(abc.ABC):
    """Capability that yields (samples, WaveInfo) for an audio source."""

    @abc.abstractmethod
    def acquire(self, path: str) -> tuple:
        """Return (samples, WaveInfo) for ``path``."""


class FileAcquirer(AudioAcquirer):
    """Native WAV decode with a single fallback to an external transcoder."""

    def __init__(self, transcoder: FfmpegTranscoder = None):
        self.transcoder = transcoder or FfmpegTranscoder()

    def acquire(self, path: str) -> tuple:
        if not Path(path).is_file():
            raise FileAccessError(f"Audio file not found: {path}")

        try:
            samples, info = read_wav(path)
        except DecodeError as e:
            logger.info("Native WAV decode failed (%s), falling back to transcoding", e)
            samples, info = self._acquire_transcoded(path)

        if samples.size == 0:
            raise DecodeError(f"Audio file contains no samples: {path}")
        return samples, info

    def _acquire_transcoded(self, path: str) -> tuple:
        with tempfile.TemporaryDirectory(prefix="wavstego-") as workdir:
            wav_path = self.transcoder.transcode(path, workdir)
            samples, info = read_wav(wav_path)
        return samples, info


class StaticAcquirer(AudioAcquirer):
    """Returns a fixed buffer regardless of the path asked for."""

    def __init__(self, samples: np.ndarray, info: WaveInfo):
        self.samples = samples
        self.info = info
        self.requested = []

    def acquire(self, path: str) -> tuple:
        self.requested.append(path)
        if self.samples.size == 0:
            raise DecodeError(f"Audio file contains no samples: {path}")
        return self.samples.copy(), self.info
