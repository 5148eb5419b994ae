"""
WAV reading and writing
Supports: integer PCM (8, 16, 24, 32-bit) and IEEE float (32, 64-bit)

Samples are returned as a (frames, channels) numpy array.
"""

import logging
import wave
from dataclasses import dataclass

import numpy as np
import soundfile as sf

from .errors import DecodeError, EncodeError
from .utils import atomic_write

logger = logging.getLogger(__name__)

WAV_FORMATS = ('WAV', 'WAVEX')
FLOAT_SUBTYPES = {'FLOAT': 32, 'DOUBLE': 64}
PCM_SUBTYPES = {'PCM_U8': 8, 'PCM_16': 16, 'PCM_24': 24, 'PCM_32': 32}


@dataclass(frozen=True)
class WaveInfo:
    """Stream metadata for one decoded WAV."""
    channels: int
    bit_depth: int
    sample_rate: int
    frames: int
    is_float: bool = False

    @property
    def data_size(self) -> int:
        """Raw byte size of the sample data."""
        return self.frames * self.channels * (self.bit_depth // 8)

    @property
    def subtype(self) -> str:
        if self.is_float:
            return 'FLOAT' if self.bit_depth == 32 else 'DOUBLE'
        return f"PCM_{self.bit_depth}" if self.bit_depth > 8 else 'PCM_U8'


def _pcm_to_samples(raw: bytes, sampwidth: int, channels: int) -> np.ndarray:
    if sampwidth == 1:
        samples = np.frombuffer(raw, dtype=np.uint8)
    elif sampwidth == 2:
        samples = np.frombuffer(raw, dtype='<i2')
    elif sampwidth == 3:
        # Sign-extend 24-bit little-endian triplets into int32
        triplets = np.frombuffer(raw, dtype=np.uint8).reshape(-1, 3).astype(np.int32)
        samples = triplets[:, 0] | (triplets[:, 1] << 8) | (triplets[:, 2] << 16)
        samples = np.where(samples & 0x800000, samples - 0x1000000, samples)
    elif sampwidth == 4:
        samples = np.frombuffer(raw, dtype='<i4')
    else:
        raise DecodeError(f"Unsupported sample width: {sampwidth}")
    return samples.astype(samples.dtype.newbyteorder('=')).reshape(-1, channels)


def _samples_to_pcm(samples: np.ndarray, sampwidth: int) -> bytes:
    flat = samples.reshape(-1)
    if sampwidth == 1:
        return flat.astype(np.uint8).tobytes()
    if sampwidth == 2:
        return flat.astype('<i2').tobytes()
    if sampwidth == 3:
        wide = flat.astype('<i4').view(np.uint8).reshape(-1, 4)
        return wide[:, :3].tobytes()
    if sampwidth == 4:
        return flat.astype('<i4').tobytes()
    raise EncodeError(f"Unsupported sample width: {sampwidth}")


def _load_pcm(path: str) -> tuple:
    with wave.open(path, 'rb') as wav:
        params = wav.getparams()
        audio_data = wav.readframes(params.nframes)

    samples = _pcm_to_samples(audio_data, params.sampwidth, params.nchannels)
    info = WaveInfo(
        channels=params.nchannels,
        bit_depth=params.sampwidth * 8,
        sample_rate=params.framerate,
        frames=samples.shape[0],
    )
    return samples, info


def _load_soundfile(path: str) -> tuple:
    """Read WAV variants the wave module rejects (IEEE float, WAVE_FORMAT_EXTENSIBLE)."""
    stream = sf.info(path)
    if stream.format not in WAV_FORMATS:
        raise DecodeError(f"Not a WAV file: {path}")

    if stream.subtype in FLOAT_SUBTYPES:
        bit_depth = FLOAT_SUBTYPES[stream.subtype]
        dtype = 'float32' if bit_depth == 32 else 'float64'
        samples, sample_rate = sf.read(path, dtype=dtype, always_2d=True)
    elif stream.subtype in PCM_SUBTYPES:
        bit_depth = PCM_SUBTYPES[stream.subtype]
        dtype = 'int16' if bit_depth <= 16 else 'int32'
        samples, sample_rate = sf.read(path, dtype=dtype, always_2d=True)
        # libsndfile left-aligns narrower samples in the container type
        if bit_depth == 8:
            samples = ((samples >> 8) + 128).astype(np.uint8)
        elif bit_depth == 24:
            samples = samples >> 8
    else:
        raise DecodeError(f"Unsupported WAV encoding {stream.subtype}: {path}")

    info = WaveInfo(
        channels=samples.shape[1],
        bit_depth=bit_depth,
        sample_rate=sample_rate,
        frames=samples.shape[0],
        is_float=stream.subtype in FLOAT_SUBTYPES,
    )
    return samples, info


def read_wav(path: str) -> tuple:
    """
    Load a WAV file.

    Returns: (samples, WaveInfo)

    Raises:
        DecodeError: if the file is not a WAV stream this module understands
    """
    try:
        samples, info = _load_pcm(path)
    except (wave.Error, EOFError) as e:
        # wave rejects IEEE float (and, before 3.12, extensible headers)
        logger.debug("wave could not read %s (%s), trying libsndfile", path, e)
        try:
            samples, info = _load_soundfile(path)
        except (sf.LibsndfileError, RuntimeError, TypeError) as sf_error:
            raise DecodeError(f"Cannot decode {path} as WAV: {e}") from sf_error
    except OSError as e:
        raise DecodeError(f"Cannot open {path}: {e.strerror or e}") from e

    logger.debug(
        "Read %s: %d frames, %d channel(s), %d-bit%s, %d Hz",
        path, info.frames, info.channels, info.bit_depth,
        " float" if info.is_float else "", info.sample_rate,
    )
    return samples, info


def _write(path: str, samples: np.ndarray, info: WaveInfo):
    if info.is_float:
        sf.write(path, samples, info.sample_rate, subtype=info.subtype, format='WAV')
        return

    with wave.open(path, 'wb') as wav:
        wav.setnchannels(info.channels)
        wav.setsampwidth(info.bit_depth // 8)
        wav.setframerate(info.sample_rate)
        wav.writeframes(_samples_to_pcm(samples, info.bit_depth // 8))


def write_wav(path: str, samples: np.ndarray, info: WaveInfo) -> str:
    """
    Save samples as a WAV file with the same layout they were read with.

    Nothing is left at ``path`` if writing fails.
    """
    def write(tmp_path):
        try:
            _write(tmp_path, samples, info)
        except (wave.Error, sf.LibsndfileError, RuntimeError) as e:
            raise EncodeError(f"Cannot encode WAV {path}: {e}") from e

    return atomic_write(path, write)
