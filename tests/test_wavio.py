from __future__ import annotations

import os
import stat
import wave
from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from wavsteg.errors import DecodeError, EncodeError
from wavsteg.utils import save_file
from wavsteg.wavio import WaveInfo, read_wav, write_wav

from conftest import SAMPLE_RATE, sine_samples, write_pcm16_wav


def test_read_pcm16(cover_wav: Path) -> None:
    samples, info = read_wav(str(cover_wav))

    assert samples.dtype == np.int16
    assert samples.shape == (4000, 1)
    assert info == WaveInfo(channels=1, bit_depth=16, sample_rate=SAMPLE_RATE, frames=4000)
    assert info.data_size == 8000


def test_stereo_is_interleaved(tmp_path: Path) -> None:
    path = tmp_path / "stereo.wav"
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(2)
        wav.setsampwidth(2)
        wav.setframerate(SAMPLE_RATE)
        wav.writeframes(np.array([1, -1, 2, -2, 3, -3], dtype="<i2").tobytes())

    samples, info = read_wav(str(path))

    assert info.channels == 2
    assert samples.tolist() == [[1, -1], [2, -2], [3, -3]]


@pytest.mark.parametrize("bit_depth, dtype, peak", [
    (8, np.uint8, 255),
    (16, np.int16, 32767),
    (24, np.int32, 2 ** 23 - 1),
    (32, np.int32, 2 ** 31 - 1),
])
def test_pcm_write_read(tmp_path: Path, bit_depth: int, dtype, peak: int) -> None:
    if bit_depth == 8:
        samples = np.array([[0, 255], [128, 1], [127, 254]], dtype=dtype)
    else:
        samples = np.array([[-peak - 1, peak], [0, -1], [1, -2]], dtype=dtype)
    info = WaveInfo(channels=2, bit_depth=bit_depth, sample_rate=SAMPLE_RATE, frames=3)
    path = str(tmp_path / f"pcm{bit_depth}.wav")

    write_wav(path, samples, info)
    restored, restored_info = read_wav(path)

    assert restored_info == info
    assert restored.dtype == dtype
    assert np.array_equal(restored, samples)


@pytest.mark.parametrize("bit_depth, dtype", [(32, np.float32), (64, np.float64)])
def test_float_write_read(tmp_path: Path, bit_depth: int, dtype) -> None:
    samples = sine_samples(200, 2, amplitude=1.7).astype(dtype)
    info = WaveInfo(channels=2, bit_depth=bit_depth, sample_rate=SAMPLE_RATE,
                    frames=200, is_float=True)
    path = str(tmp_path / "float.wav")

    write_wav(path, samples, info)
    restored, restored_info = read_wav(path)

    assert restored_info == info
    assert restored.dtype == dtype
    assert np.array_equal(restored, samples)


def test_read_float_written_elsewhere(tmp_path: Path) -> None:
    path = str(tmp_path / "ext.wav")
    sf.write(path, sine_samples(50).astype(np.float32), SAMPLE_RATE, subtype="FLOAT")

    samples, info = read_wav(path)

    assert info.is_float and info.bit_depth == 32
    assert samples.shape == (50, 1)


def test_not_a_wav(tmp_path: Path) -> None:
    path = tmp_path / "noise.mp3"
    path.write_bytes(b"ID3" + b"\x00" * 64)

    with pytest.raises(DecodeError):
        read_wav(str(path))


def test_failed_write_leaves_nothing(tmp_path: Path) -> None:
    info = WaveInfo(channels=1, bit_depth=40, sample_rate=SAMPLE_RATE, frames=1)
    path = tmp_path / "out.wav"

    with pytest.raises(EncodeError):
        write_wav(str(path), np.zeros((1, 1), dtype=np.int64), info)

    assert list(tmp_path.iterdir()) == []


def test_existing_output_is_replaced(tmp_path: Path) -> None:
    target = write_pcm16_wav(tmp_path / "out.wav", frames=10)
    samples = np.ones((5, 1), dtype=np.int16)
    info = WaveInfo(channels=1, bit_depth=16, sample_rate=SAMPLE_RATE, frames=5)

    write_wav(str(target), samples, info)

    assert read_wav(str(target))[1].frames == 5


def test_read_extensible_pcm24(tmp_path: Path) -> None:
    path = str(tmp_path / "wavex24.wav")
    values = np.array([[-2 ** 23, 2 ** 23 - 1], [0, -1], [12345, -54321]], dtype=np.int32)
    # libsndfile takes the top 24 bits of int32 input
    sf.write(path, values << 8, SAMPLE_RATE, subtype="PCM_24", format="WAVEX")

    samples, info = read_wav(path)

    assert info == WaveInfo(channels=2, bit_depth=24, sample_rate=SAMPLE_RATE, frames=3)
    assert samples.dtype == np.int32
    assert np.array_equal(samples, values)


@pytest.mark.parametrize("subtype, bit_depth, dtype, written, expected", [
    ("PCM_U8", 8, np.uint8, [-128, 0, 127], [0, 128, 255]),
    ("PCM_16", 16, np.int16, [-32768, 0, 32767], [-32768, 0, 32767]),
])
def test_read_extensible_pcm_keeps_depth(tmp_path: Path, subtype: str, bit_depth: int,
                                         dtype, written, expected) -> None:
    path = str(tmp_path / "wavex.wav")
    data = np.array(written, dtype=np.int32).reshape(-1, 1) << (32 - bit_depth)
    sf.write(path, data, SAMPLE_RATE, subtype=subtype, format="WAVEX")

    samples, info = read_wav(path)

    assert info.bit_depth == bit_depth
    assert samples.dtype == dtype
    assert samples[:, 0].tolist() == expected


@pytest.mark.parametrize("umask", [0o022, 0o077])
def test_written_files_follow_umask(tmp_path: Path, umask: int) -> None:
    samples = np.zeros((4, 1), dtype=np.int16)
    info = WaveInfo(channels=1, bit_depth=16, sample_rate=SAMPLE_RATE, frames=4)
    previous = os.umask(umask)
    try:
        wav_path = write_wav(str(tmp_path / "out.wav"), samples, info)
        file_path = save_file(b"payload", "extracted.bin", str(tmp_path))
    finally:
        os.umask(previous)

    assert stat.S_IMODE(os.stat(wav_path).st_mode) == 0o666 & ~umask
    assert stat.S_IMODE(os.stat(file_path).st_mode) == 0o666 & ~umask
