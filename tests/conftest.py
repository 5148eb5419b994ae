from __future__ import annotations

import math
import wave
from pathlib import Path

import numpy as np
import pytest

from wavsteg.wavio import WaveInfo

SAMPLE_RATE = 8000


def sine_samples(frames: int, channels: int = 1, amplitude: float = 0.5) -> np.ndarray:
    t = np.arange(frames) / SAMPLE_RATE
    columns = [amplitude * np.sin(2 * math.pi * (440 + 110 * c) * t) for c in range(channels)]
    return np.stack(columns, axis=1)


def pcm16(frames: int, channels: int = 1) -> tuple:
    samples = (sine_samples(frames, channels) * 32767).astype(np.int16)
    info = WaveInfo(channels=channels, bit_depth=16, sample_rate=SAMPLE_RATE, frames=frames)
    return samples, info


def write_pcm16_wav(path: Path, frames: int = 4000, channels: int = 1) -> Path:
    samples, _ = pcm16(frames, channels)
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(2)
        wav.setframerate(SAMPLE_RATE)
        wav.writeframes(samples.astype("<i2").tobytes())
    return path


@pytest.fixture
def cover_wav(tmp_path: Path) -> Path:
    return write_pcm16_wav(tmp_path / "cover.wav")
