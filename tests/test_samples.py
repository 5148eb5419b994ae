from __future__ import annotations

import numpy as np

from wavsteg.samples import normalize, denormalize, capacity_bits, scale_factor
from wavsteg.wavio import WaveInfo

from conftest import pcm16, sine_samples

FLOAT_INFO = WaveInfo(channels=2, bit_depth=32, sample_rate=8000, frames=100, is_float=True)


def test_float_within_range_is_untouched() -> None:
    samples = sine_samples(100, 2, amplitude=0.9).astype(np.float32)

    normalized, scale = normalize(samples, FLOAT_INFO)

    assert scale == 1.0
    assert np.array_equal(normalized, samples)
    assert np.array_equal(denormalize(normalized, scale, FLOAT_INFO), samples)


def test_float_above_range_is_scaled_and_restored() -> None:
    samples = sine_samples(100, 2, amplitude=3.0).astype(np.float32)

    normalized, scale = normalize(samples, FLOAT_INFO)

    assert scale == 4.0
    assert np.max(np.abs(normalized)) <= 1.0
    assert np.array_equal(denormalize(normalized, scale, FLOAT_INFO), samples)


def test_negative_peak_drives_scaling() -> None:
    samples = np.array([[0.1], [-1.5]], dtype=np.float64)
    info = WaveInfo(channels=1, bit_depth=64, sample_rate=8000, frames=2, is_float=True)

    assert scale_factor(samples, info) == 2.0


def test_integer_samples_are_never_scaled() -> None:
    samples, info = pcm16(100)

    normalized, scale = normalize(samples, info)

    assert scale == 1.0
    assert normalized is samples


def test_capacity_is_one_bit_per_sample() -> None:
    assert capacity_bits(FLOAT_INFO) == 200


def test_full_scale_peak_is_scaled() -> None:
    samples = np.array([[0.25], [1.0], [-0.5]], dtype=np.float32)
    info = WaveInfo(channels=1, bit_depth=32, sample_rate=8000, frames=3, is_float=True)

    normalized, scale = normalize(samples, info)

    assert scale == 2.0
    assert np.max(np.abs(normalized)) == 0.5
    assert np.array_equal(denormalize(normalized, scale, info), samples)
