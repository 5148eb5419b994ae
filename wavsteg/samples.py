"""
Sample adapter: moves decoded samples into the domain the embedder works on

Integer PCM is embedded directly on its quantized LSBs, so it is never
rescaled. Floating-point streams may reach or exceed 1.0; those are
brought back into [-1, 1) before embedding and scaled up again afterwards.
"""

import logging

import numpy as np

from .wavio import WaveInfo

logger = logging.getLogger(__name__)


def peak_amplitude(samples: np.ndarray) -> float:
    """Largest absolute sample value (0.0 for an empty buffer)."""
    if samples.size == 0:
        return 0.0
    return float(np.max(np.abs(samples)))


def scale_factor(samples: np.ndarray, info: WaveInfo) -> float:
    """
    Scale used to bring a floating-point buffer into [-1, 1).

    The factor is the smallest power of two strictly greater than the peak,
    so dividing and multiplying by it is exact. A peak of exactly 1.0 is
    scaled too: the normalized peak then sits in [0.5, 1), and embedding
    never moves it out of that band, so a stego buffer yields the same
    factor as its cover.
    """
    if not info.is_float:
        return 1.0
    peak = peak_amplitude(samples)
    if not np.isfinite(peak) or peak < 1.0:
        return 1.0
    _, exponent = np.frexp(peak)
    return float(np.ldexp(1.0, int(exponent)))


def normalize(samples: np.ndarray, info: WaveInfo) -> tuple:
    """
    Normalize a buffer for embedding.

    Returns:
        (normalized_samples, scale) - scale is 1.0 when nothing changed
    """
    scale = scale_factor(samples, info)
    if scale == 1.0:
        return samples, scale
    logger.debug("Normalizing float samples by %g", scale)
    return (samples / scale).astype(samples.dtype), scale


def denormalize(samples: np.ndarray, scale: float, info: WaveInfo) -> np.ndarray:
    """Reapply the scale returned by normalize()."""
    if scale == 1.0 or not info.is_float:
        return samples
    return (samples * scale).astype(samples.dtype)


def capacity_bits(info: WaveInfo) -> int:
    """One embeddable bit per sample."""
    return info.frames * info.channels
