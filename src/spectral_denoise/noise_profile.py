"""Noise profile learning from noise-only spectral frames."""

import uuid
from collections.abc import Sequence
from typing import Optional

import numpy as np

from .config import (
    DEFAULT_PROFILE_DESCRIPTION,
    DEFAULT_PROFILE_NAME,
    DEFAULT_SAMPLE_RATE,
    HIGH_BAND_WEIGHT,
    LOW_BAND_EDGE_HZ,
    LOW_BAND_WEIGHT,
    MID_BAND_EDGE_HZ,
    MID_BAND_WEIGHT,
    NOISE_FLOOR_PERCENTILE,
    NOISE_LEARNING_FRACTION,
)
from .exceptions import ValidationError
from .logging_utils import get_logger
from .models import AdaptiveParams, NoiseProfile, SpectralFrame
from .psychoacoustics import frequency_to_bark

logger = get_logger(__name__)


def perceptual_weights(frequencies: np.ndarray) -> np.ndarray:
    """Per-bin subtraction weights from a three band perceptual heuristic.

    Low frequencies are treated gently, the 1-4 kHz band where the ear is
    most sensitive to noise is treated more aggressively.

    Args:
        frequencies: Bin centre frequencies in Hz

    Returns:
        Weight per bin
    """
    frequencies = np.asarray(frequencies, dtype=np.float64)
    return np.where(
        frequencies < LOW_BAND_EDGE_HZ,
        LOW_BAND_WEIGHT,
        np.where(frequencies < MID_BAND_EDGE_HZ, MID_BAND_WEIGHT, HIGH_BAND_WEIGHT),
    )


def estimate_noise_floor(fingerprint: np.ndarray) -> float:
    """Robust low estimate of the noise level: the 10th percentile bin."""
    if len(fingerprint) == 0:
        return 0.0
    ordered = np.sort(fingerprint)
    return float(ordered[int(len(ordered) * NOISE_FLOOR_PERCENTILE)])


def leading_noise_frames(
    frames: Sequence[SpectralFrame], fraction: float = NOISE_LEARNING_FRACTION
) -> list[SpectralFrame]:
    """Select the frames assumed to be noise-only: the leading fraction.

    At least one frame is returned whenever frames is not empty.
    """
    if not frames:
        return []
    count = max(1, int(len(frames) * fraction))
    return list(frames[:count])


def build_noise_profile(
    frames: Sequence[SpectralFrame],
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    name: str = DEFAULT_PROFILE_NAME,
    description: str = DEFAULT_PROFILE_DESCRIPTION,
    adaptive_params: Optional[AdaptiveParams] = None,
) -> NoiseProfile:
    """Learn a noise profile from noise-only frames.

    Args:
        frames: Frames assumed to contain only noise
        sample_rate: Sample rate the frames were analysed at
        name: Display name of the profile
        description: Free text description
        adaptive_params: Tuning hints, defaults when omitted

    Returns:
        New immutable NoiseProfile

    Raises:
        ValidationError: If frames is empty or frames disagree on bin count
    """
    if len(frames) == 0:
        raise ValidationError("No noise frames provided for profile creation")

    bin_count = len(frames[0].magnitude)
    if any(len(frame.magnitude) != bin_count for frame in frames):
        raise ValidationError("Noise frames have inconsistent bin counts")

    magnitudes = np.stack([frame.magnitude for frame in frames])
    fingerprint = np.mean(magnitudes, axis=0)

    frequencies = np.arange(bin_count) * sample_rate / (2 * bin_count)
    weights = perceptual_weights(frequencies)
    noise_floor = estimate_noise_floor(fingerprint)

    profile = NoiseProfile(
        id=f"noise_profile_{uuid.uuid4().hex}",
        name=name,
        description=description,
        spectral_fingerprint=fingerprint,
        noise_floor=noise_floor,
        frequency_weights=weights,
        adaptive_params=adaptive_params or AdaptiveParams(),
        sample_rate=sample_rate,
        frame_size=2 * bin_count,
    )

    logger.debug(
        f"Built noise profile {profile.id} from {len(frames)} frames "
        f"(noise floor {noise_floor:.6f})"
    )
    return profile


def critical_band_energies(profile: NoiseProfile, band_count: int = 24) -> np.ndarray:
    """Sum the profile's fingerprint energy per Bark critical band.

    Args:
        profile: Profile to summarise
        band_count: Number of one-Bark bands to report

    Returns:
        Energy per band, index ``b`` covering ``[b, b + 1)`` Bark
    """
    frequencies = (
        np.arange(profile.bin_count) * profile.sample_rate / (2 * profile.bin_count)
    )
    bands = np.clip(np.floor(frequency_to_bark(frequencies)).astype(int), 0, band_count - 1)
    return np.bincount(
        bands, weights=profile.spectral_fingerprint**2, minlength=band_count
    )
