"""Spectral denoising strategies.

Every strategy maps ``(frames, profile, strength)`` to a new list of frames
with the same count, bin count and phase. Nothing here keeps state between
calls: the Wiener filter's prior SNR lives in a ``WienerState`` that is
allocated per call unless the caller passes one in.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.stats import median_abs_deviation

from .config import (
    ADAPTIVE_FILTER_FLOOR,
    ENHANCED_SUBTRACTION_SCALE,
    EPSILON,
    SPECTRAL_SUBTRACTION_ALPHA,
    SPECTRAL_SUBTRACTION_BETA,
    WAVELET_FLOOR,
    WAVELET_MAD_MULTIPLIER,
    WIENER_GAIN_FLOOR,
    WIENER_SMOOTHING,
)
from .exceptions import ValidationError
from .models import (
    Algorithm,
    NoiseProfile,
    NoiseReductionConfig,
    SpectralFrame,
    ThresholdMode,
)

Frames = Sequence[SpectralFrame]


@dataclass
class WienerState:
    """Per-bin prior SNR carried from frame to frame by the Wiener filter."""

    prior_snr: np.ndarray

    @classmethod
    def fresh(cls, bin_count: int) -> "WienerState":
        """Create a zeroed state for ``bin_count`` bins."""
        return cls(prior_snr=np.zeros(bin_count))


def spectral_subtraction(
    frames: Frames, profile: NoiseProfile, strength: float
) -> list[SpectralFrame]:
    """Subtract the weighted, over-estimated noise spectrum from each frame.

    ``out = max(s - alpha * strength * noise * weight, beta * s)``; the beta
    floor keeps isolated residual peaks from turning into musical noise.
    """
    noise = (
        SPECTRAL_SUBTRACTION_ALPHA
        * strength
        * profile.spectral_fingerprint
        * profile.frequency_weights
    )

    processed = []
    for frame in frames:
        subtracted = frame.magnitude - noise
        floor = SPECTRAL_SUBTRACTION_BETA * frame.magnitude
        processed.append(frame.with_magnitude(np.maximum(subtracted, floor)))
    return processed


def wiener_filter(
    frames: Frames,
    profile: NoiseProfile,
    strength: float,
    state: Optional[WienerState] = None,
) -> list[SpectralFrame]:
    """Wiener gain from a recursively smoothed prior SNR.

    Args:
        frames: Frames in time order
        profile: Noise profile
        strength: 0 leaves frames untouched, 1 applies the full gain
        state: Prior SNR to continue from; a fresh zeroed state when omitted.
            Updated in place.

    Returns:
        Processed frames
    """
    if state is None:
        state = WienerState.fresh(profile.bin_count)
    elif len(state.prior_snr) != profile.bin_count:
        raise ValidationError(
            f"Wiener state has {len(state.prior_snr)} bins, profile has {profile.bin_count}"
        )

    noise_power = profile.spectral_fingerprint**2

    processed = []
    for frame in frames:
        signal_power = frame.magnitude**2
        posterior_snr = np.maximum(signal_power / (noise_power + EPSILON) - 1.0, 0.0)
        state.prior_snr = (
            WIENER_SMOOTHING * state.prior_snr + (1.0 - WIENER_SMOOTHING) * posterior_snr
        )

        gain = state.prior_snr / (1.0 + state.prior_snr)
        adjusted_gain = np.maximum(1.0 - strength * (1.0 - gain), WIENER_GAIN_FLOOR)
        processed.append(frame.with_magnitude(frame.magnitude * adjusted_gain))
    return processed


def adaptive_filter(
    frames: Frames, profile: NoiseProfile, strength: float
) -> list[SpectralFrame]:
    """Subtract noise scaled down where the frame departs from the profile."""
    noise = profile.spectral_fingerprint

    processed = []
    for frame in frames:
        error = frame.magnitude - noise
        filtered = frame.magnitude - strength * noise / (1.0 + np.abs(error))
        floor = ADAPTIVE_FILTER_FLOOR * frame.magnitude
        processed.append(frame.with_magnitude(np.maximum(filtered, floor)))
    return processed


def noise_threshold(fingerprint: np.ndarray) -> float:
    """Robust threshold of a noise spectrum: median plus three MADs."""
    median = float(np.median(fingerprint))
    mad = float(median_abs_deviation(fingerprint, scale=1.0))
    return median + WAVELET_MAD_MULTIPLIER * mad


def wavelet_threshold(
    frames: Frames,
    profile: NoiseProfile,
    strength: float,
    mode: ThresholdMode = ThresholdMode.SOFT,
) -> list[SpectralFrame]:
    """Threshold magnitudes against the profile's robust noise level."""
    threshold = noise_threshold(profile.spectral_fingerprint) * strength

    processed = []
    for frame in frames:
        magnitude = frame.magnitude
        above = magnitude > threshold
        if mode is ThresholdMode.HARD:
            shrunk = np.where(above, magnitude, 0.0)
        else:
            shrunk = np.where(above, magnitude - threshold, 0.0)
        processed.append(
            frame.with_magnitude(np.maximum(shrunk, WAVELET_FLOOR * magnitude))
        )
    return processed


def enhanced(
    frames: Frames,
    profile: NoiseProfile,
    strength: float,
    state: Optional[WienerState] = None,
) -> list[SpectralFrame]:
    """Wiener pass, then spectral subtraction at half strength. Order matters."""
    filtered = wiener_filter(frames, profile, strength, state)
    return spectral_subtraction(filtered, profile, strength * ENHANCED_SUBTRACTION_SCALE)


def process(
    frames: Frames,
    profile: NoiseProfile,
    config: NoiseReductionConfig,
    state: Optional[WienerState] = None,
) -> list[SpectralFrame]:
    """Run the algorithm selected by ``config`` over all frames.

    Args:
        frames: Analysed frames in time order
        profile: Noise profile with the same bin count as the frames
        config: Selects the algorithm, strength and threshold mode
        state: Optional caller-owned Wiener state

    Returns:
        New frames; inputs are not modified

    Raises:
        ValidationError: If frame and profile bin counts differ
    """
    for frame in frames:
        if len(frame.magnitude) != profile.bin_count:
            raise ValidationError(
                f"Frame has {len(frame.magnitude)} bins but noise profile "
                f"{profile.id} has {profile.bin_count}"
            )

    strength = config.strength

    match config.resolved_algorithm:
        case Algorithm.WIENER_FILTER:
            return wiener_filter(frames, profile, strength, state)
        case Algorithm.ADAPTIVE_RLS:
            return adaptive_filter(frames, profile, strength)
        case Algorithm.WAVELET_DENOISING:
            return wavelet_threshold(frames, profile, strength, config.threshold_mode)
        case Algorithm.AI_ENHANCED:
            return enhanced(frames, profile, strength, state)
        case _:
            return spectral_subtraction(frames, profile, strength)
