"""Data models for spectral noise reduction."""

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

import numpy as np

from .config import (
    DEFAULT_AGGRESSIVENESS,
    DEFAULT_ALGORITHM,
    DEFAULT_FRAME_SIZE,
    DEFAULT_HOP_DIVISOR,
    DEFAULT_NOISE_LEARNING_DURATION,
    DEFAULT_PRESERVATION_LEVEL,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_SENSITIVITY,
    DEFAULT_SMOOTHING_FACTOR,
    DEFAULT_STRENGTH,
    STANDARD_FRAME_SIZES,
)
from .exceptions import ConfigurationError, ValidationError
from .logging_utils import get_logger

logger = get_logger(__name__)


class Algorithm(Enum):
    """Denoising strategies that can be selected by a config."""

    SPECTRAL_SUBTRACTION = "spectral_subtraction"
    WIENER_FILTER = "wiener_filter"
    ADAPTIVE_RLS = "adaptive_rls"  # Per-bin adaptive noise estimate
    WAVELET_DENOISING = "wavelet_denoising"  # Median/MAD thresholding
    AI_ENHANCED = "ai_enhanced"  # Wiener followed by half-strength subtraction

    @classmethod
    def from_selector(cls, selector: Union["Algorithm", str, None]) -> "Algorithm":
        """Resolve a selector, falling back to spectral subtraction.

        Args:
            selector: Algorithm member or its string value

        Returns:
            Matching algorithm, or SPECTRAL_SUBTRACTION for unknown selectors
        """
        if isinstance(selector, cls):
            return selector
        try:
            return cls(selector)
        except ValueError:
            logger.warning(
                f"Unknown algorithm selector {selector!r}, using spectral subtraction"
            )
            return cls.SPECTRAL_SUBTRACTION


class ThresholdMode(Enum):
    """Thresholding rule used by wavelet-style denoising."""

    SOFT = "soft"  # Shrink toward zero past the threshold
    HARD = "hard"  # Gate below the threshold


def is_power_of_two(value: int) -> bool:
    """Return True when value is a positive integral power of two."""
    return isinstance(value, (int, np.integer)) and value > 0 and value & (value - 1) == 0


def _clamp_unit(value: float) -> float:
    return float(min(1.0, max(0.0, value)))


@dataclass(frozen=True)
class AdaptiveParams:
    """Tuning hints carried by a noise profile."""

    sensitivity: float = DEFAULT_SENSITIVITY
    aggressiveness: float = DEFAULT_AGGRESSIVENESS
    preservation_level: float = DEFAULT_PRESERVATION_LEVEL


@dataclass(frozen=True)
class NoiseProfile:
    """Learned spectral fingerprint of the noise to suppress.

    Profiles are immutable once created; their arrays are read-only.
    """

    id: str
    name: str
    description: str
    spectral_fingerprint: np.ndarray
    noise_floor: float
    frequency_weights: np.ndarray
    adaptive_params: AdaptiveParams = field(default_factory=AdaptiveParams)
    created_at: datetime = field(default_factory=datetime.now)
    is_learning: bool = False
    sample_rate: int = DEFAULT_SAMPLE_RATE
    frame_size: int = DEFAULT_FRAME_SIZE

    def __post_init__(self) -> None:
        for name in ("spectral_fingerprint", "frequency_weights"):
            array = np.array(getattr(self, name), dtype=np.float64)
            array.setflags(write=False)
            object.__setattr__(self, name, array)
        object.__setattr__(self, "noise_floor", float(self.noise_floor))

        fingerprint_bins = len(self.spectral_fingerprint)
        weight_bins = len(self.frequency_weights)
        if fingerprint_bins != weight_bins or fingerprint_bins != self.frame_size // 2:
            raise ValidationError(
                f"Noise profile {self.id} has {fingerprint_bins} fingerprint bins and "
                f"{weight_bins} weights, expected {self.frame_size // 2} for frame "
                f"size {self.frame_size}"
            )

    @property
    def bin_count(self) -> int:
        """Number of frequency bins described by the profile."""
        return len(self.spectral_fingerprint)


@dataclass
class SpectralFrame:
    """One analysed frame: per-bin magnitude, phase and centre frequency."""

    magnitude: np.ndarray
    phase: np.ndarray
    frequency: np.ndarray
    timestamp: float  # seconds from the start of the channel
    offset: int = 0  # first sample of the frame in the channel

    def with_magnitude(self, magnitude: np.ndarray) -> "SpectralFrame":
        """Return a frame with new magnitudes and the same phase and timing."""
        return SpectralFrame(
            magnitude=magnitude,
            phase=self.phase,
            frequency=self.frequency,
            timestamp=self.timestamp,
            offset=self.offset,
        )


@dataclass
class NoiseReductionConfig:
    """Settings for a single noise reduction call.

    ``strength`` and ``smoothing_factor`` are clamped into [0, 1]; a frame
    size that is not a power of two or a hop larger than the frame raises
    ConfigurationError.

    The standard frame sizes are 512, 1024, 2048 and 4096. Any other power
    of two is still accepted, for short test signals or coarse analysis, but
    logs a warning.
    """

    algorithm: Union[Algorithm, str] = DEFAULT_ALGORITHM
    strength: float = DEFAULT_STRENGTH
    preserve_transients: bool = True
    adaptive_mode: bool = True
    real_time_mode: bool = False
    frame_size: int = DEFAULT_FRAME_SIZE
    hop_size: Optional[int] = None
    smoothing_factor: float = DEFAULT_SMOOTHING_FACTOR
    noise_learning_duration: float = DEFAULT_NOISE_LEARNING_DURATION
    threshold_mode: Union[ThresholdMode, str] = ThresholdMode.SOFT

    def __post_init__(self) -> None:
        self.strength = _clamp_unit(self.strength)
        self.smoothing_factor = _clamp_unit(self.smoothing_factor)

        if not is_power_of_two(self.frame_size) or self.frame_size < 2:
            raise ConfigurationError(
                f"Frame size must be a power of two, got {self.frame_size}"
            )
        self.frame_size = int(self.frame_size)
        if self.frame_size not in STANDARD_FRAME_SIZES:
            logger.warning(
                f"Frame size {self.frame_size} is outside the standard sizes "
                f"{STANDARD_FRAME_SIZES}"
            )

        if not self.hop_size:
            self.hop_size = self.frame_size // DEFAULT_HOP_DIVISOR
        if self.hop_size < 0 or self.hop_size > self.frame_size:
            raise ConfigurationError(
                f"Hop size must be between 1 and {self.frame_size}, got {self.hop_size}"
            )
        self.hop_size = int(self.hop_size)

        try:
            self.threshold_mode = ThresholdMode(self.threshold_mode)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown threshold mode: {self.threshold_mode!r}"
            ) from e

    @property
    def resolved_algorithm(self) -> Algorithm:
        """Algorithm the config dispatches to, after selector fallback."""
        return Algorithm.from_selector(self.algorithm)

    def replace(self, **changes: Any) -> "NoiseReductionConfig":
        """Return a validated copy with the given fields changed."""
        return dataclasses.replace(self, **changes)


def default_config() -> NoiseReductionConfig:
    """Default configuration: Wiener filter at 80% strength, 1024/512 frames."""
    return NoiseReductionConfig(
        algorithm=Algorithm.WIENER_FILTER,
        strength=0.8,
        preserve_transients=True,
        adaptive_mode=True,
        real_time_mode=False,
        frame_size=1024,
        hop_size=512,
        smoothing_factor=0.98,
        noise_learning_duration=2.0,
    )


@dataclass
class QualityMetrics:
    """Quantitative comparison of original and processed audio."""

    snr_improvement: float  # dB, profile-relative
    spectral_flatness: float  # 0 (tonal) to 1 (noise-like)
    harmonic_preservation: float  # 0 to 1
    transient_preservation: float  # 0 to 1


@dataclass
class NoiseReductionResult:
    """Result of a noise reduction call."""

    processed_audio: np.ndarray  # single reconstructed channel
    reduction_applied: float  # dB
    artifact_level: float  # 0 to 1
    processing_time: float  # milliseconds
    quality_metrics: QualityMetrics
    noise_profile: Optional[NoiseProfile] = None
