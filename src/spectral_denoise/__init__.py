"""Spectral noise reduction: FFT analysis/synthesis, noise profiles and denoising strategies."""

from .algorithms import WienerState, process
from .engine import NoiseReductionEngine
from .exceptions import (
    ConfigurationError,
    NoiseReductionError,
    ProcessingError,
    ProfileNotFoundError,
    ValidationError,
)
from .fft import FFTEngine
from .frames import FramePipeline, as_channels, to_mono
from .interfaces import NoiseProfileStoreInterface, ProgressCallback
from .models import (
    AdaptiveParams,
    Algorithm,
    NoiseProfile,
    NoiseReductionConfig,
    NoiseReductionResult,
    QualityMetrics,
    SpectralFrame,
    ThresholdMode,
    default_config,
)
from .noise_profile import build_noise_profile, critical_band_energies
from .profile_store import NoiseProfileStore
from .quality import QualityAssessor

__version__ = "0.1.0"

__all__ = [
    "AdaptiveParams",
    "Algorithm",
    "ConfigurationError",
    "FFTEngine",
    "FramePipeline",
    "NoiseProfile",
    "NoiseProfileStore",
    "NoiseProfileStoreInterface",
    "NoiseReductionConfig",
    "NoiseReductionEngine",
    "NoiseReductionError",
    "NoiseReductionResult",
    "ProcessingError",
    "ProfileNotFoundError",
    "ProgressCallback",
    "QualityAssessor",
    "QualityMetrics",
    "SpectralFrame",
    "ThresholdMode",
    "ValidationError",
    "WienerState",
    "as_channels",
    "build_noise_profile",
    "critical_band_energies",
    "default_config",
    "process",
    "to_mono",
    "__version__",
]
