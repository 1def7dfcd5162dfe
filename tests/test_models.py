"""Tests for configuration and data models."""

import logging

import numpy as np
import pytest

from spectral_denoise.exceptions import ConfigurationError, ValidationError
from spectral_denoise.models import (
    Algorithm,
    NoiseProfile,
    NoiseReductionConfig,
    SpectralFrame,
    ThresholdMode,
    default_config,
    is_power_of_two,
)


@pytest.mark.unit
class TestNoiseReductionConfig:
    """Test cases for NoiseReductionConfig validation."""

    @pytest.mark.parametrize(("given", "expected"), [(1.5, 1.0), (-0.2, 0.0), (0.3, 0.3)])
    def test_strength_clamped(self, given: float, expected: float) -> None:
        """Strength is clamped into [0, 1] instead of rejected."""
        assert NoiseReductionConfig(strength=given).strength == expected

    def test_smoothing_factor_clamped(self) -> None:
        """Smoothing factor is clamped into [0, 1]."""
        assert NoiseReductionConfig(smoothing_factor=2.0).smoothing_factor == 1.0
        assert NoiseReductionConfig(smoothing_factor=-1.0).smoothing_factor == 0.0

    @pytest.mark.parametrize("frame_size", [700, 0, 1, 1000, -1024])
    def test_invalid_frame_size(self, frame_size: int) -> None:
        """Frame sizes that are not powers of two are structural errors."""
        with pytest.raises(ConfigurationError):
            NoiseReductionConfig(frame_size=frame_size)

    def test_hop_defaults_to_half_frame(self) -> None:
        """A missing hop becomes frame_size / 2."""
        assert NoiseReductionConfig(frame_size=2048).hop_size == 1024
        assert NoiseReductionConfig(frame_size=256, hop_size=0).hop_size == 128

    @pytest.mark.parametrize("hop_size", [-1, 2048])
    def test_invalid_hop(self, hop_size: int) -> None:
        """Hop must lie within the frame."""
        with pytest.raises(ConfigurationError):
            NoiseReductionConfig(frame_size=1024, hop_size=hop_size)

    def test_threshold_mode_from_string(self) -> None:
        """Threshold modes can be given by value."""
        assert NoiseReductionConfig(threshold_mode="hard").threshold_mode is ThresholdMode.HARD

    def test_unknown_threshold_mode(self) -> None:
        """Unknown threshold modes are configuration errors."""
        with pytest.raises(ConfigurationError):
            NoiseReductionConfig(threshold_mode="medium")

    def test_replace_revalidates(self) -> None:
        """replace returns a validated copy."""
        config = NoiseReductionConfig()

        assert config.replace(strength=3.0).strength == 1.0
        assert config.strength == 0.8
        with pytest.raises(ConfigurationError):
            config.replace(frame_size=300)

    def test_default_config(self) -> None:
        """Defaults: Wiener at 0.8 strength over 1024/512 frames."""
        config = default_config()

        assert config.algorithm is Algorithm.WIENER_FILTER
        assert config.strength == 0.8
        assert config.frame_size == 1024
        assert config.hop_size == 512
        assert config.smoothing_factor == 0.98
        assert config.noise_learning_duration == 2.0
        assert config.preserve_transients is True
        assert config.adaptive_mode is True
        assert config.real_time_mode is False

    def test_nonstandard_frame_size_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        """Powers of two outside 512-4096 are accepted with a warning."""
        with caplog.at_level(logging.WARNING, logger="spectral_denoise.models"):
            config = NoiseReductionConfig(frame_size=256)

        assert config.frame_size == 256
        assert any("outside the standard sizes" in r.message for r in caplog.records)

    @pytest.mark.parametrize("frame_size", [512, 1024, 2048, 4096])
    def test_standard_frame_sizes_do_not_warn(
        self, frame_size: int, caplog: pytest.LogCaptureFixture
    ) -> None:
        """The standard sizes pass silently."""
        with caplog.at_level(logging.WARNING, logger="spectral_denoise.models"):
            NoiseReductionConfig(frame_size=frame_size)

        assert not any("outside the standard sizes" in r.message for r in caplog.records)


@pytest.mark.unit
class TestAlgorithmSelector:
    """Test cases for algorithm selector resolution."""

    @pytest.mark.parametrize("algorithm", list(Algorithm))
    def test_known_values_resolve(self, algorithm: Algorithm) -> None:
        """Members and their string values resolve to the member."""
        assert Algorithm.from_selector(algorithm) is algorithm
        assert Algorithm.from_selector(algorithm.value) is algorithm

    @pytest.mark.parametrize("selector", ["spectral", "", None, "WIENER_FILTER"])
    def test_unknown_falls_back(self, selector) -> None:
        """Anything unrecognised selects spectral subtraction."""
        assert Algorithm.from_selector(selector) is Algorithm.SPECTRAL_SUBTRACTION

    def test_config_resolves_lazily(self) -> None:
        """Configs accept unknown selectors and resolve them on use."""
        config = NoiseReductionConfig(algorithm="mystery")

        assert config.algorithm == "mystery"
        assert config.resolved_algorithm is Algorithm.SPECTRAL_SUBTRACTION


@pytest.mark.unit
class TestModelHelpers:
    """Test cases for small model helpers."""

    @pytest.mark.parametrize("value", [1, 2, 512, 4096, np.int64(1024)])
    def test_powers_of_two(self, value: int) -> None:
        """Positive integral powers of two are accepted."""
        assert is_power_of_two(value)

    @pytest.mark.parametrize("value", [0, -2, 3, 700, 1024.0])
    def test_not_powers_of_two(self, value) -> None:
        """Zero, negatives, other integers and floats are rejected."""
        assert not is_power_of_two(value)

    def test_with_magnitude_keeps_phase_and_timing(self) -> None:
        """with_magnitude only swaps the magnitudes."""
        frame = SpectralFrame(
            magnitude=np.ones(4),
            phase=np.arange(4.0),
            frequency=np.arange(4.0) * 10,
            timestamp=0.5,
            offset=24000,
        )

        updated = frame.with_magnitude(np.zeros(4))

        assert updated is not frame
        np.testing.assert_array_equal(updated.magnitude, np.zeros(4))
        assert updated.phase is frame.phase
        assert updated.timestamp == 0.5
        assert updated.offset == 24000
        np.testing.assert_array_equal(frame.magnitude, np.ones(4))


@pytest.mark.unit
class TestNoiseProfile:
    """Test cases for NoiseProfile construction checks."""

    def make_profile(
        self, fingerprint_bins: int, weight_bins: int, frame_size: int
    ) -> NoiseProfile:
        """Flat profile with the given array lengths."""
        return NoiseProfile(
            id="noise_profile_test",
            name="test",
            description="flat",
            spectral_fingerprint=np.ones(fingerprint_bins),
            noise_floor=1.0,
            frequency_weights=np.ones(weight_bins),
            frame_size=frame_size,
        )

    def test_consistent_arrays_accepted(self) -> None:
        """Fingerprint and weights of frame_size / 2 bins are valid."""
        profile = self.make_profile(512, 512, 1024)

        assert profile.bin_count == 512

    def test_weight_length_mismatch_rejected(self) -> None:
        """Weights must cover the same bins as the fingerprint."""
        with pytest.raises(ValidationError):
            self.make_profile(512, 256, 1024)

    def test_frame_size_mismatch_rejected(self) -> None:
        """Both arrays must have frame_size / 2 bins."""
        with pytest.raises(ValidationError):
            self.make_profile(256, 256, 1024)
