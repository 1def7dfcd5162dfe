"""Tests for the windowed radix-2 FFT engine."""

import numpy as np
import pytest

from spectral_denoise.exceptions import ConfigurationError, ValidationError
from spectral_denoise.fft import FFTEngine


@pytest.mark.unit
class TestFFTEngine:
    """Test cases for FFTEngine transforms and construction."""

    @pytest.fixture
    def rng(self) -> np.random.Generator:
        """Seeded random generator."""
        return np.random.default_rng(1234)

    @pytest.mark.parametrize("frame_size", [700, 0, 1, 3, 1000, -512])
    def test_non_power_of_two_rejected_at_construction(self, frame_size: int) -> None:
        """Invalid sizes fail when the engine is built, not when it is used."""
        with pytest.raises(ConfigurationError):
            FFTEngine(frame_size)

    def test_tables_have_half_frame_size(self) -> None:
        """Twiddle tables and window are sized from the frame size."""
        engine = FFTEngine(1024)

        assert engine.bin_count == 512
        assert len(engine._cos_table) == 512
        assert len(engine._sin_table) == 512
        assert len(engine.window) == 1024

    def test_window_is_symmetric_hann(self) -> None:
        """The analysis window is 0.5 * (1 - cos(2*pi*i/(N-1)))."""
        engine = FFTEngine(512)
        i = np.arange(512)
        expected = 0.5 * (1 - np.cos(2 * np.pi * i / 511))

        np.testing.assert_allclose(engine.window, expected, atol=1e-12)
        assert engine.window[0] == pytest.approx(0.0, abs=1e-12)
        assert engine.window[-1] == pytest.approx(0.0, abs=1e-12)

    @pytest.mark.parametrize("frame_size", [8, 512, 1024, 2048, 4096])
    def test_round_trip_without_window_is_identity(
        self, frame_size: int, rng: np.random.Generator
    ) -> None:
        """inverse(forward(x)) reproduces x when no window is applied."""
        engine = FFTEngine(frame_size)
        frame = rng.uniform(-1, 1, frame_size)

        magnitude, phase = engine.forward(frame, apply_window=False)
        reconstructed = engine.inverse(magnitude, phase)

        np.testing.assert_allclose(reconstructed, frame, atol=1e-5)

    @pytest.mark.parametrize("frame_size", [512, 1024, 4096])
    def test_round_trip_returns_windowed_frame(
        self, frame_size: int, rng: np.random.Generator
    ) -> None:
        """With the default window the round trip yields window * x."""
        engine = FFTEngine(frame_size)
        frame = rng.uniform(-1, 1, frame_size)

        reconstructed = engine.inverse(*engine.forward(frame))

        np.testing.assert_allclose(reconstructed, engine.window * frame, atol=1e-5)

    def test_forward_matches_reference_spectrum(self, rng: np.random.Generator) -> None:
        """Bins 1..N/2-1 match numpy's real FFT; bin 0 packs DC and Nyquist."""
        engine = FFTEngine(256)
        frame = rng.normal(0, 0.3, 256)
        reference = np.fft.rfft(frame * engine.window)

        magnitude, phase = engine.forward(frame)

        assert len(magnitude) == 128
        assert len(phase) == 128
        np.testing.assert_allclose(magnitude[1:], np.abs(reference[1:128]), atol=1e-9)
        np.testing.assert_allclose(
            np.exp(1j * phase[1:]) * magnitude[1:], reference[1:128], atol=1e-9
        )
        packed = complex(reference[0].real, reference[128].real)
        assert magnitude[0] == pytest.approx(abs(packed), abs=1e-9)

    def test_pure_tone_peaks_at_its_bin(self) -> None:
        """A sinusoid centred on bin 32 puts its energy there."""
        engine = FFTEngine(1024)
        t = np.arange(1024)
        frame = np.sin(2 * np.pi * 32 * t / 1024)

        magnitude, _ = engine.forward(frame)

        assert int(np.argmax(magnitude)) == 32

    def test_short_frame_is_zero_padded(self, rng: np.random.Generator) -> None:
        """Frames shorter than the engine size behave as if zero padded."""
        engine = FFTEngine(64)
        short = rng.normal(size=40)
        padded = np.concatenate([short, np.zeros(24)])

        np.testing.assert_allclose(engine.forward(short)[0], engine.forward(padded)[0])

    def test_oversized_frame_rejected(self) -> None:
        """Frames longer than the engine size raise ValidationError."""
        engine = FFTEngine(64)

        with pytest.raises(ValidationError):
            engine.forward(np.zeros(65))

    def test_inverse_rejects_wrong_bin_count(self) -> None:
        """Inverse requires exactly N/2 magnitudes and phases."""
        engine = FFTEngine(64)

        with pytest.raises(ValidationError):
            engine.inverse(np.zeros(33), np.zeros(33))

    def test_bin_frequencies(self) -> None:
        """Bin k is centred at k * sample_rate / N."""
        engine = FFTEngine(1024)
        frequencies = engine.bin_frequencies(48000)

        assert len(frequencies) == 512
        assert frequencies[0] == 0.0
        assert frequencies[1] == pytest.approx(46.875)
        assert frequencies[-1] == pytest.approx(511 * 46.875)
