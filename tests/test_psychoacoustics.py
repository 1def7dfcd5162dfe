"""Tests for psychoacoustic scale conversions."""

import numpy as np
import pytest

from spectral_denoise.psychoacoustics import frequency_to_bark


@pytest.mark.unit
class TestPsychoacoustics:
    """Test cases for the Bark scale."""

    def test_bark_scale(self) -> None:
        """0 Hz is 0 Bark and the scale grows monotonically."""
        frequencies = np.array([0.0, 100.0, 1000.0, 4000.0, 16000.0])

        barks = frequency_to_bark(frequencies)

        assert barks[0] == 0.0
        assert np.all(np.diff(barks) > 0)

    def test_bark_reference_points(self) -> None:
        """1 kHz sits near 8.5 Bark and the audible range ends below 25 Bark."""
        assert float(frequency_to_bark(1000.0)) == pytest.approx(8.5, abs=0.2)
        assert float(frequency_to_bark(24000.0)) < 25.0
