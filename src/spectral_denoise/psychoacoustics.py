"""Psychoacoustic frequency scales."""

import numpy as np


def frequency_to_bark(frequency):
    """Convert frequency in Hz to the Bark critical-band scale (Zwicker).

    Works on scalars and numpy arrays alike.
    """
    frequency = np.asarray(frequency, dtype=np.float64)
    return 13.0 * np.arctan(0.00076 * frequency) + 3.5 * np.arctan(
        (frequency / 7500.0) ** 2
    )
