"""Windowed radix-2 FFT engine for fixed-size real frames."""

import numpy as np
from scipy.signal import windows

from .exceptions import ConfigurationError, ValidationError
from .models import is_power_of_two


class FFTEngine:
    """Forward and inverse transform of real frames of a fixed power-of-two size.

    The forward transform applies a symmetric Hann window and returns the
    ``frame_size // 2`` bin half spectrum as magnitude and phase. The half
    spectrum uses the packed real layout: bin 0 carries the DC term in its
    real part and the Nyquist term in its imaginary part, so no information
    is lost and ``inverse`` reconstructs the windowed frame exactly.
    """

    def __init__(self, frame_size: int) -> None:
        """Initialize the engine and precompute its tables.

        Args:
            frame_size: Samples per frame, a power of two

        Raises:
            ConfigurationError: If frame_size is not a power of two
        """
        if not is_power_of_two(frame_size) or frame_size < 2:
            raise ConfigurationError(
                f"FFT frame size must be a power of two, got {frame_size}"
            )

        self.frame_size = int(frame_size)
        self.bin_count = self.frame_size // 2
        self.window = windows.hann(self.frame_size, sym=True)

        # Twiddle factors e^{-2*pi*i*k/N} for k < N/2
        angles = -2.0 * np.pi * np.arange(self.bin_count) / self.frame_size
        self._cos_table = np.cos(angles)
        self._sin_table = np.sin(angles)

        self._bit_reversed = self._bit_reversal_permutation(self.frame_size)

    @staticmethod
    def _bit_reversal_permutation(size: int) -> np.ndarray:
        bits = size.bit_length() - 1
        indices = np.arange(size)
        reversed_indices = np.zeros(size, dtype=np.intp)
        for bit in range(bits):
            reversed_indices |= ((indices >> bit) & 1) << (bits - 1 - bit)
        return reversed_indices

    def _transform(self, data: np.ndarray, inverse: bool = False) -> np.ndarray:
        """Iterative Cooley-Tukey transform, unscaled.

        Args:
            data: Complex input of length frame_size
            inverse: Use conjugated twiddles

        Returns:
            Complex spectrum (or time signal times frame_size when inverse)
        """
        buffer = data[self._bit_reversed].astype(np.complex128)
        sign = -1.0 if inverse else 1.0

        size = 2
        while size <= self.frame_size:
            half = size // 2
            step = self.frame_size // size
            twiddle = (
                self._cos_table[::step][:half] + 1j * sign * self._sin_table[::step][:half]
            )

            blocks = buffer.reshape(-1, size)
            even = blocks[:, :half].copy()
            odd = blocks[:, half:] * twiddle
            blocks[:, :half] = even + odd
            blocks[:, half:] = even - odd

            size *= 2

        return buffer

    def forward(
        self, frame: np.ndarray, apply_window: bool = True
    ) -> tuple[np.ndarray, np.ndarray]:
        """Transform a real frame into its half spectrum.

        Args:
            frame: Up to frame_size real samples; shorter frames are zero padded
            apply_window: Apply the Hann analysis window first

        Returns:
            Tuple of (magnitude, phase), each of length frame_size // 2
        """
        samples = np.asarray(frame, dtype=np.float64).ravel()
        if len(samples) > self.frame_size:
            raise ValidationError(
                f"Frame has {len(samples)} samples, engine frame size is {self.frame_size}"
            )

        buffer = np.zeros(self.frame_size)
        buffer[: len(samples)] = samples
        if apply_window:
            buffer *= self.window

        spectrum = self._transform(buffer)

        packed = spectrum[: self.bin_count].copy()
        packed[0] = complex(spectrum[0].real, spectrum[self.bin_count].real)

        return np.abs(packed), np.angle(packed)

    def inverse(self, magnitude: np.ndarray, phase: np.ndarray) -> np.ndarray:
        """Reconstruct a real frame from a half spectrum.

        Args:
            magnitude: Per-bin magnitude, length frame_size // 2
            phase: Per-bin phase in radians, same length

        Returns:
            frame_size real samples (still carrying the analysis window)
        """
        magnitude = np.asarray(magnitude, dtype=np.float64)
        phase = np.asarray(phase, dtype=np.float64)
        if len(magnitude) != self.bin_count or len(phase) != self.bin_count:
            raise ValidationError(
                f"Expected {self.bin_count} bins, got {len(magnitude)} magnitudes "
                f"and {len(phase)} phases"
            )

        packed = magnitude * np.exp(1j * phase)

        # Rebuild the conjugate-symmetric full spectrum
        spectrum = np.zeros(self.frame_size, dtype=np.complex128)
        spectrum[0] = packed[0].real
        spectrum[self.bin_count] = packed[0].imag
        spectrum[1 : self.bin_count] = packed[1:]
        spectrum[self.bin_count + 1 :] = np.conj(packed[1:][::-1])

        return self._transform(spectrum, inverse=True).real / self.frame_size

    def bin_frequencies(self, sample_rate: int) -> np.ndarray:
        """Centre frequency in Hz of each half-spectrum bin."""
        return np.arange(self.bin_count) * sample_rate / self.frame_size
