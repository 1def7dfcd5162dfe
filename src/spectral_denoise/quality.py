"""Post-hoc quality assessment of processed audio."""

from typing import Optional

import numpy as np
from scipy.stats import gmean

from .config import (
    ARTIFACT_NORMALIZATION,
    DEFAULT_SAMPLE_RATE,
    EPSILON,
    NOISE_DOMINANCE_FACTOR,
    QUALITY_ANALYSIS_WINDOW,
    TRANSIENT_ENERGY_RATIO,
    TRANSIENT_HOP,
    TRANSIENT_TOLERANCE_SEC,
    TRANSIENT_WINDOW,
)
from .exceptions import ValidationError
from .fft import FFTEngine
from .frames import AudioInput, FramePipeline, to_mono
from .models import NoiseProfile, QualityMetrics


class QualityAssessor:
    """Compares original and processed audio.

    All metrics are proxies: SNR is measured against the noise profile, not
    against a clean reference signal.
    """

    def __init__(self, sample_rate: int = DEFAULT_SAMPLE_RATE) -> None:
        """Initialize the assessor.

        Args:
            sample_rate: Sample rate of the audio in Hz
        """
        self.sample_rate = sample_rate
        self._fft = FFTEngine(QUALITY_ANALYSIS_WINDOW)

    def assess(
        self,
        original: AudioInput,
        processed: AudioInput,
        profile: NoiseProfile,
        pipeline: FramePipeline,
        hop_size: int,
    ) -> QualityMetrics:
        """Compute all quality metrics.

        Args:
            original: Input audio, any number of channels
            processed: Processed audio
            profile: Noise profile used for processing
            pipeline: Frame pipeline matching the profile's frame size
            hop_size: Hop used for the SNR analysis frames

        Returns:
            QualityMetrics for the pair
        """
        original_mono = to_mono(original)
        processed_mono = to_mono(processed)

        return QualityMetrics(
            snr_improvement=self.snr_improvement(
                original_mono, processed_mono, profile, pipeline, hop_size
            ),
            spectral_flatness=self.spectral_flatness(processed_mono),
            harmonic_preservation=self.harmonic_preservation(
                original_mono, processed_mono
            ),
            transient_preservation=self.transient_preservation(
                original_mono, processed_mono
            ),
        )

    def snr_improvement(
        self,
        original: np.ndarray,
        processed: np.ndarray,
        profile: NoiseProfile,
        pipeline: FramePipeline,
        hop_size: int,
    ) -> float:
        """SNR gain in dB, measured in the bins the profile marks as noise.

        A bin of an analysis frame is noise-dominated when the original's
        magnitude is at most twice the profile reference
        ``max(fingerprint, noise_floor)``. Each signal's SNR is the power
        outside those bins over the power inside them; the same bin mask is
        used for both signals.
        """
        original_frames = pipeline.analyze(original, hop_size)
        processed_frames = pipeline.analyze(processed, hop_size)
        if not original_frames or len(original_frames) != len(processed_frames):
            return 0.0

        if len(original_frames[0].magnitude) != profile.bin_count:
            raise ValidationError(
                f"Analysis frames have {len(original_frames[0].magnitude)} bins, "
                f"noise profile has {profile.bin_count}"
            )

        original_magnitude = np.stack([frame.magnitude for frame in original_frames])
        processed_magnitude = np.stack([frame.magnitude for frame in processed_frames])

        reference = np.maximum(profile.spectral_fingerprint, profile.noise_floor)
        noise_mask = original_magnitude <= NOISE_DOMINANCE_FACTOR * reference

        return self._masked_snr(processed_magnitude, noise_mask) - self._masked_snr(
            original_magnitude, noise_mask
        )

    @staticmethod
    def _masked_snr(magnitude: np.ndarray, noise_mask: np.ndarray) -> float:
        power = magnitude**2
        signal_power = float(np.sum(power[~noise_mask]))
        noise_power = float(np.sum(power[noise_mask]))
        return 10.0 * np.log10((signal_power + EPSILON) / (noise_power + EPSILON))

    def _window_magnitudes(self, audio: np.ndarray) -> list[np.ndarray]:
        """Magnitude spectra of consecutive non-overlapping analysis windows."""
        size = QUALITY_ANALYSIS_WINDOW
        return [
            self._fft.forward(audio[start : start + size])[0]
            for start in range(0, len(audio) - size + 1, size)
        ]

    def spectral_flatness(
        self, audio: np.ndarray, magnitudes: Optional[list[np.ndarray]] = None
    ) -> float:
        """Mean Wiener entropy (geometric over arithmetic mean) of the spectrum.

        Args:
            audio: Mono samples
            magnitudes: Precomputed window spectra of ``audio``

        Returns:
            0 for silence or pure tones up to 1 for white noise
        """
        if magnitudes is None:
            magnitudes = self._window_magnitudes(audio)
        if not magnitudes:
            return 0.0

        flatness = []
        for magnitude in magnitudes:
            # Bin 0 packs DC and Nyquist, skip it
            bins = np.maximum(magnitude[1:], EPSILON)
            flatness.append(gmean(bins) / (np.mean(bins) + EPSILON))
        return float(np.mean(flatness))

    @staticmethod
    def harmonic_preservation(original: np.ndarray, processed: np.ndarray) -> float:
        """Normalised zero-lag cross-correlation, clamped to [0, 1]."""
        length = min(len(original), len(processed))
        a = original[:length]
        b = processed[:length]

        normalization = np.sqrt(np.sum(a * a) * np.sum(b * b))
        if normalization <= 0:
            return 0.0
        return float(np.clip(np.sum(a * b) / normalization, 0.0, 1.0))

    def detect_transients(self, audio: np.ndarray) -> np.ndarray:
        """Onset times in seconds from an energy-ratio detector.

        An onset is reported at sample ``i`` when the mean energy of the
        window starting at ``i`` exceeds twice that of the window before it.
        """
        onsets = []
        for start in range(TRANSIENT_WINDOW, len(audio) - TRANSIENT_WINDOW, TRANSIENT_HOP):
            previous = np.mean(audio[start - TRANSIENT_WINDOW : start] ** 2)
            current = np.mean(audio[start : start + TRANSIENT_WINDOW] ** 2)
            if current > TRANSIENT_ENERGY_RATIO * (previous + EPSILON):
                onsets.append(start / self.sample_rate)
        return np.asarray(onsets, dtype=np.float64)

    def transient_preservation(self, original: np.ndarray, processed: np.ndarray) -> float:
        """Fraction of original onsets with a processed onset within 10ms."""
        original_onsets = self.detect_transients(original)
        if len(original_onsets) == 0:
            return 1.0

        processed_onsets = self.detect_transients(processed)
        if len(processed_onsets) == 0:
            return 0.0

        distances = np.abs(original_onsets[:, np.newaxis] - processed_onsets[np.newaxis, :])
        preserved = np.any(distances < TRANSIENT_TOLERANCE_SEC, axis=1)
        return float(np.mean(preserved))

    def artifact_level(self, audio: AudioInput) -> float:
        """Spectral discontinuity between adjacent windows, mapped to [0, 1].

        Args:
            audio: Processed audio, any number of channels

        Returns:
            0 for a spectrally steady signal, 1 for heavy frame-to-frame jumps
        """
        magnitudes = self._window_magnitudes(to_mono(audio))
        if len(magnitudes) < 2:
            return 0.0

        differences = [
            np.mean(np.abs(current - previous))
            for previous, current in zip(magnitudes[:-1], magnitudes[1:])
        ]
        return float(min(1.0, np.mean(differences) / ARTIFACT_NORMALIZATION))
