"""Frame pipeline: STFT-style analysis and overlap-add synthesis."""

from collections.abc import Sequence
from typing import Union

import numpy as np

from .config import DEFAULT_SAMPLE_RATE, WINDOW_COVERAGE_FLOOR
from .exceptions import ConfigurationError, ValidationError
from .fft import FFTEngine
from .models import SpectralFrame

AudioInput = Union[np.ndarray, Sequence[np.ndarray]]


def as_channels(audio: AudioInput) -> list[np.ndarray]:
    """Normalise audio input to a list of 1-D float channels.

    Channels given as a sequence are independent and may differ in length.

    Args:
        audio: 1-D mono samples, a 2-D ``(channels, samples)`` array or a
            sequence of 1-D channels

    Returns:
        List of 1-D float64 arrays, at least one
    """
    if isinstance(audio, np.ndarray):
        if audio.ndim not in (1, 2):
            raise ValidationError(
                f"Audio must be 1-D or (channels, samples), got shape {audio.shape}"
            )
        channels = [audio] if audio.ndim == 1 else list(audio)
    elif len(audio) > 0 and all(np.ndim(sample) == 0 for sample in audio):
        channels = [audio]
    else:
        channels = list(audio)

    channels = [np.asarray(channel, dtype=np.float64) for channel in channels]
    if not channels:
        raise ValidationError("Audio has no channels")
    for index, channel in enumerate(channels):
        if channel.ndim != 1:
            raise ValidationError(
                f"Channel {index} must be 1-D, got shape {channel.shape}"
            )
    return channels


def to_mono(audio: AudioInput) -> np.ndarray:
    """Average all channels into one with the first channel's length.

    Shorter channels count as silence past their end and longer channels are
    truncated.
    """
    channels = as_channels(audio)
    if len(channels) == 1:
        return channels[0]

    length = len(channels[0])
    mixed = np.zeros((len(channels), length))
    for row, channel in zip(mixed, channels):
        usable = min(length, len(channel))
        row[:usable] = channel[:usable]
    return np.mean(mixed, axis=0)


class FramePipeline:
    """Slices a channel into overlapping spectral frames and rebuilds it.

    Analysis drops a final partial window instead of zero padding it, so up
    to ``hop_size - 1`` trailing samples are never analysed and come back as
    silence from synthesis.

    Synthesis relies on overlapping windows. With ``hop_size == frame_size``
    the Hann tapers of neighbouring frames do not overlap, so samples around
    every frame boundary inside the signal fade to zero as well. Hops up to
    3/4 of the frame reconstruct without such gaps.
    """

    def __init__(self, fft_engine: FFTEngine, sample_rate: int = DEFAULT_SAMPLE_RATE) -> None:
        """Initialize the pipeline.

        Args:
            fft_engine: Transform used for every frame
            sample_rate: Sample rate of the channels in Hz
        """
        self.fft = fft_engine
        self.sample_rate = sample_rate
        self.frame_size = fft_engine.frame_size
        self._frequencies = fft_engine.bin_frequencies(sample_rate)
        self._frequencies.setflags(write=False)

    def analyze(self, channel: np.ndarray, hop_size: int) -> list[SpectralFrame]:
        """Split a channel into windowed spectral frames.

        Args:
            channel: 1-D samples
            hop_size: Samples between consecutive frame starts

        Returns:
            Frames in time order
        """
        if hop_size <= 0 or hop_size > self.frame_size:
            raise ConfigurationError(
                f"Hop size must be between 1 and {self.frame_size}, got {hop_size}"
            )

        channel = np.asarray(channel, dtype=np.float64)
        frames: list[SpectralFrame] = []

        for start in range(0, len(channel) - self.frame_size + 1, hop_size):
            magnitude, phase = self.fft.forward(channel[start : start + self.frame_size])
            frames.append(
                SpectralFrame(
                    magnitude=magnitude,
                    phase=phase,
                    frequency=self._frequencies,
                    timestamp=start / self.sample_rate,
                    offset=start,
                )
            )

        return frames

    def synthesize(self, frames: Sequence[SpectralFrame], original_length: int) -> np.ndarray:
        """Rebuild a channel from frames by weighted overlap-add.

        Each frame is inverse transformed and summed into the output at its
        offset. Coverage is accumulated as the analysis window weight of every
        frame touching a sample, and the sum is divided by it, which removes
        the window and overlap gain for any hop. Samples no frame covers stay
        zero.

        Args:
            frames: Processed frames
            original_length: Length of the output channel

        Returns:
            1-D reconstructed channel
        """
        output = np.zeros(original_length)
        coverage = np.zeros(original_length)
        window = self.fft.window

        for frame in frames:
            time_frame = self.fft.inverse(frame.magnitude, frame.phase)

            start = frame.offset
            end = min(start + self.frame_size, original_length)
            if end <= start:
                continue

            output[start:end] += time_frame[: end - start]
            coverage[start:end] += window[: end - start]

        covered = coverage > 0
        output[covered] /= np.maximum(coverage[covered], WINDOW_COVERAGE_FLOOR)

        return output
