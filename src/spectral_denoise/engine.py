"""Noise reduction orchestrator."""

import inspect
import time
from collections.abc import Generator
from typing import Optional

from . import algorithms
from .config import (
    DEFAULT_FRAME_SIZE,
    DEFAULT_HOP_DIVISOR,
    DEFAULT_SAMPLE_RATE,
    PROGRESS_ALGORITHM,
    PROGRESS_ANALYSIS,
    PROGRESS_DONE,
    PROGRESS_METRICS,
    PROGRESS_PROFILE,
    PROGRESS_SYNTHESIS,
)
from .exceptions import ProcessingError
from .fft import FFTEngine
from .frames import AudioInput, FramePipeline, as_channels
from .interfaces import NoiseProfileStoreInterface, ProgressCallback
from .logging_utils import get_logger, log_stage
from .models import (
    NoiseProfile,
    NoiseReductionConfig,
    NoiseReductionResult,
    SpectralFrame,
    default_config,
)
from .noise_profile import build_noise_profile, leading_noise_frames
from .profile_store import NoiseProfileStore
from .quality import QualityAssessor

logger = get_logger(__name__)


class NoiseReductionEngine:
    """Runs analysis, denoising, synthesis and quality assessment.

    The engine holds no per-call state. Its only long-lived mutable
    collaborator is the injected profile store, which it never evicts from.
    """

    def __init__(
        self,
        frame_size: int = DEFAULT_FRAME_SIZE,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        profile_store: Optional[NoiseProfileStoreInterface] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            frame_size: Default analysis frame size, a power of two
            sample_rate: Sample rate of processed audio in Hz
            profile_store: Registry of noise profiles; a private in-memory
                store when omitted

        Raises:
            ConfigurationError: If frame_size is not a power of two
        """
        self.frame_size = frame_size
        self.sample_rate = sample_rate
        self.profile_store = profile_store if profile_store is not None else NoiseProfileStore()
        self.quality_assessor = QualityAssessor(sample_rate)

        self._pipelines: dict[int, FramePipeline] = {
            frame_size: FramePipeline(FFTEngine(frame_size), sample_rate)
        }

        logger.info(
            f"Noise reduction engine initialized (frame size {frame_size}, "
            f"sample rate {sample_rate} Hz)"
        )

    def _pipeline(self, frame_size: int) -> FramePipeline:
        """Frame pipeline for ``frame_size``, built on first use."""
        pipeline = self._pipelines.get(frame_size)
        if pipeline is None:
            pipeline = FramePipeline(FFTEngine(frame_size), self.sample_rate)
            self._pipelines[frame_size] = pipeline
        return pipeline

    def _resolve_profile(
        self, frames: list[SpectralFrame], profile_id: Optional[str]
    ) -> NoiseProfile:
        if profile_id is not None:
            profile = self.profile_store.get(profile_id)
            if profile is not None:
                return profile
            logger.warning(
                f"Noise profile {profile_id} not found, learning from leading frames"
            )

        return build_noise_profile(leading_noise_frames(frames), sample_rate=self.sample_rate)

    def _stages(
        self,
        audio: AudioInput,
        config: NoiseReductionConfig,
        profile_id: Optional[str],
    ) -> Generator[int, None, NoiseReductionResult]:
        """Run the processing stages, yielding a checkpoint before each one."""
        start_time = time.perf_counter()

        yield PROGRESS_ANALYSIS
        with log_stage(logger, "analysis"):
            channels = as_channels(audio)
            pipeline = self._pipeline(config.frame_size)
            frames = pipeline.analyze(channels[0], config.hop_size)

        yield PROGRESS_PROFILE
        with log_stage(logger, "profile"):
            profile = self._resolve_profile(frames, profile_id)

        yield PROGRESS_ALGORITHM
        with log_stage(logger, "algorithm"):
            processed_frames = algorithms.process(
                frames,
                profile,
                config,
                algorithms.WienerState.fresh(profile.bin_count),
            )

        yield PROGRESS_SYNTHESIS
        with log_stage(logger, "synthesis"):
            processed_audio = pipeline.synthesize(processed_frames, len(channels[0]))

        yield PROGRESS_METRICS
        with log_stage(logger, "metrics"):
            metrics = self.quality_assessor.assess(
                channels, processed_audio, profile, pipeline, config.hop_size
            )
            artifact_level = self.quality_assessor.artifact_level(processed_audio)

        yield PROGRESS_DONE
        processing_time = (time.perf_counter() - start_time) * 1000

        logger.info(
            f"Processed {len(channels[0])} samples with "
            f"{getattr(config.algorithm, 'value', config.algorithm)} in {processing_time:.1f} ms "
            f"(SNR improvement {metrics.snr_improvement:.2f} dB)"
        )

        return NoiseReductionResult(
            processed_audio=processed_audio,
            reduction_applied=metrics.snr_improvement,
            artifact_level=artifact_level,
            processing_time=processing_time,
            quality_metrics=metrics,
            noise_profile=profile,
        )

    @staticmethod
    def _failure(error: Exception) -> ProcessingError:
        message = f"Noise reduction failed: {error}"
        logger.error(message)
        return ProcessingError(message, cause=error)

    def process(
        self,
        audio: AudioInput,
        config: NoiseReductionConfig,
        profile_id: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> NoiseReductionResult:
        """Denoise audio synchronously.

        Args:
            audio: Float PCM in [-1, 1], mono, ``(channels, samples)`` or a list of channels
            config: Algorithm and framing settings
            profile_id: Stored profile to use; learned from the leading 10%
                of frames when omitted or unknown
            on_progress: Plain callable receiving checkpoint percentages

        Returns:
            NoiseReductionResult with a single processed channel

        Raises:
            ProcessingError: If any stage fails
        """
        stages = self._stages(audio, config, profile_id)
        try:
            percent = next(stages)
            while True:
                if on_progress is not None:
                    on_progress(percent)
                percent = next(stages)
        except StopIteration as done:
            return done.value
        except Exception as e:
            raise self._failure(e) from e

    async def process_audio(
        self,
        audio: AudioInput,
        config: NoiseReductionConfig,
        profile_id: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> NoiseReductionResult:
        """Denoise audio from an event loop.

        Work runs synchronously on the calling thread; the coroutine form only
        lets ``on_progress`` be a coroutine function that is awaited at each
        checkpoint.

        Args:
            audio: Float PCM in [-1, 1], mono, ``(channels, samples)`` or a list of channels
            config: Algorithm and framing settings
            profile_id: Stored profile to use
            on_progress: Callable or coroutine function receiving percentages

        Returns:
            NoiseReductionResult with a single processed channel

        Raises:
            ProcessingError: If any stage fails
        """
        stages = self._stages(audio, config, profile_id)
        try:
            percent = next(stages)
            while True:
                if on_progress is not None:
                    outcome = on_progress(percent)
                    if inspect.isawaitable(outcome):
                        await outcome
                percent = next(stages)
        except StopIteration as done:
            return done.value
        except Exception as e:
            raise self._failure(e) from e

    def create_noise_profile_from_audio(
        self,
        audio: AudioInput,
        name: str,
        description: Optional[str] = None,
        config: Optional[NoiseReductionConfig] = None,
    ) -> NoiseProfile:
        """Learn a profile from every frame of a noise-only recording.

        The profile is returned, not stored; call ``save_noise_profile`` to
        register it.

        Args:
            audio: Noise-only audio; the first channel is analysed
            name: Display name of the profile
            description: Free text description
            config: Framing settings, engine defaults when omitted

        Returns:
            New NoiseProfile

        Raises:
            ValidationError: If the audio is shorter than one frame
        """
        if config is None:
            frame_size, hop_size = self.frame_size, self.frame_size // DEFAULT_HOP_DIVISOR
        else:
            frame_size, hop_size = config.frame_size, config.hop_size

        channels = as_channels(audio)
        frames = self._pipeline(frame_size).analyze(channels[0], hop_size)

        kwargs = {"name": name}
        if description is not None:
            kwargs["description"] = description
        return build_noise_profile(frames, sample_rate=self.sample_rate, **kwargs)

    def save_noise_profile(self, profile: NoiseProfile) -> None:
        """Register a profile in the engine's store."""
        self.profile_store.save(profile)

    def get_noise_profile(self, profile_id: str) -> Optional[NoiseProfile]:
        """Look up a stored profile."""
        return self.profile_store.get(profile_id)

    def get_all_noise_profiles(self) -> list[NoiseProfile]:
        """All stored profiles."""
        return self.profile_store.list()

    def delete_noise_profile(self, profile_id: str) -> bool:
        """Remove a stored profile; True if one was removed."""
        return self.profile_store.delete(profile_id)

    @staticmethod
    def get_default_config() -> NoiseReductionConfig:
        """Default processing configuration."""
        return default_config()
