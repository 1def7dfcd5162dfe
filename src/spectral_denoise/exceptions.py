"""Custom exceptions for spectral noise reduction."""

from typing import Optional


class NoiseReductionError(Exception):
    """Base exception for noise reduction errors."""

    pass


class ConfigurationError(NoiseReductionError):
    """Exception raised for structurally invalid engine or frame configuration."""

    pass


class ValidationError(NoiseReductionError):
    """Exception raised when input frames or profiles are inconsistent."""

    pass


class ProfileNotFoundError(ValidationError):
    """Exception raised when a noise profile id is not registered."""

    pass


class ProcessingError(NoiseReductionError):
    """Exception raised when any stage of a processing call fails.

    The original exception is available as ``cause`` and is also chained
    as ``__cause__``.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause
