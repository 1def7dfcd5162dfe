"""Logging utilities with a custom trace level and stage timing."""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

# Custom TRACE level (lower than DEBUG) for per-stage timings
TRACE_LEVEL = 5


def add_trace_level() -> None:
    """Register the TRACE level and a ``Logger.trace`` method."""
    logging.addLevelName(TRACE_LEVEL, "TRACE")

    def trace(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
        """Log a message with severity 'TRACE'."""
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, message, args, **kwargs)

    logging.Logger.trace = trace  # type: ignore[attr-defined]


def get_logger(name: str) -> logging.Logger:
    """Get a logger with trace support."""
    if not hasattr(logging.Logger, "trace"):
        add_trace_level()

    return logging.getLogger(name)


@contextmanager
def log_stage(logger: logging.Logger, stage: str) -> Iterator[None]:
    """Log the wall-clock duration of a processing stage at TRACE level.

    Args:
        logger: Logger to write to
        stage: Human readable stage name
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.trace(f"Stage {stage} finished in {elapsed_ms:.2f} ms")
