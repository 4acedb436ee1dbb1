"""Exception types raised by the detection pipeline."""

from __future__ import annotations


class StreamVADError(Exception):
    """Base class for all detection pipeline errors."""


class FormatError(StreamVADError):
    """Audio buffer does not match the expected sample rate, channels or dtype."""


class ScoringError(StreamVADError):
    """The scorer failed to produce output for a window."""

    def __init__(self, message: str, window_index: int | None = None):
        super().__init__(message)
        self.window_index = window_index


class DetectionError(StreamVADError):
    """Raised at the public detector boundary; ``__cause__`` holds the original error."""


__all__ = ["StreamVADError", "FormatError", "ScoringError", "DetectionError"]
