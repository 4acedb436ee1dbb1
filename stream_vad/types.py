"""Value types shared across the detection pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from stream_vad.config.window_config import SAMPLE_RATE


@dataclass(frozen=True)
class Window:
    """Half-open sample range ``[start_sample, start_sample + sample_count)``."""

    start_sample: int
    sample_count: int

    @property
    def end_sample(self) -> int:
        return self.start_sample + self.sample_count


@dataclass(frozen=True)
class ScoredWindow:
    """Speech probability for one window; ``end`` is inclusive."""

    probability: float
    start: int
    end: int


@dataclass(frozen=True)
class Segment:
    """One speech region in samples; ``end`` is inclusive."""

    start: int
    end: int

    @property
    def num_samples(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class DetectMode:
    """
    Whether recurrent state survives between detection calls.

    ``CHUNK`` resets before every call. ``STREAM`` keeps state as long as
    ``window_sample_nums`` matches the previous call.
    """

    kind: str
    window_sample_nums: Optional[int] = None

    CHUNK_KIND = "chunk"
    STREAM_KIND = "stream"

    @classmethod
    def chunk(cls) -> "DetectMode":
        return cls(cls.CHUNK_KIND)

    @classmethod
    def stream(cls, window_sample_nums: int) -> "DetectMode":
        return cls(cls.STREAM_KIND, window_sample_nums)

    @property
    def is_stream(self) -> bool:
        return self.kind == self.STREAM_KIND


@dataclass(frozen=True)
class AudioBuffer:
    """
    Sample data tagged with its format.

    Args:
        samples: 1-D array for mono, (frames, channels) otherwise
        sample_rate: Sample rate in Hz
    """

    samples: np.ndarray
    sample_rate: int = SAMPLE_RATE

    @property
    def channels(self) -> int:
        if self.samples.ndim == 1:
            return 1
        return int(self.samples.shape[1])

    @property
    def dtype(self) -> np.dtype:
        return self.samples.dtype

    @property
    def num_samples(self) -> int:
        return int(self.samples.shape[0])


__all__ = ["Window", "ScoredWindow", "Segment", "DetectMode", "AudioBuffer"]
