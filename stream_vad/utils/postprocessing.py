"""
Post-processing of per-window VAD probabilities into speech segments.

Segmentation is a single forward pass of a hysteresis state machine:

- speech starts when a window reaches ``threshold``
- a candidate end is marked when a window drops below
  ``threshold - 0.15`` and confirmed after ``min_silence_duration_ms``
- segments running past ``max_speech_duration_s`` are split, preferably at
  the last silence that lasted at least 98 ms
- segments not longer than ``min_speech_duration_ms`` are dropped

followed by one padding pass that widens every segment by ``speech_pad_ms``
and splits gaps too short for two pads evenly between neighbours.

All positions are sample indices. A window's position is
``window_sample_nums * index``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

from stream_vad.config.window_config import (
    MIN_SILENCE_AT_MAX_SPEECH_S,
    NEG_THRESHOLD_OFFSET,
    SAMPLE_RATE,
    WINDOW_SAMPLES,
)
from stream_vad.types import ScoredWindow, Segment

ProbabilityLike = Union[ScoredWindow, float]


@dataclass(frozen=True)
class SegmenterParams:
    """Thresholds for one segmentation call, durations already in samples."""

    window_sample_nums: int
    threshold: float
    neg_threshold: float
    min_speech_samples: int
    max_speech_samples: int
    min_silence_samples: int
    min_silence_samples_at_max_speech: int
    speech_pad_samples: int

    @classmethod
    def from_durations(
        cls,
        sample_rate: int = SAMPLE_RATE,
        window_sample_nums: int = WINDOW_SAMPLES,
        threshold: float = 0.5,
        min_speech_duration_ms: int = 250,
        max_speech_duration_s: float = 30,
        min_silence_duration_ms: int = 100,
        speech_pad_ms: int = 30,
    ) -> "SegmenterParams":
        """
        Convert user-facing durations into integer sample counts.

        Args:
            sample_rate: Sample rate in Hz
            window_sample_nums: Samples per scored window
            threshold: Speech probability threshold
            min_speech_duration_ms: Segments must be longer than this to be kept
            max_speech_duration_s: Segments longer than this are split
            min_silence_duration_ms: Silence needed to close a segment
            speech_pad_ms: Padding added on each side of a segment

        Returns:
            SegmenterParams
        """
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        if window_sample_nums <= 0:
            raise ValueError(
                f"window_sample_nums must be positive, got {window_sample_nums}"
            )
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1], got {threshold}")
        for name, value in (
            ("min_speech_duration_ms", min_speech_duration_ms),
            ("max_speech_duration_s", max_speech_duration_s),
            ("min_silence_duration_ms", min_silence_duration_ms),
            ("speech_pad_ms", speech_pad_ms),
        ):
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

        return cls(
            window_sample_nums=window_sample_nums,
            threshold=threshold,
            neg_threshold=threshold - NEG_THRESHOLD_OFFSET,
            min_speech_samples=int(sample_rate * min_speech_duration_ms / 1000),
            max_speech_samples=int(sample_rate * max_speech_duration_s),
            min_silence_samples=int(sample_rate * min_silence_duration_ms / 1000),
            min_silence_samples_at_max_speech=int(
                sample_rate * MIN_SILENCE_AT_MAX_SPEECH_S
            ),
            speech_pad_samples=int(sample_rate * speech_pad_ms / 1000),
        )


@dataclass(frozen=True)
class SegmenterState:
    """
    State carried from one window to the next.

    ``temp_end``, ``prev_end`` and ``next_start`` use 0 for "unset".
    ``current_start`` is only meaningful while ``triggered``.
    """

    triggered: bool = False
    current_start: int = 0
    temp_end: int = 0
    prev_end: int = 0
    next_start: int = 0


def step(
    state: SegmenterState,
    params: SegmenterParams,
    index: int,
    probability: float,
) -> Tuple[SegmenterState, Tuple[Segment, ...]]:
    """
    Advance the segmentation state machine by one window.

    Args:
        state: State after the previous window
        params: Segmentation thresholds
        index: Window index
        probability: Speech probability of the window

    Returns:
        Tuple of (new_state, segments closed by this window), before padding
    """
    pos = params.window_sample_nums * index
    is_speech = probability >= params.threshold

    triggered = state.triggered
    start = state.current_start
    temp_end = state.temp_end
    prev_end = state.prev_end
    next_start = state.next_start
    emitted: List[Segment] = []

    if is_speech and temp_end != 0:
        # speech resumed, drop the pending end
        temp_end = 0
        if next_start < prev_end:
            next_start = pos

    if is_speech and not triggered:
        return SegmenterState(True, pos, temp_end, prev_end, next_start), ()

    if triggered and pos - start > params.max_speech_samples:
        if prev_end != 0:
            emitted.append(Segment(start, prev_end))
            if next_start < prev_end:
                triggered = False
                start = 0
            else:
                start = next_start
            prev_end = next_start = temp_end = 0
        else:
            emitted.append(Segment(start, pos))
            return SegmenterState(), tuple(emitted)

    if probability < params.neg_threshold and triggered:
        if temp_end == 0:
            temp_end = pos
        if pos - temp_end > params.min_silence_samples_at_max_speech:
            prev_end = temp_end
        if pos - temp_end >= params.min_silence_samples:
            if temp_end - start > params.min_speech_samples:
                emitted.append(Segment(start, temp_end))
            return SegmenterState(), tuple(emitted)

    return (
        SegmenterState(triggered, start, temp_end, prev_end, next_start),
        tuple(emitted),
    )


def finalize(
    state: SegmenterState,
    params: SegmenterParams,
    total_samples: int,
) -> Tuple[Segment, ...]:
    """Close a segment still open at the end of the buffer."""
    if state.triggered and total_samples - state.current_start > params.min_speech_samples:
        return (Segment(state.current_start, total_samples),)
    return ()


def pad_segments(
    segments: Sequence[Segment],
    speech_pad_samples: int,
    total_samples: int,
) -> List[Segment]:
    """
    Widen segments by the speech pad without letting neighbours overlap.

    Gaps shorter than two pads are split evenly between the two neighbours.

    Args:
        segments: Raw segments sorted by start
        speech_pad_samples: Padding in samples
        total_samples: Buffer length, the upper bound for any end

    Returns:
        New list of padded segments
    """
    bounds = [[seg.start, seg.end] for seg in segments]
    last = len(bounds) - 1

    for i, bound in enumerate(bounds):
        if i == 0:
            bound[0] = max(0, bound[0] - speech_pad_samples)

        if i != last:
            following = bounds[i + 1]
            gap = following[0] - bound[1]
            if gap < 2 * speech_pad_samples:
                bound[1] += gap // 2
                following[0] = max(0, following[0] - gap // 2)
            else:
                bound[1] = min(total_samples, bound[1] + speech_pad_samples)
                following[0] = max(0, following[0] - speech_pad_samples)
        else:
            bound[1] = min(total_samples, bound[1] + speech_pad_samples)

    return [Segment(start, end) for start, end in bounds]


def _probability(item: ProbabilityLike) -> float:
    if isinstance(item, ScoredWindow):
        return item.probability
    return float(item)


def extract_segments(
    probabilities: Iterable[ProbabilityLike],
    total_samples: int,
    params: SegmenterParams,
) -> List[Segment]:
    """
    Run the state machine over ordered probabilities, without padding.

    Args:
        probabilities: ScoredWindow or float per window, in window order
        total_samples: Buffer length in samples
        params: Segmentation thresholds

    Returns:
        Raw segments sorted by start
    """
    state = SegmenterState()
    speeches: List[Segment] = []

    for i, item in enumerate(probabilities):
        state, closed = step(state, params, i, _probability(item))
        speeches.extend(closed)

    speeches.extend(finalize(state, params, total_samples))
    return speeches


def segment_probabilities(
    probabilities: Iterable[ProbabilityLike],
    total_samples: int,
    sample_rate: int = SAMPLE_RATE,
    window_sample_nums: int = WINDOW_SAMPLES,
    threshold: float = 0.5,
    min_speech_duration_ms: int = 250,
    max_speech_duration_s: float = 30,
    min_silence_duration_ms: int = 100,
    speech_pad_ms: int = 30,
) -> List[Segment]:
    """
    Complete segmentation pipeline for VAD probabilities.

    Args:
        probabilities: ScoredWindow or float per window, in window order
        total_samples: Buffer length in samples
        sample_rate: Sample rate in Hz
        window_sample_nums: Samples per window
        threshold: Speech probability threshold
        min_speech_duration_ms: Minimum kept segment length
        max_speech_duration_s: Maximum segment length before splitting
        min_silence_duration_ms: Silence needed to end a segment
        speech_pad_ms: Padding added to each side

    Returns:
        Padded segments sorted by start
    """
    params = SegmenterParams.from_durations(
        sample_rate=sample_rate,
        window_sample_nums=window_sample_nums,
        threshold=threshold,
        min_speech_duration_ms=min_speech_duration_ms,
        max_speech_duration_s=max_speech_duration_s,
        min_silence_duration_ms=min_silence_duration_ms,
        speech_pad_ms=speech_pad_ms,
    )
    speeches = extract_segments(probabilities, total_samples, params)
    return pad_segments(speeches, params.speech_pad_samples, total_samples)


def segments_to_seconds(
    segments: Iterable[Segment],
    sample_rate: int = SAMPLE_RATE,
) -> list[tuple[float, float]]:
    """Convert sample segments into (start_time, end_time) tuples in seconds."""
    return [(seg.start / sample_rate, seg.end / sample_rate) for seg in segments]
