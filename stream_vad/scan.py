"""Drives the scorer over every window of a buffer in order."""

from __future__ import annotations

import logging

import numpy as np

from stream_vad.config.window_config import BATCH_SIZE, SAMPLE_RATE
from stream_vad.errors import ScoringError
from stream_vad.scorer import Scorer
from stream_vad.state import RecurrentStateTracker
from stream_vad.types import ScoredWindow
from stream_vad.utils.chunking import divide_into_windows, window_samples

logger = logging.getLogger(__name__)


def scan_windows(
    samples: np.ndarray,
    window_size: int,
    scorer: Scorer,
    tracker: RecurrentStateTracker,
    sample_rate: int = SAMPLE_RATE,
) -> list[ScoredWindow]:
    """
    Score every window of *samples*, threading recurrent state through the tracker.

    Args:
        samples: 1-D float32 buffer
        window_size: Samples per window
        scorer: Window scorer
        tracker: Recurrent state owner for this session
        sample_rate: Sample rate passed to the scorer

    Returns:
        One ScoredWindow per window, in increasing start order

    Raises:
        ScoringError: If any window fails, with ``window_index`` set to the
            failing window; the tracker state is no longer trustworthy until reset.
    """
    windows = divide_into_windows(len(samples), window_size)
    tracker.ensure_state(BATCH_SIZE, sample_rate)

    scored = []
    for i, window in enumerate(windows):
        data = window_samples(samples, window, window_size)
        try:
            result = scorer.score(data, sample_rate, tracker.state)
        except ScoringError as e:
            if e.window_index is None:
                e.window_index = i
            logger.error(
                "Scoring failed at window %d (samples %d-%d), aborting scan",
                i,
                window.start_sample,
                window.end_sample - 1,
            )
            raise
        tracker.update(result.state)
        scored.append(
            ScoredWindow(
                probability=result.probability,
                start=window.start_sample,
                end=window.end_sample - 1,
            )
        )

    logger.debug("Scanned %d windows of %d samples", len(scored), window_size)
    return scored
