"""Tests for the window scan loop."""

from __future__ import annotations

import numpy as np
import pytest

from stream_vad.errors import ScoringError
from stream_vad.scan import scan_windows
from stream_vad.state import RecurrentStateTracker
from stream_vad.types import ScoredWindow


def test_one_scored_window_per_window(scripted_scorer):
    scorer = scripted_scorer([0.1, 0.9, 0.4])
    samples = np.zeros(1100, dtype=np.float32)

    scored = scan_windows(samples, 512, scorer, RecurrentStateTracker())

    assert scored == [
        ScoredWindow(0.1, 0, 511),
        ScoredWindow(0.9, 512, 1023),
        ScoredWindow(0.4, 1024, 1099),
    ]


def test_short_final_window_is_zero_padded(scripted_scorer):
    scorer = scripted_scorer()
    samples = np.ones(1100, dtype=np.float32)

    scan_windows(samples, 512, scorer, RecurrentStateTracker())

    assert [len(w) for w in scorer.windows] == [512, 512, 512]
    last = scorer.windows[-1]
    assert last[:76].all()
    assert not last[76:].any()


def test_state_is_threaded_between_windows(scripted_scorer):
    scorer = scripted_scorer()
    tracker = RecurrentStateTracker()

    scan_windows(np.zeros(512 * 4, dtype=np.float32), 512, scorer, tracker)

    # the scripted scorer adds 1.0 per call
    for i, state in enumerate(scorer.states):
        assert float(state.h[0, 0, 0]) == pytest.approx(i)
    assert float(tracker.state.h[0, 0, 0]) == pytest.approx(4)


def test_sample_rate_is_passed_through(scripted_scorer):
    scorer = scripted_scorer()
    scan_windows(np.zeros(600, dtype=np.float32), 512, scorer, RecurrentStateTracker(), sample_rate=8000)
    assert scorer.sample_rates == [8000, 8000]


def test_empty_buffer(scripted_scorer):
    scorer = scripted_scorer()
    assert scan_windows(np.zeros(0, dtype=np.float32), 512, scorer, RecurrentStateTracker()) == []
    assert scorer.num_calls == 0


def test_scoring_failure_aborts_scan(scripted_scorer):
    scorer = scripted_scorer([0.9] * 10, fail_at=2)

    with pytest.raises(ScoringError, match="scripted failure") as exc_info:
        scan_windows(np.zeros(512 * 5, dtype=np.float32), 512, scorer, RecurrentStateTracker())

    assert scorer.num_calls == 3
    assert exc_info.value.window_index == 2


def test_sample_rate_change_resets_carried_state(scripted_scorer):
    scorer = scripted_scorer()
    tracker = RecurrentStateTracker()
    samples = np.zeros(1024, dtype=np.float32)

    scan_windows(samples, 512, scorer, tracker, sample_rate=16000)
    scan_windows(samples, 512, scorer, tracker, sample_rate=16000)
    assert float(scorer.states[2].h[0, 0, 0]) == pytest.approx(2)

    scan_windows(samples, 512, scorer, tracker, sample_rate=8000)
    assert scorer.states[4].is_zero()
