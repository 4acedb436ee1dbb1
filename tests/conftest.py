"""Shared fixtures: deterministic scorers that stand in for the ONNX model."""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np
import pytest

from stream_vad.config import load_config
from stream_vad.detector import VoiceActivityDetector
from stream_vad.errors import ScoringError
from stream_vad.scorer import RecurrentState, ScoreResult, Scorer


class ScriptedScorer(Scorer):
    """Returns probabilities from a fixed script and counts calls in the state."""

    def __init__(
        self,
        probabilities: Sequence[float] = (),
        default: float = 0.0,
        fail_at: Optional[int] = None,
    ):
        self.probabilities = list(probabilities)
        self.default = default
        self.fail_at = fail_at
        self.windows: List[np.ndarray] = []
        self.sample_rates: List[int] = []
        self.states: List[RecurrentState] = []

    @property
    def num_calls(self) -> int:
        return len(self.windows)

    def score(self, window, sample_rate, state):
        index = self.num_calls
        self.windows.append(window.copy())
        self.sample_rates.append(sample_rate)
        self.states.append(state)

        if self.fail_at is not None and index == self.fail_at:
            raise ScoringError("scripted failure")

        if index < len(self.probabilities):
            probability = self.probabilities[index]
        else:
            probability = self.default
        return ScoreResult(
            probability=probability,
            state=RecurrentState(h=state.h + 1.0, c=state.c + 1.0),
        )


class ContentScorer(Scorer):
    """Probability depends on window energy and on the carried state."""

    def score(self, window, sample_rate, state):
        energy = float(np.abs(window).mean())
        probability = float(np.clip(energy * 4.0 + 0.05 * np.tanh(state.h.mean()), 0.0, 1.0))
        new_h = (0.9 * state.h + energy).astype(np.float32)
        new_c = (0.5 * state.c + probability).astype(np.float32)
        return ScoreResult(probability=probability, state=RecurrentState(h=new_h, c=new_c))


@pytest.fixture
def scripted_scorer():
    return ScriptedScorer


@pytest.fixture
def content_scorer():
    return ContentScorer()


@pytest.fixture
def default_config():
    return load_config()


@pytest.fixture
def make_detector(default_config):
    def _make(scorer: Scorer) -> VoiceActivityDetector:
        return VoiceActivityDetector(scorer=scorer, config=default_config)
    return _make


@pytest.fixture
def speech_like_audio():
    """Two seconds of 16 kHz audio: quiet, a loud tone burst, quiet."""
    rng = np.random.default_rng(0)
    wav = (rng.standard_normal(32000) * 0.001).astype(np.float32)
    t = np.arange(12000) / 16000
    wav[8000:20000] += (0.3 * np.sin(2 * np.pi * 220 * t)).astype(np.float32)
    return wav
