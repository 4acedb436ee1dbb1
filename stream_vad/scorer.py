"""
Window scorers for the detection pipeline.

A scorer takes one fixed-size window plus the recurrent state carried over
from the previous window and returns a speech probability together with the
updated state. ``SileroOnnxScorer`` runs the Silero VAD ONNX graph through
ONNX Runtime; tests substitute their own ``Scorer`` with fixed probabilities.

Example usage:
    >>> import numpy as np
    >>> from stream_vad.scorer import RecurrentState, SileroOnnxScorer
    >>> scorer = SileroOnnxScorer("models/silero_vad.onnx")
    >>> state = RecurrentState.zeros()
    >>> result = scorer.score(np.zeros(512, dtype=np.float32), 16000, state)
    >>> state = result.state
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import numpy as np
import onnxruntime as ort

from stream_vad.config.window_config import BATCH_SIZE, HIDDEN_DIM, NUM_LAYERS
from stream_vad.errors import ScoringError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecurrentState:
    """Hidden and cell tensors of the scorer's LSTM, shape (layers, batch, hidden)."""

    h: np.ndarray
    c: np.ndarray

    @classmethod
    def zeros(cls, batch_size: int = BATCH_SIZE) -> "RecurrentState":
        shape = (NUM_LAYERS, batch_size, HIDDEN_DIM)
        return cls(
            h=np.zeros(shape, dtype=np.float32),
            c=np.zeros(shape, dtype=np.float32),
        )

    @property
    def shape(self) -> tuple:
        return self.h.shape

    def is_zero(self) -> bool:
        return not self.h.any() and not self.c.any()


@dataclass(frozen=True)
class ScoreResult:
    probability: float
    state: RecurrentState
    process_time_ms: float = 0.0


class Scorer(ABC):
    """Abstract base class for window scorers."""

    @abstractmethod
    def score(
        self,
        window: np.ndarray,
        sample_rate: int,
        state: RecurrentState,
    ) -> ScoreResult:
        """
        Score one window.

        Args:
            window: float32 samples of length window_sample_nums
            sample_rate: Sample rate of the window in Hz
            state: Recurrent state returned by the previous call

        Returns:
            ScoreResult with the speech probability and the new state

        Raises:
            ScoringError: If the model cannot produce output
        """
        raise NotImplementedError


class SileroOnnxScorer(Scorer):
    """
    Silero VAD (v4 graph) running on ONNX Runtime.

    The graph takes ``input`` (batch, samples), ``sr`` (int64 scalar) and the
    LSTM state ``h``/``c``, and returns ``output``, ``hn`` and ``cn``.
    """

    INPUT_NAMES = ("input", "sr", "h", "c")
    OUTPUT_NAMES = ["output", "hn", "cn"]
    THREAD_COUNT_LIMIT = 10

    def __init__(
        self,
        model_path: str | Path,
        thread_count: int = 4,
        providers: Optional[List[str]] = None,
        session=None,
    ):
        """
        Initialize the scorer.

        Args:
            model_path: Path to the Silero VAD ``.onnx`` file
            thread_count: Intra-op threads for ONNX Runtime (capped at 10)
            providers: Execution providers (default: CPU only)
            session: Pre-built inference session; skips loading model_path
        """
        self.model_path = Path(model_path)
        self.thread_count = max(1, min(thread_count, self.THREAD_COUNT_LIMIT))
        self.providers = providers or ["CPUExecutionProvider"]

        if session is not None:
            self.session = session
            return

        if not self.model_path.exists():
            raise FileNotFoundError(f"VAD model not found: {self.model_path}")

        logger.info(f"Loading Silero VAD model from {self.model_path}")
        try:
            options = ort.SessionOptions()
            options.log_severity_level = 2  # warning
            options.intra_op_num_threads = self.thread_count
            self.session = ort.InferenceSession(
                str(self.model_path),
                sess_options=options,
                providers=self.providers,
            )
        except Exception as e:
            raise RuntimeError(f"Failed to create ONNX session: {e}") from e
        logger.info(
            "Silero VAD ready (threads=%d, providers=%s)",
            self.thread_count,
            self.providers,
        )

    def score(
        self,
        window: np.ndarray,
        sample_rate: int,
        state: RecurrentState,
    ) -> ScoreResult:
        if window.ndim != 1:
            raise ScoringError(f"Expected 1-D window, got shape {window.shape}")

        inputs = {
            "input": window.astype(np.float32, copy=False)[np.newaxis, :],
            "sr": np.array(sample_rate, dtype=np.int64),
            "h": state.h,
            "c": state.c,
        }

        start = time.perf_counter()
        try:
            outputs = self.session.run(self.OUTPUT_NAMES, inputs)
        except Exception as e:
            raise ScoringError(f"ONNX inference failed: {e}") from e
        elapsed_ms = (time.perf_counter() - start) * 1000

        if outputs is None or len(outputs) != len(self.OUTPUT_NAMES):
            raise ScoringError("Model did not return output, hn and cn")
        output, hn, cn = outputs
        if output is None or hn is None or cn is None:
            raise ScoringError("hn or cn missing from model output")

        flat = np.asarray(output, dtype=np.float32).reshape(-1)
        if flat.size == 0:
            raise ScoringError("Model returned an empty probability tensor")

        logger.debug("Scored window in %.2f ms", elapsed_ms)
        return ScoreResult(
            probability=float(flat[0]),
            state=RecurrentState(
                h=np.asarray(hn, dtype=np.float32),
                c=np.asarray(cn, dtype=np.float32),
            ),
            process_time_ms=elapsed_ms,
        )
