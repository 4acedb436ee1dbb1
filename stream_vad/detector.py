"""
Voice activity detector: the public entry point of the package.

Example usage:
    >>> import numpy as np
    >>> from stream_vad.detector import VoiceActivityDetector
    >>> detector = VoiceActivityDetector()
    >>> wav = np.zeros(16000, dtype=np.float32)  # 1 second at 16kHz
    >>> probs = detector.detect_chunks(wav)
    >>> segments = detector.detect_segments(wav, threshold=0.5)

Each detector owns its recurrent state and detection mode. Use one instance
per audio stream; instances can run in separate threads.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

import numpy as np

from stream_vad.config import load_config, resolve_path
from stream_vad.config.window_config import SAMPLE_RATE, WINDOW_SAMPLES
from stream_vad.errors import DetectionError, FormatError, ScoringError
from stream_vad.scan import scan_windows
from stream_vad.scorer import Scorer, SileroOnnxScorer
from stream_vad.state import RecurrentStateTracker
from stream_vad.types import AudioBuffer, DetectMode, ScoredWindow, Segment
from stream_vad.utils.postprocessing import (
    SegmenterParams,
    extract_segments,
    pad_segments,
)

logger = logging.getLogger(__name__)

BufferLike = Union[AudioBuffer, np.ndarray]


class VoiceActivityDetector:
    """
    Detects speech in mono float32 audio at a fixed sample rate.

    ``detect_chunks`` treats every buffer as independent audio.
    ``detect_streaming`` carries recurrent state from one call to the next
    so consecutive buffers of a live feed are scored with context.
    """

    def __init__(
        self,
        scorer: Optional[Scorer] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the detector.

        Args:
            scorer: Window scorer. If None, a SileroOnnxScorer is built from
                the ``model`` section of the config on first use.
            config: Configuration dictionary (default: load_config())
        """
        self.config = config if config is not None else load_config()
        audio_config = self.config.get("audio", {})
        self.sample_rate = int(audio_config.get("sample_rate", SAMPLE_RATE))

        self._scorer = scorer
        self._tracker = RecurrentStateTracker()
        self._mode = DetectMode.chunk()

    @property
    def scorer(self) -> Scorer:
        if self._scorer is None:
            model_config = self.config.get("model", {})
            self._scorer = SileroOnnxScorer(
                model_path=resolve_path(model_config.get("path", "models/silero_vad.onnx")),
                thread_count=int(model_config.get("thread_count", 4)),
                providers=model_config.get("providers"),
            )
        return self._scorer

    @property
    def mode(self) -> DetectMode:
        return self._mode

    @property
    def tracker(self) -> RecurrentStateTracker:
        return self._tracker

    def reset_state(self) -> None:
        """Zero the recurrent state and fall back to chunk mode."""
        self._mode = DetectMode.chunk()
        self._tracker.reset()

    def detect_chunks(
        self,
        buffer: BufferLike,
        window_sample_nums: int = WINDOW_SAMPLES,
    ) -> List[ScoredWindow]:
        """
        Score a buffer as one independent chunk.

        Args:
            buffer: AudioBuffer, or a 1-D float32 array at the detector's rate
            window_sample_nums: Samples per window (default: 512)

        Returns:
            One ScoredWindow per window

        Raises:
            DetectionError: On a format mismatch or scoring failure
        """
        self._check_window(window_sample_nums)
        samples = self._validated_samples(buffer)
        self.reset_state()
        return self._scan(samples, window_sample_nums)

    def detect_streaming(
        self,
        buffer: BufferLike,
        window_sample_nums: int = WINDOW_SAMPLES,
    ) -> List[ScoredWindow]:
        """
        Score the next buffer of a continuous stream.

        Recurrent state from the previous call is kept unless the detector
        was not already streaming with the same ``window_sample_nums``.
        Window positions restart at 0 for every buffer.

        Raises:
            DetectionError: On a format mismatch or scoring failure
        """
        self._check_window(window_sample_nums)
        samples = self._validated_samples(buffer)

        expected = DetectMode.stream(window_sample_nums)
        if self._mode != expected:
            logger.debug("Switching detect mode %s -> %s", self._mode, expected)
            self._mode = expected
            self._tracker.reset()

        return self._scan(samples, window_sample_nums)

    def detect_segments(
        self,
        buffer: BufferLike,
        threshold: float = 0.5,
        min_speech_duration_ms: int = 250,
        max_speech_duration_s: float = 30,
        min_silence_duration_ms: int = 100,
        speech_pad_ms: int = 30,
        window_sample_nums: int = WINDOW_SAMPLES,
    ) -> List[Segment]:
        """
        Detect speech segments in a buffer.

        Args:
            buffer: AudioBuffer, or a 1-D float32 array at the detector's rate
            threshold: Speech probability threshold (0-1)
            min_speech_duration_ms: Shorter segments are discarded
            max_speech_duration_s: Longer segments are split
            min_silence_duration_ms: Silence needed to end a segment
            speech_pad_ms: Padding added to each side of a segment
            window_sample_nums: Samples per window

        Returns:
            Segments in samples, sorted by start

        Raises:
            DetectionError: On a format mismatch or scoring failure
        """
        params = SegmenterParams.from_durations(
            sample_rate=self.sample_rate,
            window_sample_nums=window_sample_nums,
            threshold=threshold,
            min_speech_duration_ms=min_speech_duration_ms,
            max_speech_duration_s=max_speech_duration_s,
            min_silence_duration_ms=min_silence_duration_ms,
            speech_pad_ms=speech_pad_ms,
        )

        scored = self.detect_chunks(buffer, window_sample_nums=window_sample_nums)
        total_samples = scored[-1].end + 1 if scored else 0

        speeches = extract_segments(scored, total_samples, params)
        segments = pad_segments(speeches, params.speech_pad_samples, total_samples)
        logger.info(
            f"Detected {len(segments)} speech segments in {total_samples} samples"
        )
        return segments

    def _scan(self, samples: np.ndarray, window_sample_nums: int) -> List[ScoredWindow]:
        try:
            return scan_windows(
                samples,
                window_sample_nums,
                self.scorer,
                self._tracker,
                sample_rate=self.sample_rate,
            )
        except ScoringError as e:
            raise DetectionError(f"Scoring failed: {e}") from e

    def _validated_samples(self, buffer: BufferLike) -> np.ndarray:
        try:
            return self._check_audio_format(buffer)
        except FormatError as e:
            raise DetectionError(f"Unsupported audio format: {e}") from e

    def _check_audio_format(self, buffer: BufferLike) -> np.ndarray:
        if isinstance(buffer, np.ndarray):
            buffer = AudioBuffer(samples=buffer, sample_rate=self.sample_rate)
        if not isinstance(buffer, AudioBuffer):
            raise FormatError(
                f"Expected AudioBuffer or numpy array, got {type(buffer).__name__}"
            )

        if buffer.sample_rate != self.sample_rate:
            raise FormatError(
                f"Sample rate {buffer.sample_rate} != {self.sample_rate}"
            )
        if buffer.samples.ndim not in (1, 2) or buffer.channels != 1:
            raise FormatError(
                f"Expected mono audio, got shape {buffer.samples.shape}"
            )
        if buffer.dtype != np.float32:
            raise FormatError(f"Expected float32 samples, got {buffer.dtype}")

        return buffer.samples.reshape(-1)

    @staticmethod
    def _check_window(window_sample_nums: int) -> None:
        if window_sample_nums <= 0:
            raise ValueError(
                f"window_sample_nums must be positive, got {window_sample_nums}"
            )
