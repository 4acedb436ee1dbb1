"""
Streaming Voice Activity Detection

Scores fixed-size audio windows with a stateful recurrent VAD model and turns
the per-window speech probabilities into padded speech segments.
"""

from stream_vad.detector import VoiceActivityDetector
from stream_vad.errors import DetectionError, FormatError, ScoringError, StreamVADError
from stream_vad.types import AudioBuffer, DetectMode, ScoredWindow, Segment, Window

__version__ = "0.1.0"

__all__ = [
    "VoiceActivityDetector",
    "AudioBuffer",
    "DetectMode",
    "ScoredWindow",
    "Segment",
    "Window",
    "StreamVADError",
    "FormatError",
    "ScoringError",
    "DetectionError",
]
