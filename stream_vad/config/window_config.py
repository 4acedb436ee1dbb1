"""Shared window and model-shape constants for detection and segmentation."""

from __future__ import annotations

SAMPLE_RATE = 16_000
WINDOW_SAMPLES = 512  # 32 ms at 16 kHz

# Recurrent state shape: (NUM_LAYERS, batch, HIDDEN_DIM)
NUM_LAYERS = 2
HIDDEN_DIM = 64
BATCH_SIZE = 1

NEG_THRESHOLD_OFFSET = 0.15
MIN_SILENCE_AT_MAX_SPEECH_S = 0.098

__all__ = [
    "SAMPLE_RATE",
    "WINDOW_SAMPLES",
    "NUM_LAYERS",
    "HIDDEN_DIM",
    "BATCH_SIZE",
    "NEG_THRESHOLD_OFFSET",
    "MIN_SILENCE_AT_MAX_SPEECH_S",
]
