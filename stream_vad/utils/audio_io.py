"""Audio I/O utilities for loading waveforms for detection.

The detector only accepts mono float32 audio at its configured sample rate.
``load_audio`` reads a file with soundfile and, when asked, does the
conversion a caller is responsible for: downmixing to mono and resampling.
Without ``target_sr`` the file's own rate is kept so the detector can reject
mismatched input.
"""

from __future__ import annotations

import logging
from math import gcd
from pathlib import Path
from typing import Optional

import numpy as np
import soundfile as sf
from scipy import signal

from stream_vad.types import AudioBuffer

logger = logging.getLogger(__name__)


def resample(wav: np.ndarray, orig_sr: int, target_sr: int) -> np.ndarray:
    """
    Resample a mono waveform with a polyphase filter.

    Args:
        wav: 1-D waveform
        orig_sr: Current sample rate
        target_sr: Desired sample rate

    Returns:
        float32 waveform at target_sr
    """
    if orig_sr == target_sr:
        return wav.astype(np.float32, copy=False)
    factor = gcd(orig_sr, target_sr)
    resampled = signal.resample_poly(wav, target_sr // factor, orig_sr // factor)
    return resampled.astype(np.float32)


def load_audio(
    path: str | Path,
    target_sr: Optional[int] = None,
    mono: bool = True,
) -> AudioBuffer:
    """
    Load an audio file into an AudioBuffer.

    Args:
        path: Path to the audio file (WAV, FLAC, OGG, ...)
        target_sr: Resample to this rate if given
        mono: Average channels into one

    Returns:
        AudioBuffer with float32 samples
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Audio file not found: {path}")

    try:
        wav, sr = sf.read(str(path), dtype='float32')
    except Exception as e:
        raise IOError(f"Failed to load audio from {path}: {e}") from e

    # soundfile returns (samples,) for mono, (samples, channels) otherwise
    if mono and wav.ndim > 1:
        wav = np.mean(wav, axis=1).astype(np.float32)

    if target_sr is not None and sr != target_sr:
        if wav.ndim > 1:
            raise ValueError("Resampling requires mono audio; pass mono=True")
        logger.debug(f"Resampling {path.name} from {sr} Hz to {target_sr} Hz")
        wav = resample(wav, sr, target_sr)
        sr = target_sr

    return AudioBuffer(samples=wav, sample_rate=int(sr))
