"""Windowing utilities for VAD inference."""

from __future__ import annotations

import numpy as np

from stream_vad.types import Window


def divide_into_windows(total_samples: int, window_size: int) -> list[Window]:
    """
    Split ``[0, total_samples)`` into consecutive fixed-size windows.

    Every window except possibly the last holds exactly ``window_size``
    samples; the last one holds whatever remains. No window is produced
    for an empty buffer.

    Args:
        total_samples: Number of samples in the buffer
        window_size: Samples per window

    Returns:
        List of Window in increasing start order
    """
    if window_size <= 0:
        raise ValueError(f"window_size must be positive, got {window_size}")
    if total_samples < 0:
        raise ValueError(f"total_samples must be non-negative, got {total_samples}")

    windows = []
    for start_idx in range(0, total_samples, window_size):
        count = min(window_size, total_samples - start_idx)
        windows.append(Window(start_sample=start_idx, sample_count=count))

    return windows


def pad_window(samples: np.ndarray, window_size: int) -> np.ndarray:
    """
    Zero-pad a window to exactly ``window_size`` float32 samples.

    Args:
        samples: 1-D window samples, at most ``window_size`` long
        window_size: Target length

    Returns:
        float32 array of shape (window_size,)
    """
    if samples.ndim != 1:
        raise ValueError(f"Expected 1-D window, got shape {samples.shape}")
    if len(samples) > window_size:
        raise ValueError(
            f"Window of {len(samples)} samples exceeds window_size {window_size}"
        )

    if len(samples) == window_size:
        return samples.astype(np.float32, copy=False)

    window = np.zeros(window_size, dtype=np.float32)
    window[:len(samples)] = samples
    return window


def window_samples(samples: np.ndarray, window: Window, window_size: int) -> np.ndarray:
    """Slice *window* out of *samples*, padding the short final window."""
    chunk = samples[window.start_sample:window.end_sample]
    return pad_window(chunk, window_size)
