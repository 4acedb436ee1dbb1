"""Windowing, post-processing, audio I/O and logging helpers."""
