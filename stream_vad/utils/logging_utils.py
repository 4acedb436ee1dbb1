"""Logging setup for the detection scripts."""

from __future__ import annotations

import logging
import sys
from typing import Optional, Union

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

# These log once per scored window at DEBUG
WINDOW_LOGGERS = ("stream_vad.scan", "stream_vad.scorer")


def resolve_level(level: Union[int, str]) -> int:
    """Turn a level name such as ``"debug"`` or a logging constant into an int."""
    if isinstance(level, int):
        return level
    name = str(level).upper()
    if name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {level!r}, expected one of {LOG_LEVELS}")
    return getattr(logging, name)


def setup_logging(
    level: Union[int, str] = logging.INFO,
    format_string: Optional[str] = None,
    window_debug: bool = False,
) -> None:
    """
    Configure logging for the command-line scripts.

    Args:
        level: Logging level or level name (default: INFO)
        format_string: Custom format string. If None, uses default format.
        window_debug: Keep per-window scorer and scan messages at DEBUG.
            Otherwise those loggers stay at INFO or above.
    """
    level = resolve_level(level)
    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    logging.basicConfig(
        level=level,
        format=format_string,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    window_level = level if window_debug else max(level, logging.INFO)
    for name in WINDOW_LOGGERS:
        logging.getLogger(name).setLevel(window_level)
