"""Configuration helpers for the streaming VAD pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

CONFIG_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = CONFIG_DIR.parent.parent


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as file:
        data = yaml.safe_load(file)
    return data or {}


def _deep_update(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = dict(base)
    for key, value in overrides.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_update(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: str | Path) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        Dictionary containing the configuration
    """
    path_obj = Path(path)
    if not path_obj.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    return _read_yaml(path_obj)


def load_config(config_path: str | Path | None = None) -> Dict[str, Any]:
    """
    Load the default YAML configuration and optionally merge overrides.

    Args:
        config_path: Optional override path. Defaults to default_config.yaml.

    Returns:
        Parsed configuration dictionary with defaults applied.
    """
    config = _read_yaml(CONFIG_DIR / "default_config.yaml")
    if config_path:
        overrides = load_yaml(config_path)
        if not isinstance(overrides, dict):
            raise ValueError(f"Configuration root must be a mapping: {config_path}")
        config = _deep_update(config, overrides)
    return config


def resolve_path(path_str: str, base: Path | None = None) -> Path:
    """
    Resolve a filesystem path relative to project root.

    Args:
        path_str: Raw string from config (absolute or relative).
        base: Optional base directory override.

    Returns:
        Absolute Path object.
    """
    path = Path(path_str)
    if path.is_absolute():
        return path
    base_dir = base or PROJECT_ROOT
    return (base_dir / path).resolve()


def segmentation_options(config: Dict[str, Any]) -> Dict[str, Any]:
    """Return the segmentation tunables from *config* as detect_segments kwargs."""
    seg = config.get("segmentation", {})
    return {
        "threshold": float(seg.get("threshold", 0.5)),
        "min_speech_duration_ms": int(seg.get("min_speech_duration_ms", 250)),
        "max_speech_duration_s": float(seg.get("max_speech_duration_s", 30)),
        "min_silence_duration_ms": int(seg.get("min_silence_duration_ms", 100)),
        "speech_pad_ms": int(seg.get("speech_pad_ms", 30)),
        "window_sample_nums": int(
            config.get("detection", {}).get("window_sample_nums", 512)
        ),
    }


__all__ = [
    "CONFIG_DIR",
    "PROJECT_ROOT",
    "load_yaml",
    "load_config",
    "resolve_path",
    "segmentation_options",
]
