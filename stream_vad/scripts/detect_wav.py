"""Run voice activity detection on a single WAV file."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np

from stream_vad.config import load_config, segmentation_options
from stream_vad.detector import VoiceActivityDetector
from stream_vad.utils.audio_io import load_audio
from stream_vad.utils.logging_utils import LOG_LEVELS, setup_logging
from stream_vad.utils.postprocessing import segment_probabilities, segments_to_seconds

logger = logging.getLogger(__name__)


def build_config(
    config_path: str | Path | None = None,
    model_path: str | Path | None = None,
    threshold: Optional[float] = None,
    window_sample_nums: Optional[int] = None,
) -> Dict[str, Any]:
    """Load the config and apply command-line overrides."""
    config = load_config(config_path)
    if model_path is not None:
        config.setdefault("model", {})["path"] = str(Path(model_path).resolve())
    if threshold is not None:
        config.setdefault("segmentation", {})["threshold"] = threshold
    if window_sample_nums is not None:
        config.setdefault("detection", {})["window_sample_nums"] = window_sample_nums
    return config


def detect_wav(
    wav_path: str | Path,
    output_dir: str | Path,
    detector: VoiceActivityDetector,
    resample: bool = False,
) -> Dict[str, Any]:
    """
    Detect speech in one WAV file and save scores and segments.

    Args:
        wav_path: Path to input WAV file
        output_dir: Directory to save outputs
        detector: Detector to run (its config supplies segmentation options)
        resample: Downmix to mono and convert to the detector's sample rate first

    Returns:
        Summary dictionary for the file
    """
    wav_path = Path(wav_path)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    logger.info(f"Processing {wav_path}")

    target_sr = detector.sample_rate if resample else None
    audio = load_audio(wav_path, target_sr=target_sr, mono=resample)

    options = segmentation_options(detector.config)
    window_sample_nums = options["window_sample_nums"]

    scored = detector.detect_chunks(audio, window_sample_nums=window_sample_nums)
    scores = np.array([w.probability for w in scored], dtype=np.float32)
    logger.info(f"Scored {len(scores)} windows")

    segments = segment_probabilities(
        scored,
        audio.num_samples,
        sample_rate=detector.sample_rate,
        **options,
    )
    times = segments_to_seconds(segments, detector.sample_rate)

    output_name = wav_path.stem

    scores_path = output_dir / f"{output_name}_scores.npy"
    np.save(scores_path, scores)
    logger.info(f"Saved window scores to {scores_path}")

    segments_path = output_dir / f"{output_name}_segments.json"
    with open(segments_path, 'w', encoding='utf-8') as f:
        json.dump(
            [
                {"start": seg.start, "end": seg.end, "start_s": start_s, "end_s": end_s}
                for seg, (start_s, end_s) in zip(segments, times)
            ],
            f,
            indent=2,
        )
    logger.info(f"Saved segments to {segments_path}")

    duration = audio.num_samples / audio.sample_rate
    speech_time = sum(end - start for start, end in times)
    return {
        "file": wav_path.name,
        "duration": duration,
        "num_segments": len(segments),
        "speech_time": speech_time,
        "speech_ratio": speech_time / duration if duration > 0 else 0.0,
    }


def print_summary(summary: Dict[str, Any]) -> None:
    print(f"\nResults for {summary['file']}:")
    print(f"  Total duration: {summary['duration']:.2f} seconds")
    print(f"  Speech segments: {summary['num_segments']}")
    print(f"  Total speech time: {summary['speech_time']:.2f} seconds")
    print(f"  Speech ratio: {summary['speech_ratio']:.2%}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Detect speech segments in a WAV file")
    parser.add_argument('wav_path', type=str, help='Path to input WAV file')
    parser.add_argument('--model', type=str, help='Path to Silero VAD ONNX model')
    parser.add_argument('--config', type=str, help='Path to override config YAML')
    parser.add_argument('--output_dir', type=str, default='outputs', help='Output directory')
    parser.add_argument('--threshold', type=float, help='Speech probability threshold')
    parser.add_argument('--window', type=int, help='Samples per window')
    parser.add_argument('--resample', action='store_true',
                        help='Resample and downmix input to the model rate')
    parser.add_argument('--log-level', type=str.upper, default='INFO', choices=LOG_LEVELS,
                        help='Logging level')
    parser.add_argument('--debug-windows', action='store_true',
                        help='Also log every scored window at DEBUG')

    args = parser.parse_args()
    setup_logging(args.log_level, window_debug=args.debug_windows)

    config = build_config(
        config_path=args.config,
        model_path=args.model,
        threshold=args.threshold,
        window_sample_nums=args.window,
    )
    detector = VoiceActivityDetector(config=config)

    summary = detect_wav(
        wav_path=args.wav_path,
        output_dir=args.output_dir,
        detector=detector,
        resample=args.resample,
    )
    print_summary(summary)


if __name__ == "__main__":
    main()
