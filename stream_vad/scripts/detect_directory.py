"""Run voice activity detection on a directory of WAV files."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List

from tqdm import tqdm

from stream_vad.detector import VoiceActivityDetector
from stream_vad.errors import StreamVADError
from stream_vad.scripts.detect_wav import build_config, detect_wav, print_summary
from stream_vad.utils.logging_utils import LOG_LEVELS, setup_logging

logger = logging.getLogger(__name__)


def detect_directory(
    wav_dir: str | Path,
    output_dir: str | Path,
    detector: VoiceActivityDetector,
    resample: bool = False,
) -> List[Dict[str, Any]]:
    """Detect speech in all WAV files in a directory."""
    wav_dir = Path(wav_dir)
    output_dir = Path(output_dir)

    if not wav_dir.exists():
        raise FileNotFoundError(f"Directory not found: {wav_dir}")

    wav_files = sorted(set(wav_dir.glob("*.wav")) | set(wav_dir.glob("*.WAV")))
    logger.info(f"Found {len(wav_files)} WAV files")

    summaries = []
    for wav_file in tqdm(wav_files, desc="Detecting", unit="file"):
        try:
            summaries.append(
                detect_wav(
                    wav_path=wav_file,
                    output_dir=output_dir,
                    detector=detector,
                    resample=resample,
                )
            )
        except (StreamVADError, IOError, ValueError) as e:
            logger.error(f"Failed to process {wav_file}: {e}", exc_info=True)
            # scoring may have stopped mid-buffer
            detector.reset_state()
            continue

    return summaries


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Detect speech in a directory of WAV files")
    parser.add_argument('wav_dir', type=str, help='Directory containing WAV files')
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

    summaries = detect_directory(
        wav_dir=args.wav_dir,
        output_dir=args.output_dir,
        detector=detector,
        resample=args.resample,
    )
    for summary in summaries:
        print_summary(summary)


if __name__ == "__main__":
    main()
