"""Tests for the command-line detection scripts."""

from __future__ import annotations

import json

import numpy as np
import pytest
import soundfile as sf

from stream_vad.errors import DetectionError, FormatError
from stream_vad.scripts.detect_directory import detect_directory
from stream_vad.scripts.detect_wav import build_config, detect_wav


@pytest.fixture
def wav_dir(tmp_path):
    directory = tmp_path / "wavs"
    directory.mkdir()
    sf.write(str(directory / "a.wav"), np.zeros(32000, dtype=np.float32), 16000, subtype="FLOAT")
    sf.write(str(directory / "b.wav"), np.zeros(16000, dtype=np.float32), 8000, subtype="FLOAT")
    return directory


def test_build_config_overrides(tmp_path):
    config = build_config(model_path=tmp_path / "m.onnx", threshold=0.6, window_sample_nums=256)

    assert config["model"]["path"] == str((tmp_path / "m.onnx").resolve())
    assert config["segmentation"]["threshold"] == 0.6
    assert config["detection"]["window_sample_nums"] == 256
    assert config["segmentation"]["speech_pad_ms"] == 30


def test_detect_wav_writes_outputs(wav_dir, tmp_path, make_detector, scripted_scorer):
    detector = make_detector(scripted_scorer(default=1.0))
    out_dir = tmp_path / "out"

    summary = detect_wav(wav_dir / "a.wav", out_dir, detector)

    scores = np.load(out_dir / "a_scores.npy")
    assert scores.shape == (63,)
    assert np.all(scores == 1.0)

    with open(out_dir / "a_segments.json", encoding="utf-8") as f:
        segments = json.load(f)
    assert segments == [{"start": 0, "end": 32000, "start_s": 0.0, "end_s": 2.0}]

    assert summary["num_segments"] == 1
    assert summary["duration"] == pytest.approx(2.0)
    assert summary["speech_ratio"] == pytest.approx(1.0)


def test_detect_wav_scores_each_window_once(wav_dir, tmp_path, make_detector, scripted_scorer):
    scorer = scripted_scorer(default=1.0)

    detect_wav(wav_dir / "a.wav", tmp_path / "out", make_detector(scorer))

    assert scorer.num_calls == 63, "each window should reach the model exactly once"


def test_detect_wav_rejects_stereo_without_resample(tmp_path, make_detector, scripted_scorer):
    path = tmp_path / "stereo.wav"
    sf.write(str(path), np.zeros((16000, 2), dtype=np.float32), 16000, subtype="FLOAT")
    scorer = scripted_scorer()

    with pytest.raises(DetectionError) as exc_info:
        detect_wav(path, tmp_path / "out", make_detector(scorer))

    assert isinstance(exc_info.value.__cause__, FormatError)
    assert scorer.num_calls == 0


def test_detect_wav_downmixes_stereo_with_resample(tmp_path, make_detector, scripted_scorer):
    path = tmp_path / "stereo.wav"
    sf.write(str(path), np.zeros((16000, 2), dtype=np.float32), 16000, subtype="FLOAT")

    summary = detect_wav(path, tmp_path / "out", make_detector(scripted_scorer()), resample=True)

    assert summary["duration"] == pytest.approx(1.0)


def test_detect_wav_resamples_when_asked(wav_dir, tmp_path, make_detector, scripted_scorer):
    detector = make_detector(scripted_scorer(default=0.0))

    summary = detect_wav(wav_dir / "b.wav", tmp_path / "out", detector, resample=True)

    assert summary["duration"] == pytest.approx(2.0)
    assert summary["num_segments"] == 0


def test_detect_directory_skips_failures(wav_dir, tmp_path, make_detector, scripted_scorer):
    detector = make_detector(scripted_scorer(default=1.0))

    summaries = detect_directory(wav_dir, tmp_path / "out", detector)

    # b.wav is 8 kHz and is rejected without --resample
    assert [s["file"] for s in summaries] == ["a.wav"]
    assert detector.mode.is_stream is False


def test_detect_directory_missing(tmp_path, make_detector, scripted_scorer):
    with pytest.raises(FileNotFoundError):
        detect_directory(tmp_path / "nope", tmp_path / "out", make_detector(scripted_scorer()))
