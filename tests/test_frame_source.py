"""Tests for time parsing and the OpenCV-backed frame source."""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np
import pytest

from frame_source import VideoFrameSource
from palette_config import parse_time_str
from palette_errors import DecodeError, InvalidConfiguration, SourceOpenError
from tests.helpers import ScriptedCapture, patch_capture


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("00:01:30", 90.0),
        ("1:05", 65.0),
        ("42", 42.0),
        ("0:00:01.5", 1.5),
        (None, 0.0),
        ("", 0.0),
    ],
)
def test_parse_time_str(text, expected) -> None:
    assert parse_time_str(text) == pytest.approx(expected)


@pytest.mark.parametrize(
    "text",
    ["abc", "1:2:3:4", "-5", "00:xx:10", "nan", "inf", "-inf", "1e400", "1:nan", "1e308:0:0"],
)
def test_parse_time_str_rejects_malformed(text) -> None:
    with pytest.raises(InvalidConfiguration):
        parse_time_str(text)


def test_missing_file_raises_source_open_error(tmp_path: Path) -> None:
    with pytest.raises(SourceOpenError):
        VideoFrameSource(tmp_path / "nope.mp4")


def test_non_video_file_raises_source_open_error(tmp_path: Path) -> None:
    bogus = tmp_path / "notes.avi"
    bogus.write_text("definitely not a video", encoding="utf-8")

    with pytest.raises(SourceOpenError):
        with VideoFrameSource(bogus) as source:
            list(source)


def test_iterates_every_frame(two_tone_clip: Path) -> None:
    with VideoFrameSource(two_tone_clip) as source:
        assert source.frame_total == 20
        frames = list(source)

    assert len(frames) == 20
    assert frames[0].shape == (24, 32, 3)


def test_time_window_limits_frames(two_tone_clip: Path) -> None:
    with VideoFrameSource(two_tone_clip, "0:00:01", "0:00:01.5") as source:
        assert (source.start_frame, source.end_frame) == (10, 15)
        frames = list(source)

    assert len(frames) == 5
    # second half of the clip is blue (BGR order)
    b, g, r = frames[0][0, 0].tolist()
    assert b > 150 and r < 100


def test_sequence_is_not_restartable(two_tone_clip: Path) -> None:
    with VideoFrameSource(two_tone_clip) as source:
        first = list(source)
        second = list(source)

    assert len(first) == 20
    assert second == []


def test_no_decodable_frames_raises_source_open_error(monkeypatch, tmp_path: Path) -> None:
    video = patch_capture(monkeypatch, tmp_path, ScriptedCapture([], count=20))

    with VideoFrameSource(video) as source:
        with pytest.raises(SourceOpenError):
            list(source)


def test_mid_stream_decode_failure_reports_progress(monkeypatch, tmp_path: Path) -> None:
    frame = np.zeros((4, 4, 3), dtype=np.uint8)
    reads = [(True, frame), (True, frame), cv2.error("corrupt packet")]
    video = patch_capture(monkeypatch, tmp_path, ScriptedCapture(reads, count=20))

    with VideoFrameSource(video) as source:
        with pytest.raises(DecodeError) as excinfo:
            list(source)

    assert excinfo.value.frames_processed == 2


def test_empty_frame_is_a_decode_error(monkeypatch, tmp_path: Path) -> None:
    empty = np.zeros((0, 4, 3), dtype=np.uint8)
    video = patch_capture(monkeypatch, tmp_path, ScriptedCapture([(True, empty)], count=5))

    with VideoFrameSource(video) as source:
        with pytest.raises(DecodeError):
            list(source)


def test_unknown_length_stream_reads_to_end(monkeypatch, tmp_path: Path) -> None:
    frame = np.zeros((4, 4, 3), dtype=np.uint8)
    capture = ScriptedCapture([(True, frame)] * 3, fps=0.0, count=0)
    video = patch_capture(monkeypatch, tmp_path, capture)

    with VideoFrameSource(video) as source:
        assert source.fps == 30.0
        assert source.frame_total == 0
        assert len(list(source)) == 3

    assert capture.released
