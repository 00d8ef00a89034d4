"""Synthetic frames, generated clips and a scripted VideoCapture for tests."""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np
import pytest


def bgr_frame(rgb_rows) -> np.ndarray:
    """Build an OpenCV-style BGR frame from rows of RGB triples."""

    rgb = np.array(rgb_rows, dtype=np.uint8)
    return np.ascontiguousarray(rgb[..., ::-1])


def write_clip(path: Path, rgb_colors, fps: float = 10.0, size=(32, 24)) -> Path:
    """Write one solid-color MJPG frame per entry of ``rgb_colors``."""

    width, height = size
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), fps, (width, height))
    if not writer.isOpened():
        pytest.skip("OpenCV build cannot write MJPG clips")
    try:
        for r, g, b in rgb_colors:
            frame = np.empty((height, width, 3), dtype=np.uint8)
            frame[:] = (b, g, r)
            writer.write(frame)
    finally:
        writer.release()
    return path


class ScriptedCapture:
    """Stands in for cv2.VideoCapture, replaying a fixed list of read() results."""

    def __init__(self, reads, fps=10.0, count=0):
        self._reads = list(reads)
        self._props = {cv2.CAP_PROP_FPS: fps, cv2.CAP_PROP_FRAME_COUNT: count}
        self.released = False

    def isOpened(self):
        return True

    def get(self, prop):
        return self._props.get(prop, 0.0)

    def set(self, prop, value):
        return True

    def read(self):
        result = self._reads.pop(0) if self._reads else (False, None)
        if isinstance(result, Exception):
            raise result
        return result

    def release(self):
        self.released = True


def patch_capture(monkeypatch, tmp_path: Path, capture) -> Path:
    """Route frame_source's VideoCapture to ``capture`` and return a placeholder video path."""

    monkeypatch.setattr("frame_source.cv2.VideoCapture", lambda path: capture)
    video = tmp_path / "clip.mp4"
    video.write_bytes(b"\x00")
    return video
