"""Shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers import write_clip


@pytest.fixture
def two_tone_clip(tmp_path: Path) -> Path:
    """2 seconds at 10 fps: one second of red, one second of blue."""

    colors = [(220, 40, 40)] * 10 + [(40, 40, 220)] * 10
    return write_clip(tmp_path / "two_tone.avi", colors)
