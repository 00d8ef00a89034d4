"""실행 설정 및 로깅 구성"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from palette_errors import InvalidConfiguration

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def parse_time_str(t_str):
    """FFmpeg 스타일의 시간 문자열(HH:MM:SS, MM:SS, SS)을 초(float) 단위로 변환"""
    if t_str is None or t_str == "": return 0.0
    try:
        parts = [float(p) for p in str(t_str).strip().split(':')]
    except ValueError:
        raise InvalidConfiguration(f"시간 형식이 올바르지 않습니다 (예: 00:01:30): {t_str!r}")

    # nan, inf, 1e400 등은 float()를 통과하므로 별도로 거부
    if len(parts) > 3 or any(not math.isfinite(p) or p < 0 for p in parts):
        raise InvalidConfiguration(f"시간 형식이 올바르지 않습니다 (예: 00:01:30): {t_str!r}")

    seconds = 0.0
    for p in parts:
        seconds = seconds * 60 + p
    if not math.isfinite(seconds):
        raise InvalidConfiguration(f"시간 값이 너무 큽니다: {t_str!r}")
    return seconds


@dataclass(frozen=True)
class PaletteDefaults:
    """환경 변수(.env 포함)로 덮어쓸 수 있는 CLI 기본값"""

    sample_height: int = 12
    saturation: float = 0.0
    luminance: float = 0.0
    num_clusters: int = 5
    seed: int = 42
    log_level: str = "INFO"


@dataclass(frozen=True)
class PaletteSettings:
    """한 번의 실행에 필요한 모든 파라미터"""

    video: str
    sample_height: int = 12
    saturation: float = 0.0
    luminance: float = 0.0
    num_clusters: int = 5
    start_time: str | None = None
    end_time: str | None = None
    seed: int | None = 42
    top_colors: int = 10
    swatch_path: str | None = None
    show_progress: bool = True
    log_level: str = "INFO"

    def validate(self) -> "PaletteSettings":
        """퇴화된 파라미터를 프레임 처리 전에 거부"""
        if self.sample_height < 1:
            raise InvalidConfiguration(f"리사이즈 높이는 1 이상이어야 합니다: {self.sample_height}")
        for name, value in (("saturation", self.saturation), ("luminance", self.luminance)):
            if not 0.0 <= value <= 1.0:
                raise InvalidConfiguration(f"{name} 임계값은 0.0~1.0 범위여야 합니다: {value}")
        if self.num_clusters < 1:
            raise InvalidConfiguration(f"클러스터 수는 1 이상이어야 합니다: {self.num_clusters}")
        if self.top_colors < 1:
            raise InvalidConfiguration(f"상위 색상 개수는 1 이상이어야 합니다: {self.top_colors}")

        start_sec = parse_time_str(self.start_time)
        end_sec = parse_time_str(self.end_time) if self.end_time else None
        if end_sec is not None and start_sec >= end_sec:
            raise InvalidConfiguration(
                f"시작 시간({self.start_time})이 종료 시간({self.end_time})보다 앞서야 합니다",
                context={"start": start_sec, "end": end_sec},
            )
        return self


def _env_value(name, cast, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as e:
        raise InvalidConfiguration(f"환경 변수 {name} 값이 올바르지 않습니다: {raw!r}") from e


@lru_cache
def get_defaults() -> PaletteDefaults:
    """.env 및 환경 변수에서 기본값을 한 번만 읽어 캐시"""
    load_dotenv()
    return PaletteDefaults(
        sample_height=_env_value("VIDEO_PALETTE_RESIZE_HEIGHT", int, 12),
        saturation=_env_value("VIDEO_PALETTE_SATURATION", float, 0.0),
        luminance=_env_value("VIDEO_PALETTE_LUMINANCE", float, 0.0),
        num_clusters=_env_value("VIDEO_PALETTE_CLUSTERS", int, 5),
        seed=_env_value("VIDEO_PALETTE_SEED", int, 42),
        log_level=_env_value("VIDEO_PALETTE_LOG_LEVEL", str, "INFO"),
    )


def configure_logging(level: str = "INFO") -> None:
    """루트 로거 구성"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
