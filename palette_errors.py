"""팔레트 추출 파이프라인 예외 정의"""

from __future__ import annotations

from typing import Any


class PaletteError(Exception):
    """파이프라인 공통 상위 예외"""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class SourceOpenError(PaletteError):
    """동영상을 열 수 없거나 디코딩 가능한 프레임이 없음"""


class DecodeError(PaletteError):
    """스트림 중간에서 프레임 디코딩 실패"""

    def __init__(self, message: str, *, frames_processed: int = 0, context: dict[str, Any] | None = None):
        super().__init__(message, context=context)
        self.frames_processed = frames_processed


class EmptyInputError(PaletteError):
    """빈 색상 랭킹으로 클러스터링 요청 (모든 픽셀이 필터링된 경우 등)"""


class InvalidConfiguration(PaletteError):
    """잘못된 실행 파라미터 (프레임 처리 전에 거부)"""
