import logging
from collections import Counter
from typing import NamedTuple

import cv2
import numpy as np
from numba import njit, prange
from tqdm import tqdm

logger = logging.getLogger(__name__)

# 레터박스/오버레이(흰색), 암부 노이즈(검은색) 제외 기준. 호출자가 바꿀 수 없는 고정값
WHITE_THRESHOLD = 250
BLACK_THRESHOLD = 5


class Color(NamedTuple):
    """8비트 RGB 색상. 채널 값으로만 비교/해시되므로 딕셔너리 키로 사용 가능"""
    red: int
    green: int
    blue: int


# ==========================================================
# 1. Numba JIT 픽셀 필터 (픽셀 단위 병렬)
# ==========================================================
@njit(parallel=True, cache=True, nogil=True)
def _qualifying_mask(pixels, saturation_threshold, luminance_threshold):
    """흰색/검은색 대역 제외 후 HSV 채도(S)와 명도(V) 임계값을 통과한 픽셀 마스크"""
    n = pixels.shape[0]
    keep = np.zeros(n, dtype=np.bool_)
    for i in prange(n):
        r, g, b = pixels[i, 0], pixels[i, 1], pixels[i, 2]
        if r >= WHITE_THRESHOLD and g >= WHITE_THRESHOLD and b >= WHITE_THRESHOLD:
            continue
        if r <= BLACK_THRESHOLD and g <= BLACK_THRESHOLD and b <= BLACK_THRESHOLD:
            continue

        mx = max(r, g, b)
        mn = min(r, g, b)
        value = mx / 255.0
        saturation = (mx - mn) / mx if mx > 0 else 0.0
        keep[i] = saturation >= saturation_threshold and value >= luminance_threshold
    return keep


# ==========================================================
# 2. 프레임 단위 색상 추출
# ==========================================================
def resize_to_height(frame, sample_height):
    """종횡비를 유지하며 높이를 sample_height로 축소 (INTER_AREA: 면적 평균)"""
    rows, cols = frame.shape[:2]
    new_width = max(1, int(sample_height * cols / rows + 0.5))
    return cv2.resize(frame, (new_width, sample_height), interpolation=cv2.INTER_AREA)


def filter_frame_pixels(frame, sample_height, saturation_threshold, luminance_threshold):
    """BGR 프레임 하나에서 필터를 통과한 픽셀을 (N, 3) uint8 RGB 배열로 반환

    프레임 내 중복 색상은 그대로 유지됩니다 (빈도 집계는 이후 단계에서 수행).
    """
    resized = resize_to_height(frame, sample_height)
    rgb = cv2.cvtColor(resized, cv2.COLOR_BGR2RGB)
    pixels = np.ascontiguousarray(rgb.reshape(-1, 3))

    keep = _qualifying_mask(pixels, float(saturation_threshold), float(luminance_threshold))
    return pixels[keep]


def extract_colors_from_frame(frame, sample_height, saturation_threshold, luminance_threshold):
    pixels = filter_frame_pixels(frame, sample_height, saturation_threshold, luminance_threshold)
    return [Color(r, g, b) for r, g, b in pixels.tolist()]


# ==========================================================
# 3. 구간 전체 빈도 집계
# ==========================================================
def _pack(pixels):
    """RGB 픽셀을 0xRRGGBB 정수 키로 변환"""
    p = pixels.astype(np.uint32)
    return (p[:, 0] << 16) | (p[:, 1] << 8) | p[:, 2]


def _unpack(key):
    return Color((key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF)


def extract_color_ranking(frames, sample_height, saturation_threshold, luminance_threshold,
                          frame_total=None, show_progress=False, on_progress=None):
    """모든 프레임의 추출 색상을 집계해 (Color, count) 목록을 빈도 내림차순으로 반환

    동일 빈도는 색상 값 오름차순으로 정렬되어 같은 입력에 대해 항상 같은 순서를 냅니다.
    프레임 소스에서 발생한 예외는 그대로 전파되며 부분 결과는 반환하지 않습니다.
    """
    color_counts = Counter()
    processed = 0

    with tqdm(total=frame_total or None, desc="색상 추출", unit="frame",
              disable=not show_progress) as pbar:
        for frame in frames:
            pixels = filter_frame_pixels(frame, sample_height, saturation_threshold, luminance_threshold)
            if len(pixels) > 0:
                keys, counts = np.unique(_pack(pixels), return_counts=True)
                color_counts.update(dict(zip(keys.tolist(), counts.tolist())))

            processed += 1
            pbar.update(1)
            if on_progress is not None:
                on_progress(processed, frame_total)

    ranked = sorted(color_counts.items(), key=lambda kv: (-kv[1], kv[0]))
    logger.debug("aggregated %d frames: %d distinct colors, %d pixels",
                 processed, len(ranked), sum(color_counts.values()))
    return [(_unpack(key), count) for key, count in ranked]
