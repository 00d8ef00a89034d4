import logging
import warnings
from dataclasses import dataclass

import numpy as np
from sklearn.cluster import KMeans

from color_extract import Color
from palette_errors import EmptyInputError, InvalidConfiguration

logger = logging.getLogger(__name__)

MAX_ITER = 100
# 클러스터 수가 고유 색상 수보다 많을 때 남는 클러스터의 중심색
PAD_CENTROID = Color(0, 0, 0)


@dataclass(frozen=True)
class ColorCluster:
    """클러스터 하나의 결과: 중심색과 여기에 배정된 (Color, count) 튜플"""
    centroid: Color
    assignments: tuple = ()

    def __post_init__(self):
        # frozen 인스턴스가 해시 가능하고 변경 불가능하도록 튜플로 고정
        object.__setattr__(self, "assignments", tuple(self.assignments))

    @property
    def pixel_count(self):
        return sum(count for _, count in self.assignments)


def _centroid_to_color(center):
    """0.0~1.0 정규화 채널을 0~255 정수로 복원 (반올림 후 클램핑)"""
    r, g, b = np.clip(np.rint(np.asarray(center) * 255.0), 0, 255).astype(int).tolist()
    return Color(r, g, b)


def create_color_clusters(color_ranking, num_clusters, seed=42):
    """빈도 가중 K-Means로 색상 랭킹을 num_clusters개 클러스터로 분할

    각 고유 색상의 출현 횟수를 sample_weight로 사용합니다. 색상을 횟수만큼
    반복한 샘플에 K-Means를 돌린 것과 같은 결과를 메모리 복제 없이 얻습니다.
    반환 순서는 중심점 인덱스 순서이며, 빈 배정 목록을 가진 클러스터도 포함됩니다.
    """
    if num_clusters < 1:
        raise InvalidConfiguration(f"클러스터 수는 1 이상이어야 합니다: {num_clusters}")
    if not color_ranking:
        raise EmptyInputError("클러스터링할 색상이 없습니다 (모든 픽셀이 필터링되었을 수 있습니다)")

    colors = [color for color, _ in color_ranking]
    data = np.array(colors, dtype=np.float64) / 255.0
    weights = np.array([count for _, count in color_ranking], dtype=np.float64)

    # 고유 색상보다 많은 클러스터는 만들 수 없으므로 나머지는 빈 클러스터로 채움
    n_fit = min(num_clusters, len(colors))
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        km = KMeans(n_clusters=n_fit, init='k-means++', n_init=1, max_iter=MAX_ITER,
                    random_state=seed).fit(data, sample_weight=weights)
    logger.debug("k-means: k=%d samples=%d iterations=%d inertia=%.6f",
                 n_fit, len(colors), km.n_iter_, km.inertia_)

    assignments = [[] for _ in range(num_clusters)]
    for (color, count), label in zip(color_ranking, km.labels_.tolist()):
        assignments[label].append((color, count))

    centroids = [_centroid_to_color(c) for c in km.cluster_centers_]
    while len(centroids) < num_clusters: centroids.append(PAD_CENTROID)

    return [ColorCluster(centroid=centroid, assignments=tuple(assigned))
            for centroid, assigned in zip(centroids, assignments)]
