"""
Начальные границы (шаг 2 Yinyang k-means).

Для каждой точки диапазона выполняется полный точный перебор центроидов:
метка — ближайший центроид (первый по индексу при равенстве, как у
точного Ллойда), верхняя граница — расстояние до него, нижняя граница
группы — расстояние до ближайшего центроида группы, а для группы самой
метки — до второго по близости.
"""

from __future__ import annotations

import numpy as np

from .geometry import pairwise_sq_distances, safe_sqrt_array
from .groups import GroupPartition

# Ограничение на размер промежуточного массива (M, K, D) при переборе
_BLOCK_ELEMENTS = 1 << 20


def _block_size(K: int, D: int) -> int:
    return max(1, _BLOCK_ELEMENTS // max(1, K * D))


def chunk_initialize(
    X: np.ndarray,
    centroids: np.ndarray,
    partition: GroupPartition,
    labels: np.ndarray,
    ub: np.ndarray,
    lb: np.ndarray,
    sums: np.ndarray,
    counts: np.ndarray,
    r: range,
) -> None:
    """
    Заполняет labels, ub и столбцы lb для точек диапазона r.

    sums (K, D) и counts (K,) — локальные аккумуляторы воркера; точки
    добавляются к своим центроидам.
    """
    K, D = centroids.shape

    for start in range(r.start, r.stop, _block_size(K, D)):
        stop = min(start + _block_size(K, D), r.stop)
        X_block = X[start:stop]
        rows = np.arange(stop - start)

        d2 = pairwise_sq_distances(X_block, centroids)
        block_labels = np.argmin(d2, axis=1)
        home = partition.group_of[block_labels]

        labels[start:stop] = block_labels
        ub[start:stop] = safe_sqrt_array(d2[rows, block_labels])

        for gi, members in enumerate(partition.groups):
            sub = d2[:, members]
            if members.size > 1:
                nearest = np.partition(sub, 1, axis=1)
                first, second = nearest[:, 0], nearest[:, 1]
            else:
                first = sub[:, 0]
                second = np.full(stop - start, np.inf)
            lb[gi, start:stop] = safe_sqrt_array(np.where(home == gi, second, first))

        np.add.at(sums, block_labels, X_block)
        counts += np.bincount(block_labels, minlength=K)
