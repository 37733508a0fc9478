"""
Построение групп центроидов (шаг 1 Yinyang k-means).

Центроиды разбиваются на t групп коротким прогоном точного k-means по
самим центроидам. Индексы центроидов сортируются по номеру подкластера,
и группа — это непрерывный отрезок в этом порядке. Геометрически близкие
центроиды попадают в одну группу, поэтому общая нижняя граница группы
ослабляется на дрейф медленнее.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from yinyang.errors import InvalidConfigError

from .geometry import pairwise_sq_distances, rangify
from .lloyd import lloyd_kmeans

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupPartition:
    """
    Неизменяемое разбиение центроидов на группы.

    - groups: список массивов индексов центроидов (внутри группы по возрастанию);
    - group_of: обратное отображение индекс центроида → номер группы.
    """

    groups: List[np.ndarray]
    group_of: np.ndarray

    @property
    def n_groups(self) -> int:
        return len(self.groups)

    def validate(self) -> None:
        """Проверяет, что группы не пересекаются и покрывают все центроиды."""
        K = self.group_of.shape[0]
        members = np.concatenate(self.groups) if self.groups else np.empty(0, dtype=np.int64)
        if members.size != K or not np.array_equal(np.sort(members), np.arange(K)):
            raise AssertionError("Groups must cover every centroid exactly once")
        for gi, group in enumerate(self.groups):
            if not np.all(self.group_of[group] == gi):
                raise AssertionError(f"group_of is inconsistent with group {gi}")


def group_count(n_clusters: int, auto: bool = True, divider: int = 7) -> int:
    """
    Количество групп: max(1, K // divider) при auto, иначе 1.

    >>> group_count(10, auto=True, divider=7)
    1
    >>> group_count(100, auto=True, divider=7)
    14
    """
    if divider < 1:
        raise InvalidConfigError(f"divider must be positive, got {divider}")
    if not auto:
        return 1
    return max(1, n_clusters // divider)


def kmeans_plusplus(
    points: np.ndarray, n_centers: int, rng: np.random.Generator
) -> np.ndarray:
    """
    Выбор n_centers стартовых центров среди points по схеме k-means++.

    Если все оставшиеся точки совпадают с уже выбранными центрами,
    следующий центр берётся равновероятно.
    """
    n = points.shape[0]
    chosen = [int(rng.integers(n))]
    d2 = pairwise_sq_distances(points, points[chosen])[:, 0]

    for _ in range(1, n_centers):
        total = float(d2.sum())
        if total > 0.0:
            idx = int(rng.choice(n, p=d2 / total))
        else:
            idx = int(rng.integers(n))
        chosen.append(idx)
        d2 = np.minimum(d2, pairwise_sq_distances(points, points[idx : idx + 1])[:, 0])

    return points[chosen].copy()


def build_groups(
    centroids: np.ndarray,
    n_groups: int,
    max_iters: int = 5,
    tol: float = 1e-10,
    random_state: int = 0,
) -> GroupPartition:
    """
    Разбивает K центроидов на не более чем n_groups групп.

    Args:
        centroids: Текущие центроиды (K, D)
        n_groups: Желаемое количество групп t
        max_iters: Лимит итераций подкластеризации
        tol: Порог сходимости подкластеризации
        random_state: Seed для выбора стартовых центров подкластеризации

    Returns:
        GroupPartition; групп может оказаться меньше n_groups, если
        подкластеризация оставила пустые кластеры (например, при
        совпадающих центроидах).
    """
    K = centroids.shape[0]
    n_groups = min(max(1, int(n_groups)), K)

    if n_groups == 1:
        return GroupPartition(
            groups=[np.arange(K, dtype=np.int64)],
            group_of=np.zeros(K, dtype=np.int64),
        )

    rng = np.random.default_rng(random_state)
    seeds = kmeans_plusplus(centroids, n_groups, rng)
    assignments, _ = lloyd_kmeans(centroids, seeds, max_iters=max_iters, tol=tol)

    # стабильная сортировка сохраняет порядок индексов внутри группы
    perm = np.argsort(assignments, kind="stable")
    sorted_assignments = assignments[perm]

    groups: List[np.ndarray] = []
    group_of = np.empty(K, dtype=np.int64)
    for gi, r in enumerate(rangify(sorted_assignments)):
        members = perm[r.start : r.stop].astype(np.int64)
        groups.append(members)
        group_of[members] = gi

    if len(groups) < n_groups:
        logger.debug(
            f"Sub-clustering produced {len(groups)} non-empty groups "
            f"out of {n_groups} requested"
        )

    return GroupPartition(groups=groups, group_of=group_of)
