"""
Обновление центроидов и их дрейф (шаг 3.1 Yinyang k-means).

Выполняется в родительском процессе строго между фазами назначения:
результаты (p, gd) только читаются следующей фазой.
"""

from __future__ import annotations

import numpy as np

from .groups import GroupPartition


def merge_accumulators(sums: np.ndarray, counts: np.ndarray) -> None:
    """
    Сводит аккумуляторы воркеров в последний (общий) слот.

    sums имеет форму (W + 1, K, D), counts — (W + 1, K); слоты 0..W-1
    принадлежат воркерам.
    """
    sums[-1] = sums[:-1].sum(axis=0)
    counts[-1] = counts[:-1].sum(axis=0)


def calculate_centroids_movement(
    centroids: np.ndarray,
    sums: np.ndarray,
    counts: np.ndarray,
    partition: GroupPartition,
    p: np.ndarray,
    gd: np.ndarray,
) -> None:
    """
    Перезаписывает centroids новыми положениями sum / count, заполняет
    дрейф центроидов p и максимальный дрейф групп gd.

    Центроид без точек остаётся на месте, его дрейф равен нулю
    (повторный посев не выполняется).

    Args:
        centroids: Центроиды (K, D), изменяются на месте
        sums: Сводные суммы координат (K, D)
        counts: Сводные количества точек (K,)
        partition: Разбиение центроидов на группы
        p: Выход, дрейф каждого центроида (K,)
        gd: Выход, максимальный дрейф в каждой группе (t,)
    """
    non_empty = counts > 0
    new_centroids = centroids.copy()
    new_centroids[non_empty] = sums[non_empty] / counts[non_empty, None]

    diff = new_centroids - centroids
    p[:] = np.sqrt(np.einsum("kd,kd->k", diff, diff))
    centroids[:] = new_centroids

    for gi, members in enumerate(partition.groups):
        gd[gi] = p[members].max()
