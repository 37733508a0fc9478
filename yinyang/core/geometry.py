"""
Геометрические и индексные помощники, общие для всех фаз Yinyang k-means.

Все сравнения внутри алгоритма выполняются по квадратам расстояний,
корень извлекается только при сохранении границы.
"""

from __future__ import annotations

import math
from typing import List, Optional

import numpy as np


def sq_distance(x: np.ndarray, c: np.ndarray) -> float:
    """Квадрат евклидова расстояния между двумя векторами."""
    diff = x - c
    return float(np.dot(diff, diff))


def pairwise_sq_distances(X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Матрица квадратов расстояний (M, K) между точками и центроидами."""
    # (M, K, D) → (M, K)
    diff = X[:, None, :] - centroids[None, :, :]
    return np.einsum("mkd,mkd->mk", diff, diff, optimize=True)


def safe_sqrt(value: float) -> float:
    """Корень с отсечением микроскопических отрицательных значений."""
    return math.sqrt(value) if value > 0.0 else 0.0


def safe_sqrt_array(values: np.ndarray) -> np.ndarray:
    return np.sqrt(np.maximum(values, 0.0))


def make_chunks(
    N: int, n_chunks: int, chunk_size: Optional[int] = None
) -> List[range]:
    """
    Разбиение индексов [0, N) на непрерывные диапазоны.

    Каждый диапазон закрепляется за одним воркером на всё время работы,
    поэтому возвращаются ``range``, а не массивы индексов.
    """
    if chunk_size is None:
        bounds = np.linspace(0, N, max(1, n_chunks) + 1).astype(np.int64)
        chunks = [range(int(a), int(b)) for a, b in zip(bounds[:-1], bounds[1:])]
    else:
        cs = int(chunk_size)
        chunks = [range(i, min(i + cs, N)) for i in range(0, N, cs)]
    return [r for r in chunks if len(r) > 0]


def rangify(values: np.ndarray) -> List[range]:
    """
    Превращает отсортированную последовательность меток в список
    непрерывных диапазонов позиций с одинаковым значением.

    >>> rangify(np.array([0, 0, 2, 2, 2, 5]))
    [range(0, 2), range(2, 5), range(5, 6)]
    """
    values = np.asarray(values)
    if values.size == 0:
        return []
    breaks = np.flatnonzero(values[1:] != values[:-1]) + 1
    starts = np.concatenate(([0], breaks))
    stops = np.concatenate((breaks, [values.size]))
    return [range(int(a), int(b)) for a, b in zip(starts, stops)]


def sum_of_squares(
    X: np.ndarray, labels: np.ndarray, centroids: np.ndarray
) -> float:
    """Точная сумма квадратов расстояний точек до назначенных центроидов."""
    diff = X - centroids[labels]
    return float(np.einsum("nd,nd->", diff, diff, optimize=True))
