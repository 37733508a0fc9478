"""
Валидация входных данных перед запуском KMeans.

Проверки быстрые и выполняются до любой аллокации состояния: при ошибке
вычисления не начинаются.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from yinyang.errors import (
    DimensionMismatchError,
    EmptyDatasetError,
    InvalidClusterCountError,
)

if TYPE_CHECKING:
    from yinyang.data.dataset import Dataset


def validate_inputs(X: np.ndarray, centroids: np.ndarray, n_clusters: int) -> None:
    """
    Проверяет согласованность точек, начальных центроидов и K.

    Args:
        X: Матрица точек (N, D)
        centroids: Начальные центроиды (K, D)
        n_clusters: Ожидаемое количество кластеров

    Raises:
        InvalidClusterCountError: K <= 0 или centroids.shape[0] != K
        EmptyDatasetError: N == 0 или D == 0
        DimensionMismatchError: массивы не двумерные или D не совпадает
    """
    if n_clusters <= 0:
        raise InvalidClusterCountError(f"n_clusters must be positive, got {n_clusters}")

    X = np.asarray(X)
    centroids = np.asarray(centroids)

    if X.ndim != 2:
        raise DimensionMismatchError(f"X must be 2-dimensional, got shape {X.shape}")
    if X.shape[0] == 0 or X.shape[1] == 0:
        raise EmptyDatasetError(f"X must contain at least one point, got shape {X.shape}")
    if centroids.ndim != 2:
        raise DimensionMismatchError(
            f"centroids must be 2-dimensional, got shape {centroids.shape}"
        )
    if centroids.shape[0] != n_clusters:
        raise InvalidClusterCountError(
            f"Expected {n_clusters} initial centroids, got {centroids.shape[0]}"
        )
    if centroids.shape[1] != X.shape[1]:
        raise DimensionMismatchError(
            f"Dimension mismatch: X has D={X.shape[1]}, "
            f"centroids have D={centroids.shape[1]}"
        )


def validate_dataset(dataset: "Dataset") -> None:
    """
    Проверяет соответствие сгенерированного датасета его метаданным.

    Raises:
        AssertionError: Если размеры данных не соответствуют метаданным
    """
    meta = dataset.dataset_info

    assert dataset.X is not None, "Dataset data (X) is None"
    assert (
        dataset.initial_centroids is not None
    ), "Initial centroids are None"

    assert dataset.X.shape == (meta["N"], meta["D"]), (
        f"Expected X shape ({meta['N']}, {meta['D']}), got {dataset.X.shape}"
    )
    assert dataset.initial_centroids.shape == (meta["K"], meta["D"]), (
        f"Expected centroids shape ({meta['K']}, {meta['D']}), "
        f"got {dataset.initial_centroids.shape}"
    )
