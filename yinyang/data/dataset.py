"""
Синтетические датасеты для экспериментов Yinyang k-means.

Данные генерируются sklearn.make_blobs, нормализуются StandardScaler,
а начальные центроиды выбираются как K различных точек датасета
(выбор начальных центроидов не является частью алгоритма).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np
from sklearn.datasets import make_blobs
from sklearn.preprocessing import StandardScaler

from yinyang.errors import InvalidClusterCountError

logger = logging.getLogger(__name__)


@dataclass
class DatasetConfig:
    """Конфигурация параметров датасета."""

    N: int
    D: int
    K: int
    cluster_std: float = 1.0
    seed: int = 42
    purpose: str | None = None


class Dataset:
    """
    Представление датасета для экспериментов K-means.

    Хранит точки X, истинные метки make_blobs и начальные центроиды;
    ``dataset_info`` содержит ключи N, D, K, seed и purpose.
    """

    def __init__(
        self,
        X: np.ndarray,
        initial_centroids: np.ndarray,
        dataset_info: dict[str, Any],
        labels_true: np.ndarray | None = None,
    ) -> None:
        self.X = X
        self.initial_centroids = initial_centroids
        self.dataset_info = dataset_info
        self.labels_true = labels_true

    @classmethod
    def from_config(cls, config: DatasetConfig) -> "Dataset":
        X, labels, _ = generate_blobs(
            config.N, config.D, config.K,
            cluster_std=config.cluster_std, seed=config.seed,
        )
        centroids = pick_initial_centroids(X, config.K, seed=config.seed)
        info = {
            "N": config.N,
            "D": config.D,
            "K": config.K,
            "seed": config.seed,
            "purpose": config.purpose or "base",
        }
        logger.info(
            f"Dataset generated: X.shape={X.shape}, "
            f"initial_centroids.shape={centroids.shape}"
        )
        return cls(X, centroids, info, labels_true=labels)


def generate_blobs(
    N: int,
    D: int,
    K: int,
    cluster_std: float = 1.0,
    seed: int = 42,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Генерация синтетического датасета с помощью make_blobs.

    Args:
        N: Количество точек
        D: Размерность пространства
        K: Количество кластеров
        cluster_std: Стандартное отклонение кластеров
        seed: Значение seed для воспроизводимости

    Returns:
        Кортеж (data, labels, centers), данные нормализованы
    """
    data, labels, centers = make_blobs(
        n_samples=N,
        n_features=D,
        centers=K,
        cluster_std=cluster_std,
        center_box=(-10.0, 10.0),
        random_state=seed,
        return_centers=True,
    )

    # Нормализация данных
    scaler = StandardScaler()
    data = scaler.fit_transform(data)
    centers = scaler.transform(centers)

    return data, labels, centers


def pick_initial_centroids(X: np.ndarray, K: int, seed: int = 42) -> np.ndarray:
    """Выбирает K различных точек X в качестве начальных центроидов."""
    if K <= 0 or K > X.shape[0]:
        raise InvalidClusterCountError(
            f"Cannot pick {K} initial centroids from {X.shape[0]} points"
        )
    rng = np.random.default_rng(seed)
    idx = rng.choice(X.shape[0], size=K, replace=False)
    return X[np.sort(idx)].copy()
