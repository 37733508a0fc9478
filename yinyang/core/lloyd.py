# core/lloyd.py
from __future__ import annotations

from typing import Tuple

import numpy as np

from .base import KMeansBase
from .geometry import pairwise_sq_distances, safe_sqrt_array


class KMeansLloyd(KMeansBase):
    """
    Точный однопоточный KMeans (Ллойд) на NumPy.

    Эталон для Yinyang: при тех же начальных центроидах и том же числе
    итераций метки и центроиды должны совпадать. Пустой кластер сохраняет
    прежнее положение центроида.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._min_distances: np.ndarray | None = None

    def assign_clusters(self, X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        distances = pairwise_sq_distances(X, centroids)
        # argmin возвращает первый минимум: при равенстве побеждает меньший индекс
        labels = np.argmin(distances, axis=1)
        self._min_distances = distances[np.arange(X.shape[0]), labels]
        return labels

    def update_centroids(self, X: np.ndarray, labels: np.ndarray) -> np.ndarray:
        centroids = self.centroids.copy()

        for k in range(self.K):
            points = X[labels == k]
            if len(points) > 0:
                centroids[k] = points.sum(axis=0) / len(points)

        return centroids

    def _assignment_phase(self, X: np.ndarray, first: bool) -> None:
        self.labels = self.assign_clusters(X, self.centroids)

    def _update_phase(self, X: np.ndarray) -> None:
        self.centroids = self.update_centroids(X, self.labels)

    def objective_proxy(self) -> float:
        """Сумма точных расстояний до назначенных центроидов."""
        return float(np.sum(safe_sqrt_array(self._min_distances)))


def lloyd_kmeans(
    points: np.ndarray,
    centroids: np.ndarray,
    max_iters: int = 5,
    tol: float = 1e-10,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Короткий прогон точного Ллойда с ограниченным числом итераций.

    Используется для подкластеризации самих центроидов на группы.
    Останавливается, когда максимальное изменение центроидов < tol.

    Returns:
        Кортеж (labels, centroids)
    """
    model = KMeansLloyd(n_clusters=centroids.shape[0], n_iters=max_iters, tol=tol)
    model.centroids = np.array(centroids, dtype=np.float64, copy=True)

    labels = model.assign_clusters(points, model.centroids)
    for _ in range(max_iters):
        new_centroids = model.update_centroids(points, labels)
        max_change = float(np.max(np.abs(new_centroids - model.centroids)))
        model.centroids = new_centroids
        labels = model.assign_clusters(points, model.centroids)
        if max_change < tol:
            break

    return labels, model.centroids
