"""
Общие фикстуры для всех тестов.
"""

import numpy as np
import pytest
from sklearn.datasets import make_blobs

from yinyang.core.geometry import pairwise_sq_distances


@pytest.fixture
def small_dataset():
    """Фикстура с небольшим тестовым датасетом (2D, 2 кластера)."""
    np.random.seed(42)
    # Два явно разделённых кластера
    cluster1 = np.random.randn(30, 2) + [0, 0]
    cluster2 = np.random.randn(30, 2) + [5, 5]
    X = np.vstack([cluster1, cluster2])
    initial_centroids = np.array([
        [-1.0, -1.0],
        [6.0, 6.0],
    ])
    return X, initial_centroids


@pytest.fixture
def medium_dataset():
    """Фикстура со средним тестовым датасетом (10D, 3 кластера)."""
    np.random.seed(42)
    cluster1 = np.random.randn(50, 10) + [0] * 10
    cluster2 = np.random.randn(50, 10) + [5] * 10
    cluster3 = np.random.randn(50, 10) + [-5] * 10
    X = np.vstack([cluster1, cluster2, cluster3])
    initial_centroids = np.array([
        [-1.0] * 10,
        [6.0] * 10,
        [-6.0] * 10,
    ])
    return X, initial_centroids


@pytest.fixture
def simple_2d_dataset():
    """Фикстура с очень простым 2D датасетом для базовых тестов."""
    X = np.array([
        [0.0, 0.0],
        [1.0, 1.0],
        [2.0, 2.0],
        [10.0, 10.0],
        [11.0, 11.0],
        [12.0, 12.0],
    ])
    initial_centroids = np.array([
        [0.5, 0.5],
        [11.0, 11.0],
    ])
    return X, initial_centroids


@pytest.fixture
def three_blobs_12():
    """12 точек на плоскости: три разделённых кластера по 4 точки."""
    offsets = np.array([[-0.5, -0.5], [-0.5, 0.5], [0.5, -0.5], [0.5, 0.5]])
    centers = np.array([[0.0, 0.0], [10.0, 0.0], [0.0, 10.0]])
    X = np.vstack([c + offsets for c in centers])
    initial_centroids = X[[3, 7, 11]].copy()
    return X, initial_centroids, centers


@pytest.fixture
def many_clusters_dataset():
    """600 точек в 4D, 30 кластеров: при divider=7 получается 4 группы."""
    X, _ = make_blobs(
        n_samples=600,
        n_features=4,
        centers=30,
        cluster_std=1.5,
        center_box=(-20.0, 20.0),
        random_state=7,
    )
    rng = np.random.default_rng(7)
    idx = np.sort(rng.choice(X.shape[0], size=30, replace=False))
    return X, X[idx].copy()


@pytest.fixture
def true_distances():
    """Фабрика матрицы точных расстояний (N, K)."""

    def _distances(X, centroids):
        return np.sqrt(pairwise_sq_distances(X, centroids))

    return _distances
