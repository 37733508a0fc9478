"""
Unit-тесты точного алгоритма Ллойда (эталон для Yinyang).
"""

import numpy as np

from yinyang.core.lloyd import KMeansLloyd, lloyd_kmeans


class TestKMeansLloyd:
    """Тесты базовой функциональности эталонной реализации."""

    def test_assign_clusters(self, simple_2d_dataset):
        """Тест шага назначения кластеров."""
        model = KMeansLloyd(n_clusters=2, n_iters=1)
        X, centroids = simple_2d_dataset

        labels = model.assign_clusters(X, centroids)

        assert labels.shape == (6,)
        assert labels[0] == labels[1] == labels[2] == 0
        assert labels[3] == labels[4] == labels[5] == 1

    def test_assign_clusters_tie_prefers_lower_index(self):
        """При равных расстояниях выбирается центроид с меньшим индексом."""
        model = KMeansLloyd(n_clusters=2, n_iters=1)
        X = np.array([[0.0, 0.0]])
        centroids = np.array([[1.0, 0.0], [-1.0, 0.0]])

        labels = model.assign_clusters(X, centroids)

        assert labels[0] == 0

    def test_update_centroids(self, simple_2d_dataset):
        """Тест шага обновления центроидов."""
        model = KMeansLloyd(n_clusters=2, n_iters=1)
        X, centroids = simple_2d_dataset
        model.centroids = centroids.copy()

        labels = np.array([0, 0, 0, 1, 1, 1])
        new_centroids = model.update_centroids(X, labels)

        assert new_centroids.shape == (2, 2)
        np.testing.assert_allclose(new_centroids[0], [1.0, 1.0], rtol=1e-10)
        np.testing.assert_allclose(new_centroids[1], [11.0, 11.0], rtol=1e-10)

    def test_update_centroids_empty_cluster_keeps_position(self):
        """Пустой кластер сохраняет прежнее положение центроида."""
        model = KMeansLloyd(n_clusters=3, n_iters=1)
        model.centroids = np.array([[0.0, 0.0], [5.0, 5.0], [-5.0, 3.0]])
        X = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0]])
        labels = np.array([0, 0, 0])

        new_centroids = model.update_centroids(X, labels)

        np.testing.assert_allclose(new_centroids[0], [1.0, 1.0])
        np.testing.assert_array_equal(new_centroids[1], [5.0, 5.0])
        np.testing.assert_array_equal(new_centroids[2], [-5.0, 3.0])

    def test_fit_convergence(self, small_dataset):
        """Тест полного цикла fit на простых данных."""
        model = KMeansLloyd(n_clusters=2, n_iters=10)
        X, initial_centroids = small_dataset

        result = model.fit(X, initial_centroids)

        assert result.centroids.shape == (2, 2)
        assert result.labels.shape == (60,)
        assert np.all((result.labels >= 0) & (result.labels < 2))
        assert result.converged
        assert result.inertia > 0

        assert model.t_assign_total > 0
        assert model.t_update_total > 0
        assert abs(model.t_iter_total - (model.t_assign_total + model.t_update_total)) < 1e-6

    def test_fit_respects_iteration_cap(self, medium_dataset):
        """Без сходимости fit останавливается на n_iters и сообщает об этом флагом."""
        X, initial_centroids = medium_dataset
        model = KMeansLloyd(n_clusters=3, n_iters=1, tol=0.0)

        result = model.fit(X, initial_centroids)

        assert result.n_iter == 1
        assert model.centroids.shape == (3, 10)
        assert model.centroids.dtype == np.float64


class TestLloydKMeansHelper:
    """Тесты короткого прогона, используемого для группировки центроидов."""

    def test_separates_two_groups(self):
        points = np.array([[0.0], [0.1], [0.2], [10.0], [10.1]])
        seeds = np.array([[0.0], [10.0]])

        labels, centroids = lloyd_kmeans(points, seeds, max_iters=5)

        np.testing.assert_array_equal(labels, [0, 0, 0, 1, 1])
        np.testing.assert_allclose(centroids, [[0.1], [10.05]])

    def test_zero_iterations_only_assigns(self):
        points = np.array([[0.0], [4.0]])
        seeds = np.array([[1.0], [3.0]])

        labels, centroids = lloyd_kmeans(points, seeds, max_iters=0)

        np.testing.assert_array_equal(labels, [0, 1])
        np.testing.assert_array_equal(centroids, seeds)
