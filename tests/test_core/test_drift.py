"""
Тесты обновления центроидов и вычисления дрейфа.
"""

import numpy as np

from yinyang.core.drift import calculate_centroids_movement, merge_accumulators
from yinyang.core.groups import GroupPartition


def _two_groups():
    return GroupPartition(
        groups=[np.array([0, 2]), np.array([1])],
        group_of=np.array([0, 1, 0]),
    )


class TestMergeAccumulators:
    def test_last_slot_is_elementwise_sum(self):
        sums = np.zeros((3, 2, 2))
        counts = np.zeros((3, 2), dtype=np.int64)
        sums[0] = [[1.0, 2.0], [3.0, 4.0]]
        sums[1] = [[10.0, 20.0], [0.0, 0.0]]
        counts[0] = [1, 1]
        counts[1] = [2, 0]
        # мусор в сводном слоте перезаписывается
        sums[2] = 99.0
        counts[2] = 99

        merge_accumulators(sums, counts)

        np.testing.assert_array_equal(sums[2], [[11.0, 22.0], [3.0, 4.0]])
        np.testing.assert_array_equal(counts[2], [3, 1])
        # слоты воркеров не меняются
        np.testing.assert_array_equal(counts[0], [1, 1])


class TestCentroidsMovement:
    def test_new_positions_and_drifts(self):
        centroids = np.array([[0.0, 0.0], [1.0, 1.0], [5.0, 5.0]])
        sums = np.array([[6.0, 8.0], [2.0, 2.0], [10.0, 10.0]])
        counts = np.array([2, 2, 2])
        p = np.zeros(3)
        gd = np.zeros(2)

        calculate_centroids_movement(centroids, sums, counts, _two_groups(), p, gd)

        np.testing.assert_allclose(centroids, [[3.0, 4.0], [1.0, 1.0], [5.0, 5.0]])
        np.testing.assert_allclose(p, [5.0, 0.0, 0.0])
        np.testing.assert_allclose(gd, [5.0, 0.0])

    def test_empty_centroid_is_frozen_with_zero_drift(self):
        centroids = np.array([[0.0, 0.0], [7.0, -3.0], [5.0, 5.0]])
        sums = np.array([[2.0, 0.0], [0.0, 0.0], [12.0, 10.0]])
        counts = np.array([1, 0, 2])
        p = np.full(3, -1.0)
        gd = np.full(2, -1.0)

        calculate_centroids_movement(centroids, sums, counts, _two_groups(), p, gd)

        np.testing.assert_array_equal(centroids[1], [7.0, -3.0])
        assert p[1] == 0.0
        assert gd[1] == 0.0
        np.testing.assert_allclose(p[[0, 2]], [2.0, 1.0])
        np.testing.assert_allclose(gd[0], 2.0)

    def test_group_drift_is_max_member_drift(self):
        rng = np.random.default_rng(0)
        centroids = rng.normal(size=(3, 4))
        old = centroids.copy()
        counts = np.array([3, 1, 2])
        sums = rng.normal(size=(3, 4)) * counts[:, None]
        p = np.zeros(3)
        gd = np.zeros(2)

        calculate_centroids_movement(centroids, sums, counts, _two_groups(), p, gd)

        np.testing.assert_allclose(p, np.linalg.norm(centroids - old, axis=1))
        assert gd[0] == max(p[0], p[2])
        assert gd[1] == p[1]

    def test_unchanged_accumulators_give_zero_drift(self):
        centroids = np.array([[1.0, 1.0], [2.0, 2.0], [3.0, 3.0]])
        sums = np.array([[2.0, 2.0], [6.0, 6.0], [3.0, 3.0]])
        counts = np.array([2, 3, 1])
        p = np.zeros(3)
        gd = np.zeros(2)

        calculate_centroids_movement(centroids, sums, counts, _two_groups(), p, gd)
        first = centroids.copy()
        calculate_centroids_movement(centroids, sums, counts, _two_groups(), p, gd)

        np.testing.assert_array_equal(centroids, first)
        np.testing.assert_array_equal(p, 0.0)
        np.testing.assert_array_equal(gd, 0.0)
