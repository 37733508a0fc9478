"""
Yinyang k-means: точная замена алгоритма Ллойда с отсечением вычислений
расстояний по верхним и групповым нижним границам.

Y. Ding et al. Yinyang K-Means: A Drop-In Replacement of the Classic
K-Means with Consistent Speedup. ICML 2015.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from yinyang.data.validation import validate_inputs

from .base import KMeansBase
from .drift import calculate_centroids_movement, merge_accumulators
from .groups import GroupPartition, build_groups, group_count
from .parallel import MultiprocessingConfig, PhaseExecutor, YinyangState


@dataclass(frozen=True)
class YinyangConfig:
    """
    Параметры группировки центроидов.

    - auto / divider: t = max(1, K // divider) при auto, иначе t = 1;
    - group_iters / group_tol: лимиты подкластеризации центроидов;
    - random_state: seed выбора стартовых центров подкластеризации.
    """

    auto: bool = True
    divider: int = 7
    group_iters: int = 5
    group_tol: float = 1e-10
    random_state: int = 0


class KMeansYinyang(KMeansBase):
    """K-Means с отсечением по границам (Yinyang), фазы на пуле процессов."""

    def __init__(
        self,
        n_clusters: int,
        n_iters: int = 300,
        tol: float = 1e-6,
        config: YinyangConfig = YinyangConfig(),
        mp: MultiprocessingConfig = MultiprocessingConfig(),
        logger: Any | None = None,
    ) -> None:
        super().__init__(n_clusters=n_clusters, n_iters=n_iters, tol=tol, logger=logger)
        self.config = config
        self.mp = mp
        self.n_groups_requested = group_count(n_clusters, config.auto, config.divider)

        self.partition: GroupPartition | None = None
        self.state: YinyangState | None = None
        self._executor: PhaseExecutor | None = None

    # --- Пошаговый интерфейс ---

    def initialize(self, X: np.ndarray, initial_centroids: np.ndarray) -> None:
        """Группы, начальные границы и первое обновление центроидов."""
        validate_inputs(X, initial_centroids, self.K)
        X = np.ascontiguousarray(X, dtype=np.float64)
        self.centroids = np.array(initial_centroids, dtype=np.float64, copy=True)
        self._setup(X)
        self._assignment_phase(X, first=True)
        self._update_phase(X)

    def step(self) -> None:
        """Одна итерация: назначение с отсечением и обновление центроидов."""
        if self._executor is None or self.state is None:
            raise RuntimeError("initialize() must be called before step()")
        self._assignment_phase(None, first=False)
        self._update_phase(None)

    def close(self) -> None:
        self._teardown()

    @property
    def distance_evals(self) -> int:
        """Число точных вычислений расстояний с начала запуска."""
        return int(self.state.distance_evals.sum()) if self.state is not None else 0

    # --- Фазы ---

    def _setup(self, X: np.ndarray) -> None:
        self.partition = build_groups(
            self.centroids,
            self.n_groups_requested,
            max_iters=self.config.group_iters,
            tol=self.config.group_tol,
            random_state=self.config.random_state,
        )
        if self.logger:
            sizes = [len(g) for g in self.partition.groups]
            self.logger.info(
                f"  Yinyang groups: t={self.partition.n_groups} "
                f"(requested {self.n_groups_requested}), sizes={sizes}"
            )

        self._executor = PhaseExecutor(self.mp)
        self.state = self._executor.start(X, self.K, self.partition)

    def _teardown(self) -> None:
        if self._executor is not None:
            self._executor.close()

    def _assignment_phase(self, X: np.ndarray | None, first: bool) -> None:
        if first:
            self._executor.initialize(self.centroids)
        else:
            self._executor.update(self.centroids, self.state.p, self.state.gd)
        self.labels = self.state.labels

    def _update_phase(self, X: np.ndarray | None) -> None:
        merge_accumulators(self.state.sums, self.state.counts)
        calculate_centroids_movement(
            self.centroids,
            self.state.sums[-1],
            self.state.counts[-1],
            self.partition,
            self.state.p,
            self.state.gd,
        )

    def objective_proxy(self) -> float:
        """Сумма верхних границ, как в исходной схеме Yinyang."""
        return float(np.sum(self.state.ub))
