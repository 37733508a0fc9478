from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import numpy as np

from yinyang.errors import InvalidConfigError
from yinyang.core.geometry import sum_of_squares
from yinyang.data.validation import validate_inputs
from yinyang.metrics.timers import Timer


@dataclass
class KMeansResult:
    """Итог одного вызова fit(...)."""

    centroids: np.ndarray
    labels: np.ndarray
    inertia: float  # точная сумма квадратов расстояний
    n_iter: int
    converged: bool


class KMeansBase(ABC):
    """
    Базовый класс для реализаций KMeans.

    Отвечает за цикл итераций, критерий сходимости и сбор таймингов:
    - T_назначения: время фазы назначения (assignment phase);
    - T_обновления: время фазы обновления центроидов и дрейфов;
    - T_итерации: сумма двух предыдущих.

    Первый проход (назначение + обновление) выполняется до цикла и не
    входит в n_iters. Сходимость проверяется по суррогату J
    (``objective_proxy``): |J - J_prev| <= tol * J.
    """

    def __init__(
        self,
        n_clusters: int,
        n_iters: int = 300,
        tol: float = 1e-6,
        logger: Any | None = None,
    ):
        if n_iters < 0:
            raise InvalidConfigError(f"n_iters must be non-negative, got {n_iters}")
        if tol < 0:
            raise InvalidConfigError(f"tol must be non-negative, got {tol}")

        self.K = n_clusters
        self.n_iters = n_iters
        self.tol = tol
        self.logger = logger

        self.centroids: np.ndarray | None = None
        self.labels: np.ndarray | None = None
        self.inertia: float | None = None
        self.converged: bool = False

        # агрегированные тайминги за один вызов fit(...)
        self.t_assign_total: float = 0.0
        self.t_update_total: float = 0.0
        self.t_iter_total: float = 0.0

        # Реальное количество выполненных итераций
        self.n_iters_actual: int = 0

    def fit(self, X: np.ndarray, initial_centroids: np.ndarray) -> KMeansResult:
        """
        Основной цикл KMeans с остановкой по сходимости или по n_iters.

        Несходимость за n_iters не является ошибкой: результат содержит
        флаг converged=False.
        """
        validate_inputs(X, initial_centroids, self.K)

        X = np.ascontiguousarray(X, dtype=np.float64)
        self.centroids = np.array(initial_centroids, dtype=np.float64, copy=True)

        # сбрасываем накопленные тайминги для нового запуска
        self.t_assign_total = 0.0
        self.t_update_total = 0.0
        self.t_iter_total = 0.0
        self.n_iters_actual = 0
        self.converged = False

        self._setup(X)
        try:
            self._timed_pass(X, first=True)
            J_previous = self.objective_proxy()

            for i in range(self.n_iters):
                t_assign_elapsed, t_update_elapsed = self._timed_pass(X, first=False)
                self.n_iters_actual = i + 1

                J = self.objective_proxy()
                converged = abs(J - J_previous) <= self.tol * J
                J_previous = J

                if self.logger and (i == 0 or (i + 1) % 10 == 0 or converged):
                    status = " (converged)" if converged else ""
                    self.logger.info(
                        f"  Iteration {i + 1}/{self.n_iters}{status} "
                        f"(T_assign={t_assign_elapsed:.6f}s, "
                        f"T_update={t_update_elapsed:.6f}s, "
                        f"J={J:.6e})"
                    )

                if converged:
                    self.converged = True
                    if self.logger:
                        self.logger.info(
                            f"  Convergence reached after {i + 1} iterations "
                            f"(J={J:.6e}, tol={self.tol:.2e})"
                        )
                    break

            self.inertia = sum_of_squares(X, self.labels, self.centroids)
        finally:
            self._teardown()

        return KMeansResult(
            centroids=self.centroids.copy(),
            labels=self.labels.copy(),
            inertia=self.inertia,
            n_iter=self.n_iters_actual,
            converged=self.converged,
        )

    def _timed_pass(self, X: np.ndarray, first: bool) -> tuple[float, float]:
        with Timer() as t_assign:
            self._assignment_phase(X, first)
        with Timer() as t_update:
            self._update_phase(X)

        self.t_assign_total += t_assign.elapsed
        self.t_update_total += t_update.elapsed
        self.t_iter_total += t_assign.elapsed + t_update.elapsed
        return t_assign.elapsed, t_update.elapsed

    def _setup(self, X: np.ndarray) -> None:
        """Аллокация состояния перед первым проходом."""

    def _teardown(self) -> None:
        """Освобождение ресурсов после fit (вызывается всегда)."""

    @abstractmethod
    def _assignment_phase(self, X: np.ndarray, first: bool) -> None:
        """Фаза назначения точек кластерам; обновляет self.labels."""
        raise NotImplementedError

    @abstractmethod
    def _update_phase(self, X: np.ndarray) -> None:
        """Фаза обновления центроидов по результатам назначения."""
        raise NotImplementedError

    @abstractmethod
    def objective_proxy(self) -> float:
        """Суррогат целевой функции для критерия сходимости."""
        raise NotImplementedError
