import logging
import time
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from yinyang.errors import InvalidConfigError
from yinyang.metrics.metrics import pruning_ratio, throughput
from yinyang.metrics.timers import Timer
from yinyang.utils.logging import format_run_prefix


class _PrefixedLogger:
    """Обёртка над логгером, добавляющая префикс к каждому сообщению."""

    def __init__(self, base_logger: logging.Logger | None, prefix: str) -> None:
        self._base = base_logger
        self._prefix = prefix

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._base:
            self._base.info(f"{self._prefix} {msg}", *args, **kwargs)


class ExperimentRunner:
    """
    Запускает серию прогонов одной реализации KMeans на одном датасете.

    Ожидается, что снаружи будет передан:
    - dataset: экземпляр Dataset
    - model_factory: callable, создающий модель KMeans по n_clusters и logger
    """

    def __init__(
        self,
        dataset: Any,
        model_factory: Callable[..., Any],
        logger: logging.Logger | None = None,
        name: str = "model",
    ) -> None:
        self.dataset = dataset
        self.model_factory = model_factory
        self.logger = logger
        self.name = name

        meta: Dict[str, Any] = self.dataset.dataset_info
        self._dataset_prefix = format_run_prefix(meta, name)

    def _create_model(self) -> Any:
        """Создаёт новую модель под K текущего датасета."""
        K = self.dataset.dataset_info["K"]
        logger = _PrefixedLogger(self.logger, self._dataset_prefix)
        return self.model_factory(n_clusters=K, logger=logger)

    def run(
        self,
        repeats: int = 5,
        warmup: int = 1,
        max_seconds: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Запускает несколько прогонов KMeans с таймингом.

        :param repeats: количество измеряемых прогонов
        :param warmup: количество «разогревочных» запусков
        :param max_seconds: лимит времени на warmup + замеры; при прогнозе
            превышения цикл прерывается досрочно
        :return: словарь с агрегированной статистикой и результатом
            последнего прогона (labels, centroids, inertia)
        """
        if repeats < 1:
            raise InvalidConfigError(f"repeats must be positive, got {repeats}")

        X = self.dataset.X
        centroids = self.dataset.initial_centroids
        meta = self.dataset.dataset_info

        if self.logger:
            self.logger.info(f"{self._dataset_prefix} Warmup x{warmup}")

        warmup_start = time.perf_counter()
        for _ in range(warmup):
            self._create_model().fit(X, centroids)
        warmup_elapsed = time.perf_counter() - warmup_start

        times: List[float] = []
        runs: List[Dict[str, Any]] = []
        result = None
        estimated = False

        for run_idx in range(1, repeats + 1):
            model = self._create_model()
            with Timer() as t_fit:
                result = model.fit(X, centroids)
            t_fit_val = float(t_fit.elapsed)
            times.append(t_fit_val)

            n_passes = int(model.n_iters_actual) + 1
            distance_evals = int(getattr(model, "distance_evals", meta["N"] * meta["K"] * n_passes))

            runs.append(
                {
                    "run_idx": run_idx,
                    "T_fit": t_fit_val,
                    "T_assign_total": float(model.t_assign_total),
                    "T_update_total": float(model.t_update_total),
                    "T_iter_total": float(model.t_iter_total),
                    "n_iters_actual": int(model.n_iters_actual),
                    "converged": bool(result.converged),
                    "inertia": float(result.inertia),
                    "distance_evals": distance_evals,
                    "pruning_ratio": pruning_ratio(
                        distance_evals, meta["N"], meta["K"], n_passes
                    ),
                    # N*K*D*n_passes / T_fit
                    "throughput_ops": throughput(
                        meta["N"], meta["K"], meta["D"], n_passes, t_fit_val
                    ),
                }
            )

            if max_seconds is not None:
                avg_time = float(sum(times) / len(times))
                remaining = (repeats - run_idx) * avg_time
                spent = warmup_elapsed + sum(times)
                if spent + remaining > max_seconds:
                    estimated = True
                    if self.logger:
                        self.logger.warning(
                            f"{self._dataset_prefix} Early stop on time limit: "
                            f"spent={spent:.2f}s, remaining_est={remaining:.2f}s, "
                            f"limit={max_seconds:.2f}s"
                        )
                    break

        stats: Dict[str, Any] = {
            "name": self.name,
            "T_fit_avg": float(np.mean(times)),
            "T_fit_std": float(np.std(times)),
            "T_fit_min": float(np.min(times)),
            "T_assign_total_avg": float(np.mean([r["T_assign_total"] for r in runs])),
            "T_update_total_avg": float(np.mean([r["T_update_total"] for r in runs])),
            "pruning_ratio_avg": float(np.mean([r["pruning_ratio"] for r in runs])),
            "runs": runs,
            "estimated": estimated,
            "repeats_done": len(times),
            "repeats_requested": repeats,
            "warmup_seconds": warmup_elapsed,
            "result": result,
        }

        if self.logger:
            self.logger.info(
                f"{self._dataset_prefix} Timing: "
                f"T_fit_avg={stats['T_fit_avg']:.6f}s, "
                f"T_fit_std={stats['T_fit_std']:.6f}s, "
                f"T_fit_min={stats['T_fit_min']:.6f}s, "
                f"pruning_ratio_avg={stats['pruning_ratio_avg']:.3f}"
            )

        return stats
