from __future__ import annotations

from dataclasses import dataclass
from multiprocessing import Pool, RawArray, cpu_count
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from yinyang.errors import InvalidConfigError

from .bounds import chunk_initialize
from .filtering import chunk_update
from .geometry import make_chunks
from .groups import GroupPartition


@dataclass(frozen=True)
class MultiprocessingConfig:
    """Параметры многопроцессорного выполнения фаз."""

    n_processes: int = 4
    chunk_size: Optional[int] = None

    def __post_init__(self) -> None:
        if self.n_processes < 1:
            raise InvalidConfigError(
                f"n_processes must be positive, got {self.n_processes}"
            )
        if self.chunk_size is not None and self.chunk_size <= 0:
            raise InvalidConfigError("chunk_size must be positive")


@dataclass
class YinyangState:
    """
    Состояние Yinyang k-means, изменяемое фазами назначения.

    sums (W + 1, K, D) и counts (W + 1, K): слоты 0..W-1 принадлежат
    воркерам, последний слот — сводный. distance_evals (W,) — счётчики
    точных вычислений расстояний по воркерам.
    """

    labels: np.ndarray
    ub: np.ndarray
    lb: np.ndarray
    sums: np.ndarray
    counts: np.ndarray
    distance_evals: np.ndarray
    p: np.ndarray
    gd: np.ndarray


class _WorkerContext:
    """Представления общих массивов и личный буфер mask одного воркера."""

    def __init__(self, arrays: Dict[str, np.ndarray], partition: GroupPartition) -> None:
        self.X = arrays["X"]
        self.labels = arrays["labels"]
        self.ub = arrays["ub"]
        self.lb = arrays["lb"]
        self.sums = arrays["sums"]
        self.counts = arrays["counts"]
        self.distance_evals = arrays["distance_evals"]
        self.partition = partition
        self._mask: np.ndarray | None = None

    def mask(self, K: int) -> np.ndarray:
        # буфер выделяется один раз и переиспользуется для всех точек
        if self._mask is None or self._mask.shape[0] != K:
            self._mask = np.zeros(K, dtype=bool)
        return self._mask


def _run_initialize(
    ctx: _WorkerContext, chunk_id: int, r: range, centroids: np.ndarray
) -> None:
    chunk_initialize(
        ctx.X, centroids, ctx.partition,
        ctx.labels, ctx.ub, ctx.lb,
        ctx.sums[chunk_id], ctx.counts[chunk_id],
        r,
    )
    ctx.distance_evals[chunk_id] += len(r) * centroids.shape[0]


def _run_update(
    ctx: _WorkerContext,
    chunk_id: int,
    r: range,
    centroids: np.ndarray,
    p: np.ndarray,
    gd: np.ndarray,
) -> None:
    n_evals = chunk_update(
        ctx.X, centroids, ctx.partition, p, gd,
        ctx.labels, ctx.ub, ctx.lb,
        ctx.sums[chunk_id], ctx.counts[chunk_id],
        ctx.mask(centroids.shape[0]),
        r,
    )
    ctx.distance_evals[chunk_id] += n_evals


# --- Глобальное состояние воркера пула: представления shared-массивов ---
_CONTEXT: _WorkerContext | None = None


def _init_shared_state(
    buffers: Dict[str, Tuple[Any, Tuple[int, ...], str]],
    partition: GroupPartition,
) -> None:
    """Инициализатор пула: регистрирует shared-массивы в процессе."""
    global _CONTEXT
    arrays = {name: _view(raw, shape, dtype) for name, (raw, shape, dtype) in buffers.items()}
    _CONTEXT = _WorkerContext(arrays, partition)


def _initialize_chunk_worker(args: Tuple[int, range, np.ndarray]) -> None:
    assert _CONTEXT is not None
    _run_initialize(_CONTEXT, *args)


def _update_chunk_worker(
    args: Tuple[int, range, np.ndarray, np.ndarray, np.ndarray]
) -> None:
    assert _CONTEXT is not None
    _run_update(_CONTEXT, *args)


def _view(raw: Any, shape: Tuple[int, ...], dtype: str) -> np.ndarray:
    return np.frombuffer(raw, dtype=np.dtype(dtype)).reshape(shape)


def _shared_zeros(shape: Tuple[int, ...], dtype: str) -> Tuple[Any, np.ndarray]:
    """RawArray нужного размера и NumPy-представление над ним."""
    typecode = {"float64": "d", "int64": "q"}[dtype]
    raw = RawArray(typecode, int(np.prod(shape)))
    view = _view(raw, shape, dtype)
    view[...] = 0
    return raw, view


class PhaseExecutor:
    """
    Разбиение точек на непрерывные чанки и выполнение фаз на них.

    Каждый чанк закреплён за одним слотом аккумуляторов на всё время
    работы. При n_processes == 1 фазы выполняются в текущем процессе,
    иначе — в пуле процессов над shared-массивами (RawArray). Pool.map
    возвращается только после завершения всех чанков, это и есть барьер
    между фазами.
    """

    def __init__(self, mp: MultiprocessingConfig = MultiprocessingConfig()) -> None:
        self.mp = mp
        self.n_procs = max(1, min(int(mp.n_processes), cpu_count()))

        self._pool: Optional[Pool] = None
        self._chunks: Optional[List[range]] = None
        self._ctx: Optional[_WorkerContext] = None

    @property
    def chunks(self) -> List[range]:
        assert self._chunks is not None
        return self._chunks

    def start(self, X: np.ndarray, K: int, partition: GroupPartition) -> YinyangState:
        """Выделяет состояние и, при необходимости, поднимает пул."""
        N, D = X.shape
        t = partition.n_groups

        self._chunks = make_chunks(N, self.n_procs, self.mp.chunk_size)
        W = len(self._chunks)

        shapes: Dict[str, Tuple[Tuple[int, ...], str]] = {
            "labels": ((N,), "int64"),
            "ub": ((N,), "float64"),
            "lb": ((t, N), "float64"),
            "sums": ((W + 1, K, D), "float64"),
            "counts": ((W + 1, K), "int64"),
            "distance_evals": ((W,), "int64"),
        }

        if self.n_procs == 1:
            arrays = {name: np.zeros(shape, dtype=dtype) for name, (shape, dtype) in shapes.items()}
            arrays["X"] = X
        else:
            buffers: Dict[str, Tuple[Any, Tuple[int, ...], str]] = {}
            arrays = {}
            for name, (shape, dtype) in {"X": ((N, D), "float64"), **shapes}.items():
                raw, view = _shared_zeros(shape, dtype)
                buffers[name] = (raw, shape, dtype)
                arrays[name] = view
            # Копируем X один раз в shared RawArray
            arrays["X"][:] = X

            # Пул инициализирует ссылки на shared-массивы в каждом процессе
            self._pool = Pool(
                processes=self.n_procs,
                initializer=_init_shared_state,
                initargs=(buffers, partition),
            )

        self._ctx = _WorkerContext(arrays, partition)

        return YinyangState(
            labels=arrays["labels"],
            ub=arrays["ub"],
            lb=arrays["lb"],
            sums=arrays["sums"],
            counts=arrays["counts"],
            distance_evals=arrays["distance_evals"],
            p=np.zeros(K, dtype=np.float64),
            gd=np.zeros(t, dtype=np.float64),
        )

    def initialize(self, centroids: np.ndarray) -> None:
        """Фаза начальных границ по всем чанкам."""
        args = [(chunk_id, r, centroids) for chunk_id, r in enumerate(self.chunks)]
        if self._pool is None:
            for a in args:
                _run_initialize(self._ctx, *a)
        else:
            self._pool.map(_initialize_chunk_worker, args)

    def update(self, centroids: np.ndarray, p: np.ndarray, gd: np.ndarray) -> None:
        """Фаза назначения с отсечением по всем чанкам."""
        args = [(chunk_id, r, centroids, p, gd) for chunk_id, r in enumerate(self.chunks)]
        if self._pool is None:
            for a in args:
                _run_update(self._ctx, *a)
        else:
            self._pool.map(_update_chunk_worker, args)

    def close(self) -> None:
        """Закрыть пул (состояние в родительском процессе остаётся доступным)."""
        if self._pool is not None:
            self._pool.close()
            self._pool.join()
        self._pool = None
