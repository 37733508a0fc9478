"""
Таймеры для измерения длительности фаз KMeans.

Timer использует time.perf_counter() и может переиспользоваться:
``elapsed`` хранит длительность последнего замера, ``total`` — сумму
всех замеров этим экземпляром.
"""
from __future__ import annotations

import time
from typing import Any


class Timer:
    """
    Контекстный менеджер для измерения времени выполнения кода.

    Пример использования:
        with Timer() as t:
            model.fit(X, centroids)
        elapsed_time = t.elapsed
    """

    def __init__(self) -> None:
        self.start: float = 0.0
        self.end: float = 0.0
        self.elapsed: float = 0.0
        self.total: float = 0.0
        self.count: int = 0

    def __enter__(self) -> Timer:
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end = time.perf_counter()
        self.elapsed = self.end - self.start
        self.total += self.elapsed
        self.count += 1
