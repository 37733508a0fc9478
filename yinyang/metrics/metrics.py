"""
Метрики для сравнения Yinyang k-means с точным алгоритмом Ллойда.

Ускорение и эффективность считаются по времени, доля отсечённых
вычислений — по счётчикам точных расстояний.
"""

from __future__ import annotations


def speedup(t_baseline: float, t_accelerated: float) -> float:
    """
    Вычисляет ускорение относительно базовой реализации.

    Args:
        t_baseline: Время выполнения базовой реализации (Ллойд)
        t_accelerated: Время выполнения ускоренной реализации

    Returns:
        Значение ускорения (speedup = t_baseline / t_accelerated)

    Raises:
        ZeroDivisionError: Если t_accelerated равно нулю
    """
    if t_accelerated == 0:
        raise ZeroDivisionError("Accelerated time cannot be zero")
    return t_baseline / t_accelerated


def efficiency(speedup: float, p: int) -> float:
    """
    Параллельная эффективность (speedup / p), идеальное значение 1.0.

    Raises:
        ZeroDivisionError: Если p равно нулю
    """
    if p == 0:
        raise ZeroDivisionError("Number of processes cannot be zero")
    return speedup / p


def throughput(
    N: int, K: int, D: int, n_iters: int, total_time: float
) -> float:
    """
    Пропускная способность = (N × K × D × n_iters) / total_time.

    Для Yinyang это «эквивалентная» пропускная способность: число операций
    точного алгоритма, делённое на фактическое время.

    Raises:
        ZeroDivisionError: Если total_time равно нулю
    """
    if total_time == 0:
        raise ZeroDivisionError("Total time cannot be zero")
    return (N * K * D * n_iters) / total_time


def pruning_ratio(distance_evals: int, N: int, K: int, n_passes: int) -> float:
    """
    Доля точных вычислений расстояний, которых удалось избежать.

    Точный алгоритм выполняет N × K вычислений за проход; значение 0.0
    означает отсутствие отсечения, значение близкое к 1.0 — почти полное.

    Args:
        distance_evals: Фактическое число точных вычислений расстояний
        N: Количество точек
        K: Количество кластеров
        n_passes: Количество проходов назначения

    Raises:
        ZeroDivisionError: Если N * K * n_passes равно нулю
    """
    full = N * K * n_passes
    if full == 0:
        raise ZeroDivisionError("Full scan size cannot be zero")
    return 1.0 - distance_evals / full
