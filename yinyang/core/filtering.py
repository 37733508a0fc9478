"""
Назначение точек с отсечением по границам (шаги 3.2–3.3 Yinyang k-means).

Для каждой точки последовательно применяются всё более дорогие фильтры:

1. ослабление границ на дрейф: ub += p[label], lb[g] -= gd[g];
2. глобальный фильтр: ub < min_g lb[g] — точка пропускается;
3. уточнение ub точным расстоянием до своего центроида и повторная проверка;
4. локальный фильтр своей группы: центроид c пропускается, если
   ub < lb_до_дрейфа - p[c];
5. групповой фильтр остальных групп: группа пропускается целиком, если
   лучшее найденное расстояние < lb[g], иначе внутри неё работает
   локальный фильтр;
6. фиксация метки и перенос точки между локальными аккумуляторами.

Сравнения ведутся по квадратам расстояний; корень извлекается только
при записи границы.
"""

from __future__ import annotations

import math

import numpy as np

from .geometry import safe_sqrt, sq_distance
from .groups import GroupPartition


def chunk_update(
    X: np.ndarray,
    centroids: np.ndarray,
    partition: GroupPartition,
    p: np.ndarray,
    gd: np.ndarray,
    labels: np.ndarray,
    ub: np.ndarray,
    lb: np.ndarray,
    sums: np.ndarray,
    counts: np.ndarray,
    mask: np.ndarray,
    r: range,
) -> int:
    """
    Обновляет метки, границы и локальные аккумуляторы для точек диапазона r.

    Args:
        X: Точки (N, D), только чтение
        centroids: Текущие центроиды (K, D), только чтение
        partition: Разбиение центроидов на группы
        p: Дрейф центроидов за последнее обновление (K,)
        gd: Максимальный дрейф групп (t,)
        labels, ub: Метки и верхние границы (N,), пишутся только в пределах r
        lb: Нижние границы (t, N), пишутся только столбцы из r
        sums, counts: Аккумуляторы воркера (K, D) и (K,)
        mask: Буфер воркера (K,) отметок уже посчитанных центроидов
        r: Диапазон индексов точек воркера

    Returns:
        Количество выполненных точных вычислений расстояний.
    """
    groups = partition.groups
    group_of = partition.group_of
    n_evals = 0

    for i in range(r.start, r.stop):
        # ослабление границ на дрейф центроидов
        label = int(labels[i])
        ub[i] += p[label]
        ubx = float(ub[i])
        lb[:, i] -= gd
        lbx = float(lb[:, i].min())

        # глобальный фильтр
        if ubx < lbx:
            continue

        # уточнение верхней границы
        x = X[i]
        ubx2 = sq_distance(x, centroids[label])
        n_evals += 1
        ubx = safe_sqrt(ubx2)
        ub[i] = ubx
        if ubx < lbx:
            continue

        mask[:] = False
        old_label = label
        orig_group = int(group_of[label])

        # локальный фильтр в группе текущей метки
        new_lb = float(lb[orig_group, i])
        if ubx >= new_lb:
            mask[old_label] = True
            members = groups[orig_group]
            old_lb = new_lb + gd[orig_group]  # значение до ослабления
            new_lb2 = math.inf
            for c in members:
                if c == old_label or ubx < old_lb - p[c]:
                    continue
                mask[c] = True
                dist = sq_distance(x, centroids[c])
                n_evals += 1
                if dist < ubx2 or (dist == ubx2 and c < label):
                    new_lb2 = ubx2
                    ubx2 = dist
                    ubx = safe_sqrt(dist)
                    label = int(c)
                elif dist < new_lb2:
                    new_lb2 = dist
            new_lb2, evals = _refine_lower_bound(
                x, centroids, p, members, mask, old_lb, new_lb2
            )
            n_evals += evals
            lb[orig_group, i] = safe_sqrt(new_lb2)

        # групповой фильтр остальных групп
        for gi, members in enumerate(groups):
            if gi == orig_group:
                continue
            if ubx < lb[gi, i]:
                continue
            old_lb = lb[gi, i] + gd[gi]
            new_lb2 = math.inf
            for c in members:
                # локальный фильтр
                if ubx < old_lb - p[c]:
                    continue
                mask[c] = True
                dist = sq_distance(x, centroids[c])
                n_evals += 1
                if dist < ubx2 or (dist == ubx2 and c < label):
                    # лучший кандидат покидает свою группу: её граница
                    # становится прежним лучшим расстоянием
                    if group_of[label] != gi:
                        lb[group_of[label], i] = ubx
                    new_lb2 = ubx2
                    ubx2 = dist
                    ubx = safe_sqrt(dist)
                    label = int(c)
                elif dist < new_lb2:
                    new_lb2 = dist
            new_lb2, evals = _refine_lower_bound(
                x, centroids, p, members, mask, old_lb, new_lb2
            )
            n_evals += evals
            lb[gi, i] = safe_sqrt(new_lb2)

        # назначение
        ub[i] = ubx
        if old_label != label:
            labels[i] = label
            counts[label] += 1
            counts[old_label] -= 1
            sums[label] += x
            sums[old_label] -= x

    return n_evals


def _refine_lower_bound(
    x: np.ndarray,
    centroids: np.ndarray,
    p: np.ndarray,
    members: np.ndarray,
    mask: np.ndarray,
    old_lb: float,
    new_lb2: float,
) -> tuple[float, int]:
    """
    Досчитывает вторую по близости дистанцию группы среди непосещённых
    центроидов, которые могут оказаться ближе текущей оценки new_lb2.
    """
    n_evals = 0
    new_lb = safe_sqrt(new_lb2) if new_lb2 < math.inf else math.inf
    for c in members:
        if mask[c] or new_lb < old_lb - p[c]:
            continue
        dist = sq_distance(x, centroids[c])
        n_evals += 1
        if dist < new_lb2:
            new_lb2 = dist
            new_lb = safe_sqrt(dist)
    return new_lb2, n_evals
