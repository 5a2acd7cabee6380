"""Ordinary least squares trend over an index-based x axis."""

from __future__ import annotations

from typing import Sequence


def ols_slope(values: Sequence[float]) -> float:
    """Slope of ``values`` regressed against positions ``1..n``.

    Fewer than two points carry no trend and yield ``0.0``.
    """
    n = len(values)
    if n < 2:
        return 0.0
    sum_x = n * (n + 1) / 2
    sum_x2 = n * (n + 1) * (2 * n + 1) / 6
    sum_y = 0.0
    sum_xy = 0.0
    for index, value in enumerate(values, start=1):
        sum_y += value
        sum_xy += index * value
    return (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
