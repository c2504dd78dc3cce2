"""Extrema detection used by empirical mode decomposition."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Extrema:
    """Indices of strict interior local maxima and minima, ascending."""

    maxima: tuple[int, ...] = ()
    minima: tuple[int, ...] = ()


def find_extrema(data: Iterable[float]) -> Extrema:
    """Find strict local maxima and minima; endpoints never count."""
    values = list(data)
    maxima: list[int] = []
    minima: list[int] = []
    triples = zip(values, values[1:], values[2:])
    for index, (prev, cur, nxt) in enumerate(triples, start=1):
        if cur > prev and cur > nxt:
            maxima.append(index)
        elif cur < prev and cur < nxt:
            minima.append(index)
    return Extrema(tuple(maxima), tuple(minima))