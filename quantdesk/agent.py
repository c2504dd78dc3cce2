"""Turning classifier scores into holding signals."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

_BUY_THRESHOLD = 0.75
_SELL_THRESHOLD = 0.25


@dataclass(frozen=True)
class Signal:
    """Desired holding for a symbol: 1 long, -1 short, 0 flat."""

    symbol: Any
    hold: int


def hold_from_score(score: float) -> int:
    """Map a classifier probability to a holding direction."""
    if score > _BUY_THRESHOLD:
        return 1
    if score < _SELL_THRESHOLD:
        return -1
    return 0


def signals_from_scores(symbols: Iterable[Any], scores: Iterable[float]) -> list[Signal]:
    """Pair each symbol with the signal of its score, in order."""
    return [
        Signal(symbol, hold_from_score(score))
        for symbol, score in zip(symbols, scores, strict=True)
    ]