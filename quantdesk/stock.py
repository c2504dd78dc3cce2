"""Stock listing and daily return statistics."""

from __future__ import annotations

import csv
import math
from collections.abc import Iterable, Sequence
from os import PathLike
from pathlib import Path

CODE_FILE = "A_code.csv"
"""Name of the file that lists stock codes and names."""

_PRICE_COLUMN = 2
_TRIM = " \t"


class StockNotFoundError(LookupError):
    """Raised when a stock code is not known."""


def _return_and_std(rows: Sequence[Sequence], n: int) -> tuple[float, float]:
    """Mean and standard deviation of simple returns over the last ``n`` rows.

    A negative ``n`` uses every row. When ``n`` exceeds the number of rows
    the missing prices count as zero.
    """
    size = len(rows)
    if n < 0:
        start, capacity = 0, size
    else:
        start, capacity = max(size - n, 0), n
    window = [float(row[_PRICE_COLUMN]) for row in rows[start:]]
    count = len(window)
    prices = window + [0.0] * (capacity - count)

    returns = [
        0.0 if prev == 0 else (cur - prev) / prev
        for prev, cur in zip(prices, prices[1:])
    ]
    mean = sum(returns) / count if count else math.nan
    square = sum((value - mean) ** 2 for value in returns)
    std = math.sqrt(square / (count - 1)) if count > 1 else math.nan
    return mean, std


class Stock:
    """Stock names and daily price rows, with return statistics per code."""

    def __init__(self) -> None:
        self._info: dict[str, str] = {}
        self._daily: dict[str, list[tuple]] = {}
        self._return_std: dict[str, tuple[float, float]] = {}

    def load_info(self, path: str | PathLike[str]) -> None:
        """Read stock codes and names from ``A_code.csv`` in ``path``."""
        directory = Path(path)
        if not directory.exists():
            raise FileNotFoundError(f"{directory} does not exist")
        code_file = directory / CODE_FILE
        if not code_file.is_file():
            raise FileNotFoundError(f"{code_file} does not exist")
        with code_file.open(newline="", encoding="utf-8") as handle:
            reader = csv.DictReader(handle)
            missing = {"code", "name"} - set(reader.fieldnames or ())
            if missing:
                raise ValueError(f"{code_file} lacks columns: {', '.join(sorted(missing))}")
            for record in reader:
                code = (record["code"] or "").strip(_TRIM)
                self._info[code] = (record["name"] or "").strip(_TRIM)

    def add_daily(self, code: str, rows: Iterable[Sequence]) -> None:
        """Set the daily rows of a stock; the price used is the row's third field."""
        loaded = [tuple(row) for row in rows]
        for row in loaded:
            if len(row) <= _PRICE_COLUMN:
                raise ValueError(f"daily row too short: {row!r}")
        self._daily[code] = loaded

    def calculate_return_and_std(self, n: int = -1) -> None:
        """Recompute the mean and deviation of daily returns for every stock."""
        for code, rows in self._daily.items():
            self._return_std[code] = _return_and_std(rows, n)

    def get_info(self, symbol: str) -> str:
        """Return the name of a stock."""
        try:
            return self._info[symbol]
        except KeyError:
            raise StockNotFoundError(f"no stock {symbol}") from None

    def get_return_std(self) -> dict[str, tuple[float, float]]:
        """Recompute and return ``code -> (mean return, deviation)``."""
        self.calculate_return_and_std()
        return dict(self._return_std)