"""Simulated stock exchange that replays daily quotes from CSV files."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path

log = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class Quote:
    """A single quote: symbol code, epoch seconds, open and close prices."""

    symbol: str
    time: int
    open: float
    close: float


@dataclass(frozen=True)
class QuoteFilter:
    """Symbols to load; an empty set loads every symbol."""

    symbols: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "symbols", frozenset(self.symbols))

    def accepts(self, code: str) -> bool:
        return not self.symbols or code in self.symbols


@dataclass(frozen=True)
class _Row:
    time: int
    open: float
    close: float


class StockSimulation:
    """Loads per-symbol daily CSV files and replays them as quotes.

    Each file in ``path`` is named ``<code>_<anything>.csv``; its first line
    is a header and each following line holds date, open and close.
    """

    def __init__(
        self,
        path: str | PathLike[str],
        date_format: str = DEFAULT_DATE_FORMAT,
    ) -> None:
        self.path = Path(path)
        self.date_format = date_format
        self.quote_filter = QuoteFilter()
        self._columns: dict[str, tuple[str, str, str]] = {}
        self._frames: dict[str, list[_Row]] = {}

    @property
    def symbols(self) -> list[str]:
        """Codes whose data has been loaded, in load order."""
        return list(self._frames)

    def columns(self, code: str) -> tuple[str, str, str]:
        """Header names of the three columns loaded for ``code``."""
        return self._columns[code]

    def _parse_time(self, text: str) -> int:
        return int(time.mktime(time.strptime(text.strip(), self.date_format)))

    def _load_file(self, file_path: Path) -> tuple[tuple[str, str, str], list[_Row]]:
        header: tuple[str, str, str] | None = None
        rows: list[_Row] = []
        with file_path.open(encoding="utf-8") as handle:
            for line in handle:
                line = line.rstrip("\r\n")
                if not line:
                    continue
                fields = line.split(",")
                if len(fields) < 3:
                    raise ValueError(f"{file_path}: row has fewer than 3 columns: {line!r}")
                if header is None:
                    header = (fields[0], fields[1], fields[2])
                    continue
                rows.append(
                    _Row(
                        time=self._parse_time(fields[0]),
                        open=float(fields[1]),
                        close=float(fields[2]),
                    )
                )
        if header is None:
            raise ValueError(f"{file_path}: missing header")
        return header, rows

    def set_filter(self, quote_filter: QuoteFilter | Iterable[str]) -> None:
        """Set the symbol filter and load the matching files."""
        if not isinstance(quote_filter, QuoteFilter):
            quote_filter = QuoteFilter(frozenset(quote_filter))
        self.quote_filter = quote_filter
        if not self.path.exists():
            log.warning("%s not exist.", self.path)
            return
        for entry in sorted(self.path.iterdir()):
            if not entry.is_file():
                continue
            code = entry.stem.split("_")[0]
            if not quote_filter.accepts(code):
                continue
            header, rows = self._load_file(entry)
            self._columns[code] = header
            self._frames[code] = rows

    def query_quotes(self) -> Iterator[Quote]:
        """Yield every loaded quote, symbol by symbol, in file order."""
        for code, rows in self._frames.items():
            for row in rows:
                yield Quote(symbol=code, time=row.time, open=row.open, close=row.close)