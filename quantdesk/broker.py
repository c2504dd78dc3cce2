"""Order matching simulation, trade history and prediction bookkeeping."""

from __future__ import annotations

import datetime as dt
import math
import random
import threading
import time
from dataclasses import dataclass, field
from os import PathLike
from typing import Any

import cbor2
import lmdb

from quantdesk.symbols import Symbol, unpack_symbol

DEFAULT_DISK_CACHE_SIZE = 1 << 30
DEFAULT_MAX_DBS = 16
DB_HISTORY = "history"
DB_BROKER = "broker"
DB_PREDICTION = "predict"
LOT_SIZE = 100
"""Shares in one hand."""

_DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class Commission:
    """Commission settings for stock trades."""

    rate: float = 0.0
    minimum: float = 0.0


@dataclass(frozen=True)
class OrderLevel:
    """One price level of an order."""

    time: int
    price: float


@dataclass(frozen=True)
class Order:
    """An order for ``number`` hands across one or more price levels."""

    number: int
    levels: tuple[OrderLevel, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "levels", tuple(self.levels))


@dataclass(frozen=True)
class DealDetail:
    """A filled part of an order."""

    number: int
    time: int
    price: float


@dataclass
class DealInfo:
    """All fills of an order."""

    deals: list[DealDetail] = field(default_factory=list)


@dataclass(frozen=True)
class Transaction:
    """An order together with what was dealt."""

    order: Order
    deal: DealInfo


class BrokerStore:
    """Named JSON-like values kept as CBOR in an LMDB file."""

    def __init__(
        self,
        path: str | PathLike[str],
        portfolio_id: int = 1,
        map_size: int = DEFAULT_DISK_CACHE_SIZE,
    ) -> None:
        if not 0 <= portfolio_id <= 0xFF:
            raise ValueError(f"portfolio id out of range: {portfolio_id}")
        self._env: lmdb.Environment | None = lmdb.open(
            str(path),
            map_size=map_size,
            subdir=False,
            max_dbs=DEFAULT_MAX_DBS,
            max_readers=1,
            lock=False,
            readahead=False,
            writemap=True,
            create=True,
            mode=0o664,
        )
        self._db = self._env.open_db(bytes([portfolio_id])) if portfolio_id else None

    def _environment(self) -> lmdb.Environment:
        if self._env is None:
            raise ValueError("store is closed")
        return self._env

    def load_json(self, name: str) -> Any:
        """Return the value stored under ``name``, or None."""
        with self._environment().begin(db=self._db) as txn:
            raw = txn.get(name.encode())
        return None if raw is None else cbor2.loads(raw)

    def save_json(self, name: str, value: Any) -> None:
        """Store ``value`` under ``name``."""
        with self._environment().begin(write=True, db=self._db) as txn:
            txn.put(name.encode(), cbor2.dumps(value))

    def close(self) -> None:
        """Flush to disk and close; closing twice is harmless."""
        if self._env is not None:
            self._env.sync(True)
            self._env.close()
            self._env = None

    def __enter__(self) -> BrokerStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _round_half_away(value: float) -> int:
    magnitude = math.floor(abs(value) + 0.5)
    return -magnitude if value < 0 else magnitude


def _transaction_json(transaction: Transaction) -> dict[str, Any]:
    order = transaction.order
    deals = transaction.deal.deals
    return {
        "order": {
            "number": order.number,
            "time": [level.time for level in order.levels],
            "price": [level.price for level in order.levels],
        },
        "deal": {
            "time": [deal.time for deal in deals],
            "price": [deal.price for deal in deals],
            "num": [deal.number for deal in deals],
        },
    }


def _transaction_from_json(data: dict[str, Any]) -> Transaction:
    order_data = data["order"]
    deal_data = data.get("deal", {})
    order = Order(
        number=order_data["number"],
        levels=tuple(
            OrderLevel(at, price)
            for at, price in zip(order_data.get("time", []), order_data.get("price", []))
        ),
    )
    deals = [
        DealDetail(number=num, time=at, price=price)
        for at, price, num in zip(
            deal_data.get("time", []), deal_data.get("price", []), deal_data.get("num", [])
        )
    ]
    return Transaction(order, DealInfo(deals))


class Broker:
    """Simulated stock matching with a record of trades and predictions."""

    def __init__(self, principal: float = 0.0, slip: float = 0.0, seed: int | None = 1) -> None:
        if slip < 0:
            raise ValueError(f"slip must not be negative: {slip}")
        self.principal = principal
        self.slip = slip
        self.seed = seed
        self.stock_commission = Commission()
        self._transactions: dict[str, list[Transaction]] = {}
        self._trans_lock = threading.Lock()
        self._predictions: dict[Symbol, list[tuple[dt.date, int]]] = {}
        self._latest: dict[Symbol, tuple[dt.date, int]] = {}
        self._pred_lock = threading.Lock()

    def set_stock_commission(self, commission: Commission) -> None:
        self.stock_commission = commission

    def simulate_stock_match(self, capital: float, order: Order) -> DealInfo:
        """Fill an order at a slipped price around the middle of its levels."""
        if not order.levels:
            raise ValueError("order has no price levels")
        deal = DealInfo()
        first, last = order.levels[0], order.levels[-1]
        if capital < LOT_SIZE * first.price:
            return deal

        count = LOT_SIZE * order.number
        mean = (first.price + last.price) / 2
        value = random.Random(self.seed).gauss(mean, self.slip)
        number = order.number
        if capital < value * count:
            number = _round_half_away(capital / value)
        deal.deals.append(DealDetail(number=number, time=int(time.time()), price=value))
        return deal

    def record(self, symbol: str, order: Order, deal: DealInfo) -> bool:
        """Keep a filled order in the history; unfilled orders are not kept."""
        if not deal.deals:
            return False
        transaction = Transaction(order, DealInfo(list(deal.deals)))
        with self._trans_lock:
            self._transactions.setdefault(symbol, []).append(transaction)
        return True

    def history_json(self) -> list[dict[str, Any]]:
        with self._trans_lock:
            items = [(symbol, list(trans)) for symbol, trans in self._transactions.items()]
        return [
            {"symbol": symbol, "transactions": [_transaction_json(t) for t in trans]}
            for symbol, trans in items
        ]

    def _load_history(self, data: Any) -> None:
        if not data:
            return
        with self._trans_lock:
            for item in data:
                bucket = self._transactions.setdefault(item["symbol"], [])
                bucket.extend(_transaction_from_json(t) for t in item.get("transactions", []))

    def predict_with_days(self, symbol: Symbol, n: int, op: int) -> None:
        """Record today's predicted operation for a symbol."""
        prediction = (dt.date.today(), op)
        with self._pred_lock:
            self._latest[symbol] = prediction
            self._predictions.setdefault(symbol, []).append(prediction)

    def get_next_prediction(self, symbol: Symbol) -> tuple[dt.date, int] | None:
        """Return the latest prediction made for today, or None."""
        today = dt.date.today()
        with self._pred_lock:
            history = list(self._predictions.get(symbol, ()))
        for day, op in reversed(history):
            if day < today:
                break
            if day == today:
                return day, op
        return None

    def get_prediction(self) -> dict[str, Any]:
        with self._pred_lock:
            entries = {
                str(symbol.pack()): [[day.strftime(_DATE_FORMAT), op] for day, op in history]
                for symbol, history in self._predictions.items()
            }
        return {DB_PREDICTION: entries}

    def load_prediction(self, data: Any) -> None:
        """Append predictions read from the form :meth:`get_prediction` writes."""
        if not data or DB_PREDICTION not in data:
            return
        with self._pred_lock:
            for key, entries in data[DB_PREDICTION].items():
                symbol = unpack_symbol(int(key))
                bucket = self._predictions.setdefault(symbol, [])
                for date_text, op in entries:
                    day = dt.datetime.strptime(date_text, _DATE_FORMAT).date()
                    bucket.append((day, int(op)))

    def brokers_json(self) -> dict[str, Any]:
        return {"principal": self.principal}

    def load_brokers(self, data: Any) -> None:
        if data and "principal" in data:
            self.principal = float(data["principal"])

    def flush(self, store: BrokerStore) -> None:
        """Write history, broker settings and predictions to ``store``."""
        store.save_json(DB_HISTORY, self.history_json())
        store.save_json(DB_BROKER, self.brokers_json())
        store.save_json(DB_PREDICTION, self.get_prediction())

    def restore(self, store: BrokerStore) -> None:
        """Read broker settings, history and predictions from ``store``."""
        self.load_brokers(store.load_json(DB_BROKER))
        self._load_history(store.load_json(DB_HISTORY))
        self.load_prediction(store.load_json(DB_PREDICTION))