import datetime as dt

import pytest

from quantdesk.broker import (
    Broker,
    BrokerStore,
    Commission,
    DealDetail,
    DealInfo,
    Order,
    OrderLevel,
)
from quantdesk.symbols import ContractType, Symbol

SMALL_MAP = 10 * 1024 * 1024
SYMBOL = Symbol(ContractType.FUTURE, opt=32, exchange=4, code=510)


def _order(number, *prices):
    return Order(number, tuple(OrderLevel(1700000000 + i, p) for i, p in enumerate(prices)))


def test_capital_below_one_hand_gives_no_deal():
    deal = Broker().simulate_stock_match(999.0, _order(1, 10.0))
    assert deal.deals == []


def test_match_uses_mid_price_without_slip():
    deal = Broker().simulate_stock_match(1_000_000.0, _order(3, 10.0, 12.0))
    assert len(deal.deals) == 1
    assert deal.deals[0].price == pytest.approx(11.0)
    assert deal.deals[0].number == 3


def test_match_limited_by_capital():
    deal = Broker().simulate_stock_match(5000.0, _order(10, 10.0))
    assert deal.deals[0].number == 500


def test_match_is_repeatable_with_seed():
    broker = Broker(slip=0.5, seed=7)
    first = broker.simulate_stock_match(1_000_000.0, _order(2, 10.0))
    second = broker.simulate_stock_match(1_000_000.0, _order(2, 10.0))
    assert first.deals[0].price == second.deals[0].price


def test_order_without_levels_rejected():
    with pytest.raises(ValueError):
        Broker().simulate_stock_match(1000.0, Order(1))


def test_negative_slip_rejected():
    with pytest.raises(ValueError):
        Broker(slip=-1.0)


def test_set_stock_commission():
    broker = Broker()
    commission = Commission(rate=0.001, minimum=5.0)
    broker.set_stock_commission(commission)
    assert broker.stock_commission == commission


def test_record_skips_empty_deal():
    broker = Broker()
    assert broker.record("000001", _order(1, 10.0), DealInfo()) is False
    assert broker.history_json() == []


def test_record_and_history_json():
    broker = Broker()
    order = _order(2, 10.0, 10.5)
    deal = DealInfo([DealDetail(number=2, time=1700000100, price=10.2)])
    assert broker.record("000001", order, deal) is True
    history = broker.history_json()
    assert history[0]["symbol"] == "000001"
    action = history[0]["transactions"][0]
    assert action["order"]["number"] == 2
    assert action["order"]["price"] == [10.0, 10.5]
    assert action["deal"] == {"time": [1700000100], "price": [10.2], "num": [2]}


def test_prediction_for_today():
    broker = Broker()
    broker.predict_with_days(SYMBOL, 1, -1)
    assert broker.get_next_prediction(SYMBOL) == (dt.date.today(), -1)


def test_no_prediction_for_unknown_symbol():
    assert Broker().get_next_prediction(SYMBOL) is None


def test_old_prediction_not_returned():
    broker = Broker()
    broker.load_prediction({"predict": {str(SYMBOL.pack()): [["2000-1-1", 1]]}})
    assert broker.get_next_prediction(SYMBOL) is None


def test_future_entry_skipped_for_today():
    broker = Broker()
    today = dt.date.today()
    later = today + dt.timedelta(days=3)
    broker.load_prediction(
        {"predict": {str(SYMBOL.pack()): [[today.isoformat(), 1], [later.isoformat(), -1]]}}
    )
    assert broker.get_next_prediction(SYMBOL) == (today, 1)


def test_prediction_round_trip():
    broker = Broker()
    broker.predict_with_days(SYMBOL, 5, 1)
    other = Broker()
    other.load_prediction(broker.get_prediction())
    assert other.get_prediction() == broker.get_prediction()
    assert other.get_next_prediction(SYMBOL) == broker.get_next_prediction(SYMBOL)


def test_brokers_round_trip():
    broker = Broker(principal=12345.5)
    other = Broker()
    other.load_brokers(broker.brokers_json())
    assert other.principal == broker.principal
    other.load_brokers(None)
    assert other.principal == broker.principal


def test_store_round_trip(tmp_path):
    with BrokerStore(tmp_path / "broker.db", map_size=SMALL_MAP) as store:
        assert store.load_json("broker") is None
        store.save_json("broker", {"principal": 1.5, "tags": ["a", "b"]})
        assert store.load_json("broker") == {"principal": 1.5, "tags": ["a", "b"]}


def test_closed_store_rejects_use(tmp_path):
    store = BrokerStore(tmp_path / "broker.db", map_size=SMALL_MAP)
    store.close()
    store.close()
    with pytest.raises(ValueError):
        store.load_json("broker")


def test_flush_and_restore(tmp_path):
    path = tmp_path / "broker.db"
    broker = Broker(principal=50000.0)
    broker.record(
        "000001", _order(1, 9.0), DealInfo([DealDetail(number=1, time=1700000200, price=9.1)])
    )
    broker.predict_with_days(SYMBOL, 1, 1)
    with BrokerStore(path, map_size=SMALL_MAP) as store:
        broker.flush(store)

    restored = Broker()
    with BrokerStore(path, map_size=SMALL_MAP) as store:
        restored.restore(store)
    assert restored.principal == broker.principal
    assert restored.history_json() == broker.history_json()
    assert restored.get_prediction() == broker.get_prediction()