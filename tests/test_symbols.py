import pytest

from quantdesk.symbols import ContractType, ExchangeName, Symbol, unpack_symbol


@pytest.mark.parametrize(
    "symbol",
    [
        Symbol(ContractType.STOCK),
        Symbol(ContractType.FUTURE, opt=32, exchange=ExchangeName.ZHENGZHOU, code=510),
        Symbol(ContractType.CALL, opt=64, exchange=ExchangeName.DALIAN, code=(1 << 20) - 1),
        Symbol(ContractType.INDEX, opt=255, exchange=255, code=1),
    ],
)
def test_pack_round_trip(symbol):
    assert unpack_symbol(symbol.pack()) == symbol


def test_pack_byte_layout():
    symbol = Symbol(ContractType.FUTURE, opt=32, exchange=ExchangeName.ZHENGZHOU, code=510)
    raw = symbol.pack().to_bytes(8, "little")
    assert raw[0] == ContractType.FUTURE
    assert raw[1] == 32
    assert raw[2] == ExchangeName.ZHENGZHOU
    assert int.from_bytes(raw[4:8], "little") == 510


def test_option_fields_share_code():
    code = 25 | (6 << 6) | (39 << 10)
    symbol = Symbol(ContractType.PUT, code=code)
    assert (symbol.year, symbol.month, symbol.price) == (25, 6, 39)


def test_code_too_wide_rejected():
    with pytest.raises(ValueError):
        Symbol(ContractType.FUTURE, code=1 << 20)


def test_opt_out_of_range_rejected():
    with pytest.raises(ValueError):
        Symbol(ContractType.FUTURE, opt=256)


def test_unpack_unknown_type_rejected():
    with pytest.raises(ValueError):
        unpack_symbol(7)


def test_unpack_out_of_range_rejected():
    with pytest.raises(ValueError):
        unpack_symbol(1 << 64)


def test_equal_symbols_hash_together():
    a = Symbol(ContractType.FUTURE, opt=3, exchange=4, code=12)
    b = unpack_symbol(a.pack())
    assert len({a, b}) == 1


def test_ordering_is_total():
    items = [
        Symbol(ContractType.FUTURE, code=5),
        Symbol(ContractType.STOCK, code=9),
        Symbol(ContractType.FUTURE, code=1),
    ]
    ordered = sorted(items)
    assert all(x <= y for x, y in zip(ordered, ordered[1:]))
    assert ordered[0].type == ContractType.STOCK