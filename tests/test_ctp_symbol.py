import pytest

from quantdesk.ctp_symbol import ctp_object_name, get_exchange_name, parse_ctp_symbol
from quantdesk.symbols import ContractType, ExchangeName


def test_future_symbol():
    sym = parse_ctp_symbol("ta510")
    assert sym.type == ContractType.FUTURE
    assert sym.code == 510
    assert ctp_object_name(sym.opt) == "ta"
    assert sym.exchange == ExchangeName.ZHENGZHOU


def test_case_of_object_ignored_for_futures():
    assert parse_ctp_symbol("TA510") == parse_ctp_symbol("ta510")


def test_compact_call_option():
    sym = parse_ctp_symbol("SR505C5000")
    assert sym.type == ContractType.CALL
    assert sym.year * 100 + sym.month == 505
    assert sym.price * 100 == 5000
    assert ctp_object_name(sym.opt) == "sr"


def test_dashed_put_option():
    sym = parse_ctp_symbol("m2505-p-3000")
    assert sym.type == ContractType.PUT
    assert sym.year * 100 + sym.month == 2505
    assert sym.price * 100 == 3000
    assert sym.exchange == ExchangeName.DALIAN


def test_dashed_uppercase_flag_is_not_an_option():
    sym = parse_ctp_symbol("IO2506-C-3900")
    assert sym.type == ContractType.STOCK
    assert sym.code == 0
    assert ctp_object_name(sym.opt) == "io"


def test_unknown_object():
    sym = parse_ctp_symbol("zz2505")
    assert sym.opt == 0
    assert sym.exchange == ExchangeName.UNKNOWN


@pytest.mark.parametrize("name", ["ap", "cu", "i", "sc", "lg", "if"])
def test_object_name_round_trip(name):
    sym = parse_ctp_symbol(name + "2501")
    assert ctp_object_name(sym.opt) == name
    assert sym.exchange == get_exchange_name(name)


def test_shared_code_reverse_lookup():
    assert ctp_object_name(parse_ctp_symbol("eb2501").opt) == "ec"


def test_unknown_code_has_empty_name():
    assert ctp_object_name(999) == ""


def test_exchange_lookup():
    assert get_exchange_name("lc") == ExchangeName.GUANGZHOU
    assert get_exchange_name("nope") == ExchangeName.UNKNOWN


@pytest.mark.parametrize("bad", ["", "ta"])
def test_incomplete_names_rejected(bad):
    with pytest.raises(ValueError):
        parse_ctp_symbol(bad)


def test_option_without_strike_rejected():
    with pytest.raises(ValueError):
        parse_ctp_symbol("m2505-p")