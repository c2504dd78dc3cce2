"""Parsing of futures and option instrument names into symbols."""

from __future__ import annotations

import logging

from quantdesk.symbols import ContractType, ExchangeName, Symbol

log = logging.getLogger(__name__)

_OBJECT_CODE: dict[str, int] = {
    "ap": 1, "al": 2, "cf": 3, "cj": 4, "cy": 5, "fg": 6, "ho": 7, "ic": 8,
    "if": 9, "ih": 10, "im": 11, "io": 12, "jr": 13, "lr": 14, "ma": 15,
    "mo": 16, "oi": 17, "pf": 18, "pk": 19, "pm": 20, "pr": 21, "px": 22,
    "ri": 23, "rm": 24, "rs": 25, "sa": 26, "sf": 27, "sh": 28, "sm": 29,
    "sr": 30, "t": 31, "ta": 32, "tf": 33, "tl": 34, "ts": 35, "ur": 36,
    "wh": 37, "zc": 38, "a": 39, "ag": 40, "ao": 41, "au": 42, "b": 43,
    "bb": 44, "bc": 45, "br": 46, "bu": 47, "c": 48, "cs": 49, "cu": 50,
    "eb": 51, "ec": 51, "eg": 52, "fb": 53, "fu": 54, "hc": 55, "i": 56,
    "j": 57, "jd": 58, "jm": 59, "l": 60, "lc": 61, "lh": 62, "lu": 63,
    "m": 64, "ni": 65, "nr": 66, "p": 67, "pb": 68, "pg": 69, "pp": 70,
    "rb": 71, "rr": 72, "zn": 73, "si": 74, "ru": 75, "ss": 76, "sp": 77,
    "v": 78, "y": 79, "wr": 80, "sn": 81, "sc": 82, "ps": 83, "lg": 84,
}

_Z = ExchangeName.ZHENGZHOU
_D = ExchangeName.DALIAN
_J = ExchangeName.ZHONGJIN
_S = ExchangeName.SHANGHAI_FUTURE
_E = ExchangeName.SHANGHAI_ENG
_G = ExchangeName.GUANGZHOU

_EXCHANGES: dict[str, ExchangeName] = {
    "ap": _Z, "al": _S, "cf": _Z, "cj": _Z, "cy": _Z, "fg": _Z, "ho": _J,
    "ic": _J, "if": _J, "ih": _J, "im": _J, "io": _J, "jr": _Z, "lr": _Z,
    "ma": _Z, "mo": _J, "oi": _Z, "pf": _Z, "pk": _Z, "pm": _Z, "pr": _Z,
    "px": _Z, "ri": _Z, "rm": _Z, "rs": _Z, "sa": _Z, "sf": _Z, "sh": _Z,
    "sm": _Z, "sr": _Z, "t": _J, "ta": _Z, "tf": _J, "tl": _J, "ts": _J,
    "ur": _Z, "wh": _Z, "zc": _Z, "a": _D, "ag": _S, "ao": _S, "au": _S,
    "b": _D, "bb": _D, "bc": _E, "br": _S, "bu": _S, "c": _D, "cs": _D,
    "cu": _S, "eb": _D, "ec": _E, "eg": _D, "fb": _D, "fu": _S, "hc": _S,
    "i": _D, "j": _D, "jd": _D, "jm": _D, "l": _D, "lc": _G, "lh": _D,
    "lu": _E, "m": _D, "ni": _S, "nr": _S, "p": _D, "pb": _S, "pg": _D,
    "pp": _D, "rb": _S, "rr": _D, "zn": _S, "si": _G, "ru": _S, "ss": _S,
    "sp": _S, "v": _D, "y": _D, "wr": _S, "sn": _S, "sc": _E, "ps": _G,
    "lg": _D,
}

# Codes shared by several names resolve to the alphabetically last one.
_OBJECT_NAMES: dict[int, str] = {code: name for name, code in sorted(_OBJECT_CODE.items())}

_OPTION_KINDS = {"c": ContractType.CALL, "p": ContractType.PUT}

_NONE, _DIGITS, _LETTERS = 0, 1, 2


def _tokenize(symbol: str) -> list[str]:
    """Split an instrument name into letter and digit runs.

    A letter run is lower-cased only when a digit or other character follows it.
    """
    tokens: list[str] = []
    current: list[str] = []
    state = _NONE
    for char in symbol:
        if char in "_-":
            tokens.append("".join(current))
            current = []
            state = _NONE
            continue
        if char.isascii() and char.isalpha():
            if state == _DIGITS:
                tokens.append("".join(current))
                current = []
            state = _LETTERS
            current.append(char)
            continue
        if state == _LETTERS:
            tokens.append("".join(current).lower())
            current = []
        state = _DIGITS
        current.append(char)
    if current:
        tokens.append("".join(current))
    return tokens


def _atoi(text: str) -> int:
    """Parse a leading integer the way C's atoi does; 0 when there is none."""
    text = text.lstrip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = []
    for char in text:
        if not char.isdigit():
            break
        digits.append(char)
    return sign * int("".join(digits)) if digits else 0


def _truncating_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def parse_ctp_symbol(symbol: str) -> Symbol:
    """Turn an instrument name such as ``ta510`` or ``SR505C5000`` into a Symbol."""
    tokens = _tokenize(symbol)
    if not tokens:
        raise ValueError("empty instrument name")
    head = tokens[0]
    opt = _OBJECT_CODE.get(head, 0)
    if opt == 0:
        log.warning("Object %s is new item", head)

    if len(tokens) > 2:
        kind = _OPTION_KINDS.get(tokens[2], ContractType.STOCK)
    else:
        kind = ContractType.FUTURE

    code = 0
    if kind is ContractType.FUTURE:
        if len(tokens) < 2:
            raise ValueError(f"instrument {symbol!r} has no delivery month")
        code = _atoi(tokens[1]) & 0xFFFFF
    elif kind in (ContractType.PUT, ContractType.CALL):
        if len(tokens) < 4 or len(tokens[1]) < 2:
            raise ValueError(f"option {symbol!r} lacks expiry or strike")
        year = _atoi(tokens[1][:-2]) & 0x3F
        month = _atoi(tokens[1][-2:]) & 0xF
        price = _truncating_div(_atoi(tokens[3]), 100) & 0x3FF
        code = year | (month << 6) | (price << 10)

    return Symbol(
        type=kind,
        opt=opt,
        exchange=_EXCHANGES.get(head, ExchangeName.UNKNOWN),
        code=code,
    )


def ctp_object_name(code: int) -> str:
    """Return the object name for an object code, or an empty string."""
    return _OBJECT_NAMES.get(code, "")


def get_exchange_name(name: str) -> ExchangeName:
    """Return the exchange that lists an object name."""
    return _EXCHANGES.get(name, ExchangeName.UNKNOWN)