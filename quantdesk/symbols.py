"""Contract symbols, exchange identifiers and the packed 64-bit symbol form."""

from __future__ import annotations

import enum
from dataclasses import dataclass

YEAR_DAY = 252
"""Trading days in a year."""

URI_RAW_QUOTE = "inproc://URI_RAW_QUOTE"
URI_SIM_QUOTE = "inproc://URI_SIM_QUOTE"
URI_SIM_TRADE = "inproc://URI_SIM_TRADE"
URI_TRADE = "inproc://URI_TRADE"
URI_FEATURE = "inproc://Feature"
URI_PREDICT = "inproc://Predict"

_BYTE_MASK = 0xFF
_TYPE_MASK = 0xF
_CODE_MASK = (1 << 20) - 1
_PACKED_LIMIT = 1 << 64


class ContractType(enum.IntEnum):
    """Kind of contract a symbol refers to."""

    STOCK = 0
    FUTURE = 1
    PUT = 2
    CALL = 3
    FUND = 4
    INDEX = 5


class ExchangeName(enum.IntEnum):
    """Exchanges a contract can be listed on."""

    UNKNOWN = 0
    SHENZHEN = 1
    SHANGHAI = 2
    BEIJING = 3
    ZHENGZHOU = 4
    DALIAN = 5
    ZHONGJIN = 6
    GUANGZHOU = 7
    SHANGHAI_FUTURE = 8
    SHANGHAI_ENG = 9
    HONGKONG = 10


@dataclass(frozen=True, order=True)
class Symbol:
    """A contract identifier.

    ``code`` is a 20-bit field. For options it holds the year (6 bits),
    month (4 bits) and strike price in hundreds (10 bits), exposed through
    the ``year``, ``month`` and ``price`` properties.
    """

    type: ContractType
    opt: int = 0
    exchange: int = 0
    code: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", ContractType(self.type))
        if not 0 <= self.opt <= _BYTE_MASK:
            raise ValueError(f"object code out of range: {self.opt}")
        if not 0 <= self.exchange <= _BYTE_MASK:
            raise ValueError(f"exchange out of range: {self.exchange}")
        if not 0 <= self.code <= _CODE_MASK:
            raise ValueError(f"symbol code does not fit in 20 bits: {self.code}")

    @property
    def year(self) -> int:
        return self.code & 0x3F

    @property
    def month(self) -> int:
        return (self.code >> 6) & 0xF

    @property
    def price(self) -> int:
        return (self.code >> 10) & 0x3FF

    def pack(self) -> int:
        """Return the symbol as an unsigned 64-bit integer."""
        return (
            int(self.type)
            | (self.opt << 8)
            | (self.exchange << 16)
            | (self.code << 32)
        )


def unpack_symbol(value: int) -> Symbol:
    """Rebuild a symbol from its packed 64-bit form."""
    if not 0 <= value < _PACKED_LIMIT:
        raise ValueError(f"packed symbol out of 64-bit range: {value}")
    return Symbol(
        type=ContractType(value & _TYPE_MASK),
        opt=(value >> 8) & _BYTE_MASK,
        exchange=(value >> 16) & _BYTE_MASK,
        code=(value >> 32) & _CODE_MASK,
    )