"""Conversions between UTF-32, UTF-16 and UTF-8 code units.

Each conversion runs over the whole source and stops at the first
sequence it cannot handle. It reports how it ended, the units produced
so far, and how many source units it consumed.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass

REPLACEMENT_CHAR = 0xFFFD
MAX_BMP = 0xFFFF
MAX_UTF16 = 0x10FFFF
MAX_LEGAL_UTF32 = 0x10FFFF

_SUR_HIGH_START = 0xD800
_SUR_HIGH_END = 0xDBFF
_SUR_LOW_START = 0xDC00
_SUR_LOW_END = 0xDFFF

_HALF_SHIFT = 10
_HALF_BASE = 0x10000
_HALF_MASK = 0x3FF

_UINT32_MASK = 0xFFFFFFFF

_OFFSETS_FROM_UTF8 = (
    0x00000000,
    0x00003080,
    0x000E2080,
    0x03C82080,
    0xFA082080,
    0x82082080,
)
_FIRST_BYTE_MARK = (0x00, 0x00, 0xC0, 0xE0, 0xF0, 0xF8, 0xFC)
_BYTE_MASK = 0xBF
_BYTE_MARK = 0x80


class ConversionResult(enum.Enum):
    """How a conversion ended."""

    OK = "ok"
    SOURCE_EXHAUSTED = "source_exhausted"
    TARGET_EXHAUSTED = "target_exhausted"
    SOURCE_ILLEGAL = "source_illegal"


class ConversionFlags(enum.Enum):
    """Whether illegal input stops the conversion or is replaced."""

    STRICT = "strict"
    LENIENT = "lenient"


@dataclass(frozen=True)
class Conversion:
    """Outcome of a conversion.

    ``output`` is ``bytes`` for UTF-8 targets and a tuple of code units
    otherwise; ``consumed`` counts the source units that were used.
    """

    result: ConversionResult
    output: bytes | tuple[int, ...]
    consumed: int

    @property
    def ok(self) -> bool:
        return self.result is ConversionResult.OK


def _is_surrogate(ch: int) -> bool:
    return _SUR_HIGH_START <= ch <= _SUR_LOW_END


def _is_high_surrogate(ch: int) -> bool:
    return _SUR_HIGH_START <= ch <= _SUR_HIGH_END


def _is_low_surrogate(ch: int) -> bool:
    return _SUR_LOW_START <= ch <= _SUR_LOW_END


def _split_surrogates(ch: int) -> tuple[int, int]:
    ch -= _HALF_BASE
    return (ch >> _HALF_SHIFT) + _SUR_HIGH_START, (ch & _HALF_MASK) + _SUR_LOW_START


def _join_surrogates(high: int, low: int) -> int:
    return ((high - _SUR_HIGH_START) << _HALF_SHIFT) + (low - _SUR_LOW_START) + _HALF_BASE


def _units(source: Iterable[int], limit: int, name: str) -> tuple[int, ...]:
    units = tuple(source)
    for unit in units:
        if not 0 <= unit <= limit:
            raise ValueError(f"{name} code unit out of range: {unit:#x}")
    return units


def _trailing_bytes(lead: int) -> int:
    """Number of continuation bytes announced by a UTF-8 lead byte."""
    if lead < 0xC0:
        return 0
    if lead < 0xE0:
        return 1
    if lead < 0xF0:
        return 2
    if lead < 0xF8:
        return 3
    if lead < 0xFC:
        return 4
    return 5


def _encode_utf8(ch: int, count: int) -> bytes:
    """Write ``ch`` as ``count`` UTF-8 bytes."""
    out = bytearray(count)
    for position in range(count - 1, 0, -1):
        out[position] = (ch | _BYTE_MARK) & _BYTE_MASK
        ch >>= 6
    out[0] = (ch | _FIRST_BYTE_MARK[count]) & 0xFF
    return bytes(out)


def _utf8_length(ch: int, limit: int) -> tuple[int, int, bool]:
    """Byte count for ``ch``; values above ``limit`` become the replacement char."""
    if ch < 0x80:
        return ch, 1, False
    if ch < 0x800:
        return ch, 2, False
    if ch < 0x10000:
        return ch, 3, False
    if ch <= limit:
        return ch, 4, False
    return REPLACEMENT_CHAR, 3, True


def _is_legal_utf8(chunk: bytes) -> bool:
    """Check one UTF-8 sequence whose length comes from its lead byte."""
    length = len(chunk)
    if not 1 <= length <= 4:
        return False
    lead = chunk[0]
    if length >= 2:
        for trail in chunk[2:]:
            if trail < 0x80 or trail > 0xBF:
                return False
        second = chunk[1]
        if second > 0xBF:
            return False
        if lead == 0xE0:
            if second < 0xA0:
                return False
        elif lead == 0xED:
            if second > 0x9F:
                return False
        elif lead == 0xF0:
            if second < 0x90:
                return False
        elif lead == 0xF4:
            if second > 0x8F:
                return False
        elif second < 0x80:
            return False
    if 0x80 <= lead < 0xC2:
        return False
    return lead <= 0xF4


def is_legal_utf8_sequence(source: bytes) -> bool:
    """Tell whether ``source`` starts with one legal UTF-8 sequence."""
    data = bytes(source)
    if not data:
        raise ValueError("empty UTF-8 sequence")
    length = _trailing_bytes(data[0]) + 1
    if length > len(data):
        return False
    return _is_legal_utf8(data[:length])


def _decode_utf16(
    units: tuple[int, ...], flags: ConversionFlags
) -> tuple[list[tuple[int, int]], ConversionResult, int]:
    """Read code points from UTF-16 units, with the index each one ends at."""
    strict = flags is ConversionFlags.STRICT
    points: list[tuple[int, int]] = []
    pos = 0
    while pos < len(units):
        ch = units[pos]
        nxt = pos + 1
        if _is_high_surrogate(ch):
            if nxt >= len(units):
                return points, ConversionResult.SOURCE_EXHAUSTED, pos
            follower = units[nxt]
            if _is_low_surrogate(follower):
                ch = _join_surrogates(ch, follower)
                nxt += 1
            elif strict:
                return points, ConversionResult.SOURCE_ILLEGAL, pos
        elif strict and _is_low_surrogate(ch):
            return points, ConversionResult.SOURCE_ILLEGAL, pos
        points.append((ch, nxt))
        pos = nxt
    return points, ConversionResult.OK, pos


def utf32_to_utf16(
    source: Iterable[int], flags: ConversionFlags = ConversionFlags.STRICT
) -> Conversion:
    """Convert UTF-32 code points to UTF-16 code units."""
    units = _units(source, _UINT32_MASK, "UTF-32")
    strict = flags is ConversionFlags.STRICT
    result = ConversionResult.OK
    out: list[int] = []
    pos = 0
    while pos < len(units):
        ch = units[pos]
        if ch <= MAX_BMP:
            if _is_surrogate(ch):
                if strict:
                    result = ConversionResult.SOURCE_ILLEGAL
                    break
                out.append(REPLACEMENT_CHAR)
            else:
                out.append(ch)
        elif ch > MAX_LEGAL_UTF32:
            if strict:
                result = ConversionResult.SOURCE_ILLEGAL
            else:
                out.append(REPLACEMENT_CHAR)
        else:
            out.extend(_split_surrogates(ch))
        pos += 1
    return Conversion(result, tuple(out), pos)


def utf16_to_utf32(
    source: Iterable[int], flags: ConversionFlags = ConversionFlags.STRICT
) -> Conversion:
    """Convert UTF-16 code units to UTF-32 code points."""
    units = _units(source, 0xFFFF, "UTF-16")
    points, result, consumed = _decode_utf16(units, flags)
    return Conversion(result, tuple(ch for ch, _ in points), consumed)


def utf16_to_utf8(
    source: Iterable[int], flags: ConversionFlags = ConversionFlags.STRICT
) -> Conversion:
    """Convert UTF-16 code units to UTF-8 bytes."""
    units = _units(source, 0xFFFF, "UTF-16")
    points, result, consumed = _decode_utf16(units, flags)
    out = bytearray()
    for ch, _ in points:
        ch, count, _replaced = _utf8_length(ch, MAX_UTF16)
        out += _encode_utf8(ch, count)
    return Conversion(result, bytes(out), consumed)


def utf32_to_utf8(
    source: Iterable[int], flags: ConversionFlags = ConversionFlags.STRICT
) -> Conversion:
    """Convert UTF-32 code points to UTF-8 bytes.

    Values beyond U+10FFFF become U+FFFD and mark the result illegal.
    """
    units = _units(source, _UINT32_MASK, "UTF-32")
    strict = flags is ConversionFlags.STRICT
    result = ConversionResult.OK
    out = bytearray()
    pos = 0
    while pos < len(units):
        ch = units[pos]
        if strict and _is_surrogate(ch):
            result = ConversionResult.SOURCE_ILLEGAL
            break
        ch, count, replaced = _utf8_length(ch, MAX_LEGAL_UTF32)
        if replaced:
            result = ConversionResult.SOURCE_ILLEGAL
        out += _encode_utf8(ch, count)
        pos += 1
    return Conversion(result, bytes(out), pos)


def _decode_utf8(data: bytes):
    """Yield ``(start, end, code_point)`` or stop with a result.

    Generator return value is the final ``(result, position)``.
    """
    pos = 0
    while pos < len(data):
        extra = _trailing_bytes(data[pos])
        if pos + extra >= len(data):
            return ConversionResult.SOURCE_EXHAUSTED, pos
        end = pos + extra + 1
        chunk = data[pos:end]
        if not _is_legal_utf8(chunk):
            return ConversionResult.SOURCE_ILLEGAL, pos
        ch = 0
        for byte in chunk[:-1]:
            ch = ((ch + byte) << 6) & _UINT32_MASK
        ch = (ch + chunk[-1] - _OFFSETS_FROM_UTF8[extra]) & _UINT32_MASK
        yield pos, end, ch
        pos = end
    return ConversionResult.OK, pos


def _run_utf8(data: bytes, handle) -> tuple[ConversionResult, int]:
    """Feed decoded code points to ``handle`` until it or the decoder stops."""
    decoder = _decode_utf8(data)
    while True:
        try:
            start, end, ch = next(decoder)
        except StopIteration as stop:
            return stop.value
        outcome = handle(ch)
        if outcome is not None:
            return outcome, start


def utf8_to_utf16(
    source: bytes, flags: ConversionFlags = ConversionFlags.STRICT
) -> Conversion:
    """Convert UTF-8 bytes to UTF-16 code units."""
    strict = flags is ConversionFlags.STRICT
    out: list[int] = []

    def handle(ch: int) -> ConversionResult | None:
        if ch <= MAX_BMP:
            if _is_surrogate(ch):
                if strict:
                    return ConversionResult.SOURCE_ILLEGAL
                out.append(REPLACEMENT_CHAR)
            else:
                out.append(ch)
        elif ch > MAX_UTF16:
            if strict:
                return ConversionResult.SOURCE_ILLEGAL
            out.append(REPLACEMENT_CHAR)
        else:
            out.extend(_split_surrogates(ch))
        return None

    result, consumed = _run_utf8(bytes(source), handle)
    return Conversion(result, tuple(out), consumed)


def utf8_to_utf32(
    source: bytes, flags: ConversionFlags = ConversionFlags.STRICT
) -> Conversion:
    """Convert UTF-8 bytes to UTF-32 code points."""
    strict = flags is ConversionFlags.STRICT
    out: list[int] = []
    illegal = False

    def handle(ch: int) -> ConversionResult | None:
        nonlocal illegal
        if ch <= MAX_LEGAL_UTF32:
            if _is_surrogate(ch):
                if strict:
                    return ConversionResult.SOURCE_ILLEGAL
                out.append(REPLACEMENT_CHAR)
            else:
                out.append(ch)
        else:
            illegal = True
            out.append(REPLACEMENT_CHAR)
        return None

    result, consumed = _run_utf8(bytes(source), handle)
    if illegal and result is ConversionResult.OK:
        result = ConversionResult.SOURCE_ILLEGAL
    return Conversion(result, tuple(out), consumed)