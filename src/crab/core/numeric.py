"""
Numeric conversion from byte spans.

:func:`from_chars` is the conversion routine behind ``Str.parse``. It reads
the longest numeric prefix of a byte span and reports how many bytes it
consumed, so callers decide whether trailing bytes are acceptable.
``Str.parse`` does not accept them.

Grammar (ASCII only, no surrounding whitespace, no leading ``+``):
    integer : ["-"] digit+
    float   : ["-"] ( "inf" | "infinity" | "nan"
                    | digit+ ["." digit*] [exponent]
                    | "." digit+ [exponent] )
    exponent: ("e" | "E") ["+" | "-"] digit+

Targets are Python's ``int`` (unbounded) and ``float`` (binary64), or one of
the bounded :class:`NumericType` descriptors (``i8`` ... ``u64``, ``f32``,
``f64``).

Examples:
    >>> from_chars(b"123abc", i32).unwrap()
    (123, 3)
    >>> from_chars(b"300", u8).unwrap_err().ec
    <ErrorCode.RESULT_OUT_OF_RANGE: 'result_out_of_range'>
    >>> from_chars(b"abc", f64).unwrap_err().ec
    <ErrorCode.INVALID_ARGUMENT: 'invalid_argument'>

Tags:
    parsing, numeric, conversion, crab-core
"""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass
from typing import Union

from crab.core.errors import ErrorCode, ParseError
from crab.core.result import Err, Ok, Result

Number = Union[int, float]

_INT_RE = re.compile(rb"-?[0-9]+")
_FLOAT_RE = re.compile(
    rb"-?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)
_FLOAT_SPECIAL_RE = re.compile(rb"-?(?:infinity|inf|nan)", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class NumericType:
    """A bounded numeric target type."""

    name: str
    is_float: bool
    min: int | None = None
    max: int | None = None

    @property
    def signed(self) -> bool:
        return self.is_float or (self.min is not None and self.min < 0)

    def __repr__(self) -> str:
        return self.name


def _int_type(name: str, bits: int, signed: bool) -> NumericType:
    if signed:
        return NumericType(name, False, -(1 << (bits - 1)), (1 << (bits - 1)) - 1)
    return NumericType(name, False, 0, (1 << bits) - 1)


i8 = _int_type("i8", 8, True)
i16 = _int_type("i16", 16, True)
i32 = _int_type("i32", 32, True)
i64 = _int_type("i64", 64, True)
u8 = _int_type("u8", 8, False)
u16 = _int_type("u16", 16, False)
u32 = _int_type("u32", 32, False)
u64 = _int_type("u64", 64, False)
f32 = NumericType("f32", True)
f64 = NumericType("f64", True)

Target = Union[type, NumericType]


def resolve_target(target: Target) -> NumericType | None:
    """Map ``int``/``float`` to descriptors; ``None`` means unbounded int."""
    if isinstance(target, NumericType):
        return target
    if target is float:
        return f64
    if target is int:
        return None
    raise TypeError(f"unsupported numeric target: {target!r}")


def _invalid(name: str) -> Result[tuple[Number, int], ParseError]:
    return Err(ParseError(ErrorCode.INVALID_ARGUMENT, target=name))


def _out_of_range(name: str, consumed: int) -> Result[tuple[Number, int], ParseError]:
    return Err(
        ParseError(ErrorCode.RESULT_OUT_OF_RANGE, target=name).with_context(length=consumed)
    )


def _parse_int(
    data: bytes, target: NumericType | None, name: str
) -> Result[tuple[Number, int], ParseError]:
    match = _INT_RE.match(data)
    if match is None:
        return _invalid(name)
    text = match.group()
    if target is not None and not target.signed and text.startswith(b"-"):
        return _invalid(name)

    consumed = match.end()
    if target is None:
        # int() refuses literals past sys.get_int_max_str_digits().
        try:
            return Ok((int(text), consumed))
        except ValueError:
            return _out_of_range(name, consumed)

    negative = text.startswith(b"-")
    digits = text[1:] if negative else text
    digits = digits.lstrip(b"0") or b"0"
    bound = -target.min if negative else target.max
    if len(digits) > len(str(bound)):
        return _out_of_range(name, consumed)
    value = -int(digits) if negative else int(digits)
    if not target.min <= value <= target.max:
        return _out_of_range(name, consumed)
    return Ok((value, consumed))


def _parse_float(data: bytes, target: NumericType) -> Result[tuple[Number, int], ParseError]:
    special = _FLOAT_SPECIAL_RE.match(data)
    if special is not None:
        return Ok((float(special.group()), special.end()))

    match = _FLOAT_RE.match(data)
    if match is None:
        return _invalid(target.name)
    text = match.group()
    consumed = match.end()

    value = float(text)
    if target is f32 and math.isfinite(value):
        try:
            value = struct.unpack("<f", struct.pack("<f", value))[0]
        except OverflowError:
            value = math.copysign(math.inf, value)

    if math.isinf(value):
        return _out_of_range(target.name, consumed)
    if value == 0.0 and _has_nonzero_digit(text):
        return _out_of_range(target.name, consumed)
    return Ok((value, consumed))


def _has_nonzero_digit(text: bytes) -> bool:
    mantissa = re.split(rb"[eE]", text, maxsplit=1)[0]
    return any(48 < byte <= 57 for byte in mantissa)


def from_chars(
    data: bytes | bytearray,
    target: Target,
    start: int = 0,
    end: int | None = None,
) -> Result[tuple[Number, int], ParseError]:
    """Parse the numeric prefix of ``data[start:end]``.

    Returns ``Ok((value, consumed))`` or ``Err(ParseError)`` classified as
    INVALID_ARGUMENT (no numeric prefix) or RESULT_OUT_OF_RANGE.
    """
    span = bytes(data[start:end])
    resolved = resolve_target(target)
    if resolved is not None and resolved.is_float:
        return _parse_float(span, resolved)
    name = resolved.name if resolved is not None else "int"
    return _parse_int(span, resolved, name)


__all__ = [
    "NumericType",
    "from_chars",
    "resolve_target",
    "i8", "i16", "i32", "i64",
    "u8", "u16", "u32", "u64",
    "f32", "f64",
]
