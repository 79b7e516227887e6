"""
UTF-8 validation and decoding.

Stateless routines over a byte buffer (``bytes`` or ``bytearray``) and an
optional ``[start, end)`` window. Both string types validate through
:func:`validate` at construction and decode through :func:`decode_char`
afterwards, when the buffer is already known to be valid.

Validation detects every malformation of the UTF-8 grammar:
    - Invalid start byte (0x80..0xC1, 0xF5..0xFF)
    - Invalid continuation byte
    - Incomplete sequence at the end of input
    - Overlong encodings (E0 80..9F, F0 80..8F)
    - Surrogate code points (ED A0..BF)
    - Code points above U+10FFFF (F4 90..BF)

There is no recovery and no replacement character: the first malformed
sequence ends validation with a :class:`~crab.core.errors.Utf8Error` whose
``pos`` is the offset of that sequence.

Examples:
    >>> validate(b"caf\\xc3\\xa9").is_ok()
    True
    >>> validate(b"\\xc0\\x80").unwrap_err().pos
    0
    >>> [c.code_point() for c in decode("y\\u0306".encode())]
    [121, 774]

Tags:
    utf8, unicode, decoding, validation, crab-core
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Union

from crab.core.errors import Utf8Error
from crab.core.panic import panic
from crab.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from crab.core.char import Char

Buffer = Union[bytes, bytearray]

MAX_CODE_POINT = 0x10FFFF
SURROGATE_MIN = 0xD800
SURROGATE_MAX = 0xDFFF

# Sequence width announced by a leading byte; 0 marks bytes that never start
# a sequence (continuation bytes, C0/C1, F5..FF).
UTF8_CHAR_WIDTH = bytes(
    [1] * 0x80
    + [0] * 0x42      # 0x80..0xC1
    + [2] * 0x1E      # 0xC2..0xDF
    + [3] * 0x10      # 0xE0..0xEF
    + [4] * 0x05      # 0xF0..0xF4
    + [0] * 0x0B      # 0xF5..0xFF
)


def char_width(first_byte: int) -> int:
    """Width of the sequence started by ``first_byte`` (0 if it cannot start one)."""
    return UTF8_CHAR_WIDTH[first_byte]


def is_continuation(byte: int) -> bool:
    return byte & 0xC0 == 0x80


def is_valid_code_point(value: int) -> bool:
    return 0 <= value <= MAX_CODE_POINT and not SURROGATE_MIN <= value <= SURROGATE_MAX


def _second_byte_ok(first: int, second: int) -> bool:
    if first == 0xE0:
        return 0xA0 <= second <= 0xBF
    if first == 0xED:
        return 0x80 <= second <= 0x9F
    if first == 0xF0:
        return 0x90 <= second <= 0xBF
    if first == 0xF4:
        return 0x80 <= second <= 0x8F
    return is_continuation(second)


def _check_sequence(data: Buffer, i: int, end: int) -> tuple[int, int | None]:
    """Check the multi-byte sequence at ``i``.

    Returns ``(width, None)`` when valid, otherwise ``(0, error_len)`` where
    ``error_len`` is ``None`` for a sequence cut short by ``end``.
    """
    first = data[i]
    width = UTF8_CHAR_WIDTH[first]
    if width == 0:
        return 0, 1

    if i + 1 >= end:
        return 0, None
    if not _second_byte_ok(first, data[i + 1]):
        return 0, 1

    for offset in range(2, width):
        if i + offset >= end:
            return 0, None
        if not is_continuation(data[i + offset]):
            return 0, offset

    return width, None


def validate(data: Buffer, start: int = 0, end: int | None = None) -> Result[None, Utf8Error]:
    """Validate ``data[start:end]`` as UTF-8.

    On failure the error's ``pos`` is relative to ``start``.
    """
    if end is None:
        end = len(data)

    i = start
    while i < end:
        if data[i] < 0x80:
            i += 1
            continue
        width, error_len = _check_sequence(data, i, end)
        if width == 0:
            return Err(Utf8Error(i - start, error_len))
        i += width

    return Ok(None)


def decode_char(data: Buffer, pos: int, end: int | None = None) -> tuple[int, int]:
    """Decode the scalar value at ``pos`` of an already-validated buffer.

    Returns ``(code_point, width)``. Malformed input panics; run
    :func:`validate` first for untrusted bytes.
    """
    if end is None:
        end = len(data)
    if pos >= end:
        panic(f"decode_char: position {pos} is past the end of the buffer")

    first = data[pos]
    if first < 0x80:
        return first, 1

    width, _ = _check_sequence(data, pos, end)
    if width == 0:
        panic(f"invalid utf-8 sequence at byte {pos}")

    if width == 2:
        value = (first & 0x1F) << 6 | (data[pos + 1] & 0x3F)
    elif width == 3:
        value = (first & 0x0F) << 12 | (data[pos + 1] & 0x3F) << 6 | (data[pos + 2] & 0x3F)
    else:
        value = (
            (first & 0x07) << 18
            | (data[pos + 1] & 0x3F) << 12
            | (data[pos + 2] & 0x3F) << 6
            | (data[pos + 3] & 0x3F)
        )
    return value, width


def decode_last_char(data: Buffer, start: int, end: int) -> tuple[int, int]:
    """Decode the final scalar value of the valid range ``[start, end)``."""
    if end <= start:
        panic("decode_last_char: empty range")
    pos = end - 1
    while pos > start and is_continuation(data[pos]):
        pos -= 1
    return decode_char(data, pos, end)


def decode(data: Buffer, start: int = 0, end: int | None = None) -> Iterator[Char]:
    """Lazily decode ``data[start:end]`` into Chars.

    Each call returns a fresh generator, so the sequence can be restarted.
    """
    from crab.core.char import Char

    if end is None:
        end = len(data)
    pos = start
    while pos < end:
        value, width = decode_char(data, pos, end)
        yield Char._trusted(value)
        pos += width


def encode(code_point: int) -> bytes:
    """UTF-8 encoding of a valid scalar value."""
    if code_point < 0x80:
        return bytes((code_point,))
    if code_point < 0x800:
        return bytes((0xC0 | code_point >> 6, 0x80 | code_point & 0x3F))
    if code_point < 0x10000:
        return bytes((
            0xE0 | code_point >> 12,
            0x80 | code_point >> 6 & 0x3F,
            0x80 | code_point & 0x3F,
        ))
    return bytes((
        0xF0 | code_point >> 18,
        0x80 | code_point >> 12 & 0x3F,
        0x80 | code_point >> 6 & 0x3F,
        0x80 | code_point & 0x3F,
    ))


def encoded_len(code_point: int) -> int:
    if code_point < 0x80:
        return 1
    if code_point < 0x800:
        return 2
    if code_point < 0x10000:
        return 3
    return 4


def is_char_boundary(data: Buffer, index: int, start: int = 0, end: int | None = None) -> bool:
    """True if ``index`` (relative to ``start``) does not split a sequence."""
    if end is None:
        end = len(data)
    length = end - start
    if index == 0 or index == length:
        return True
    if index < 0 or index > length:
        return False
    return not is_continuation(data[start + index])


__all__ = [
    "MAX_CODE_POINT",
    "char_width",
    "decode",
    "decode_char",
    "decode_last_char",
    "encode",
    "encoded_len",
    "is_char_boundary",
    "is_continuation",
    "is_valid_code_point",
    "validate",
]
