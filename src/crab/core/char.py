"""
Validated Unicode scalar values.

A :class:`Char` wraps a code point in ``0..=0x10FFFF`` outside the surrogate
range ``0xD800..=0xDFFF``. The only ways to get one are validated
construction (``Char(...)``, ``Char.from_u32``) and the UTF-8 decoder, so a
Char in hand is always encodable.

Examples:
    >>> Char("é").code_point()
    233
    >>> Char(0x1F980).len_utf8()
    4
    >>> Char.from_u32(0xD800).is_none()
    True

Tags:
    unicode, code-point, char, utf8, crab-core
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from typing import Union

from crab.core import utf8
from crab.core.option import Option
from crab.core.panic import panic

ASCII_WHITESPACE = b" \t\n\r\x0b\x0c"


@total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class Char:
    """
    A single Unicode scalar value.

    Accepts an ``int`` code point or a one-character ``str``. Anything else,
    and any surrogate or out-of-range code point, panics.
    """

    value: int

    def __post_init__(self) -> None:
        value = self.value
        if isinstance(value, str):
            if len(value) != 1:
                panic(f"Char requires a single character, got {len(value)}")
            value = ord(value)
            object.__setattr__(self, "value", value)
        elif not isinstance(value, int) or isinstance(value, bool):
            panic(f"Char requires an int or a single-character str, got {type(value).__name__}")
        if not utf8.is_valid_code_point(value):
            panic(f"invalid Unicode scalar value: {value:#x}")

    @classmethod
    def from_u32(cls, value: int) -> Option[Char]:
        """Non-panicking construction; none for surrogates and out-of-range values."""
        if utf8.is_valid_code_point(value):
            return Option(cls._trusted(value))
        return Option()

    @classmethod
    def _trusted(cls, value: int) -> Char:
        char = object.__new__(cls)
        object.__setattr__(char, "value", value)
        return char

    def code_point(self) -> int:
        return self.value

    def len_utf8(self) -> int:
        """Number of bytes in the UTF-8 encoding (1-4)."""
        return utf8.encoded_len(self.value)

    def encode_utf8(self) -> bytes:
        return utf8.encode(self.value)

    # -- ASCII helpers --------------------------------------------------

    def is_ascii(self) -> bool:
        return self.value < 0x80

    def is_ascii_whitespace(self) -> bool:
        return self.value < 0x80 and self.value in ASCII_WHITESPACE

    def is_ascii_alphabetic(self) -> bool:
        return 0x41 <= self.value <= 0x5A or 0x61 <= self.value <= 0x7A

    def is_ascii_digit(self) -> bool:
        return 0x30 <= self.value <= 0x39

    def to_ascii_lowercase(self) -> Char:
        if 0x41 <= self.value <= 0x5A:
            return Char._trusted(self.value + 0x20)
        return self

    def to_ascii_uppercase(self) -> Char:
        if 0x61 <= self.value <= 0x7A:
            return Char._trusted(self.value - 0x20)
        return self

    # -- protocol -------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Char):
            return self.value == other.value
        if isinstance(other, int) and not isinstance(other, bool):
            return self.value == other
        return NotImplemented

    def __lt__(self, other: Union[Char, int]) -> bool:
        if isinstance(other, Char):
            return self.value < other.value
        if isinstance(other, int):
            return self.value < other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return chr(self.value)

    def __repr__(self) -> str:
        return f"Char({chr(self.value)!r})"


__all__ = ["Char", "ASCII_WHITESPACE"]
