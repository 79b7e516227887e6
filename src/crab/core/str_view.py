"""
Borrowed UTF-8 string views.

Provides :class:`Str`, a non-owning view ``(buffer, start, length)`` over
bytes owned by someone else (a ``bytes`` object, a caller's ``bytearray``, or
a :class:`~crab.core.string.String`). A Str is valid UTF-8 for its entire
extent: every public constructor validates, and every algorithm that produces
a sub-view cuts on character boundaries.

All read-only algorithms live on :class:`StrMethods`, which both ``Str`` and
``String`` inherit, so an owned String answers every query a view does.

Manifesto:
    - **Always valid:** Invalid UTF-8 never becomes a Str; construction
      returns ``Err(Utf8Error)`` with the offending byte offset
    - **Byte offsets, not character indexes:** Slicing, searching and
      matching all speak byte offsets into the view
    - **Boundary misuse panics:** Slicing inside a multi-byte sequence is a
      caller bug, not a data error
    - **Zero-copy views:** Slices, splits, trims and lines share the buffer
    - **Restartable laziness:** split/lines/matches/chars return iterables
      that can be walked any number of times

Architecture:
    ::

        ┌────────────────────────────────────────────────────────────────┐
        │                          StrMethods                             │
        │              _span() -> (buffer, start, end)                    │
        ├──────────────────┬──────────────────┬──────────────────────────┤
        │  Queries         │  Views           │  Lazy sequences          │
        │  • size/empty    │  • slice/[a:b]   │  • split                 │
        │  • find/rfind    │  • trim_ascii*   │  • split_ascii_whitespace│
        │  • contains      │  • strip_prefix  │  • lines                 │
        │  • starts_with   │  • strip_suffix  │  • chars/char_indices    │
        │  • ends_with     │                  │  • matches               │
        │  • is_ascii      │  New Strings     │                          │
        │  • eq_ignore_    │  • replace(_n)   │  Conversion              │
        │    ascii_case    │  • repeat        │  • parse                 │
        │  • == < <= ...   │  • to_ascii_*    │  • to_std_string         │
        ├──────────────────┴──────────────────┴──────────────────────────┤
        │         Str (borrowed view)    │    String (owned buffer)       │
        └────────────────────────────────┴────────────────────────────────┘

Examples:
    >>> text = Str.from_str("Hello World").unwrap()
    >>> text.find("World").unwrap()
    6
    >>> [str(piece) for piece in text.split(" ")]
    ['Hello', 'World']
    >>> str(text.slice(0, 5))
    'Hello'
    >>> Str.from_utf8(b"\\xc0\\x80").unwrap_err().pos
    0

Performance:
    - Searches delegate to ``bytes.find``/``bytearray.find`` over the window
    - Views are O(1) to create; copies happen only for new Strings,
      comparisons and ``as_raw()``

Guardrails:
    ❌ DON'T: Keep a Str borrowed from a String across a mutation of that String
    ✅ DO: Re-borrow with ``as_str()`` after mutating
      (``CRAB_DEBUG_BORROW_CHECKS=1`` detects stale views)

    ❌ DON'T: Slice at character indexes
    ✅ DO: Use offsets from find()/matches() or check is_char_boundary()

Tags:
    string, utf8, view, slicing, searching, crab-core
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Callable, Generic, Iterator, TypeVar, Union

from crab.core import utf8
from crab.core.char import ASCII_WHITESPACE, Char
from crab.core.errors import ErrorCode, ParseError, Utf8Error
from crab.core.numeric import Number, Target, from_chars
from crab.core.option import Option
from crab.core.panic import panic
from crab.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from crab.core.string import String

T = TypeVar("T")

Buffer = Union[bytes, bytearray]

# Byte lengths are modelled as a 64-bit unsigned size type.
SIZE_MAX = (1 << 64) - 1

_NON_WHITESPACE_RUN = re.compile(rb"[^ \t\n\r\x0b\x0c]+")


class Lazy(Generic[T]):
    """A restartable lazy sequence: every ``iter()`` starts a fresh walk."""

    __slots__ = ("_factory",)

    def __init__(self, factory: Callable[[], Iterator[T]]):
        self._factory = factory

    def __iter__(self) -> Iterator[T]:
        return self._factory()

    def collect(self) -> list[T]:
        return list(self._factory())

    def __repr__(self) -> str:
        return f"Lazy({self.collect()!r})"


def as_pattern(value: Any) -> bytes:
    """Bytes of a search pattern (Str, String, Char, str, bytes).

    Raw bytes must be valid UTF-8, otherwise a match could start or end
    inside a code point.
    """
    if isinstance(value, StrMethods):
        return value.as_raw()
    if isinstance(value, (bytes, bytearray)):
        pattern = bytes(value)
        checked = utf8.validate(pattern)
        if checked.is_err():
            panic(f"pattern is not valid UTF-8: {checked.unwrap_err()}")
        return pattern
    return as_text(value)


def as_text(value: Any) -> bytes:
    """UTF-8 bytes of a value that is guaranteed valid (Str, String, Char, str)."""
    if isinstance(value, StrMethods):
        return value.as_raw()
    if isinstance(value, Char):
        return value.encode_utf8()
    if isinstance(value, str):
        try:
            return value.encode("utf-8")
        except UnicodeEncodeError as exc:
            panic(f"str argument is not valid UTF-8: byte index {exc.start}")
    raise TypeError(f"expected a string or Char, got {type(value).__name__}")


def _comparable(value: Any) -> bytes | None:
    if isinstance(value, StrMethods):
        return value.as_raw()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8", "surrogatepass")
    return None


class StrMethods:
    """Read-only string algorithms over a validated byte window."""

    __slots__ = ()

    def _span(self) -> tuple[Buffer, int, int]:
        raise NotImplementedError

    def _borrow(self, start: int, end: int) -> Str:
        """View of the absolute byte range ``[start, end)`` of the buffer."""
        raise NotImplementedError

    # -- accessors ------------------------------------------------------

    def size(self) -> int:
        _, start, end = self._span()
        return end - start

    def __len__(self) -> int:
        return self.size()

    def empty(self) -> bool:
        return self.size() == 0

    def as_raw(self) -> bytes:
        """Copy of the viewed bytes."""
        data, start, end = self._span()
        return bytes(data[start:end])

    as_bytes = as_raw

    def __bytes__(self) -> bytes:
        return self.as_raw()

    def to_std_string(self) -> str:
        """Copy into a Python ``str``."""
        return self.as_raw().decode("utf-8")

    def __str__(self) -> str:
        return self.to_std_string()

    # -- comparison -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        raw = _comparable(other)
        if raw is None:
            return NotImplemented
        return self.as_raw() == raw

    def __ne__(self, other: object) -> bool:
        raw = _comparable(other)
        if raw is None:
            return NotImplemented
        return self.as_raw() != raw

    def __lt__(self, other: object) -> bool:
        raw = _comparable(other)
        if raw is None:
            return NotImplemented
        return self.as_raw() < raw

    def __le__(self, other: object) -> bool:
        raw = _comparable(other)
        if raw is None:
            return NotImplemented
        return self.as_raw() <= raw

    def __gt__(self, other: object) -> bool:
        raw = _comparable(other)
        if raw is None:
            return NotImplemented
        return self.as_raw() > raw

    def __ge__(self, other: object) -> bool:
        raw = _comparable(other)
        if raw is None:
            return NotImplemented
        return self.as_raw() >= raw

    def eq_ignore_ascii_case(self, other: Any) -> bool:
        """Byte-wise equality folding ASCII letters only."""
        a = self.as_raw()
        b = as_pattern(other)
        return len(a) == len(b) and a.lower() == b.lower()

    def is_ascii(self) -> bool:
        return self.as_raw().isascii()

    # -- searching ------------------------------------------------------

    def contains(self, pattern: Any) -> bool:
        data, start, end = self._span()
        return data.find(as_pattern(pattern), start, end) != -1

    def __contains__(self, pattern: Any) -> bool:
        return self.contains(pattern)

    def starts_with(self, pattern: Any) -> bool:
        data, start, end = self._span()
        return data.startswith(as_pattern(pattern), start, end)

    def ends_with(self, pattern: Any) -> bool:
        data, start, end = self._span()
        return data.endswith(as_pattern(pattern), start, end)

    def find(self, pattern: Any) -> Option[int]:
        """Byte offset of the first match. An empty pattern matches at 0."""
        data, start, end = self._span()
        index = data.find(as_pattern(pattern), start, end)
        return Option() if index == -1 else Option(index - start)

    def rfind(self, pattern: Any) -> Option[int]:
        """Byte offset of the last match. An empty pattern matches at size()."""
        data, start, end = self._span()
        index = data.rfind(as_pattern(pattern), start, end)
        return Option() if index == -1 else Option(index - start)

    def matches(self, pattern: Any) -> Lazy[int]:
        """Offsets of non-overlapping, leftmost-first matches.

        An empty pattern yields nothing, unlike ``find`` which reports 0.
        """
        data, start, end = self._span()
        needle = as_pattern(pattern)

        def walk() -> Iterator[int]:
            if not needle:
                return
            pos = start
            while True:
                index = data.find(needle, pos, end)
                if index == -1:
                    return
                yield index - start
                pos = index + len(needle)

        return Lazy(walk)

    # -- slicing --------------------------------------------------------

    def is_char_boundary(self, index: int) -> bool:
        data, start, end = self._span()
        return utf8.is_char_boundary(data, index, start, end)

    def slice(self, start: int, end: int | None = None) -> Str:
        """View of bytes ``[start, end)``; panics on bad bounds or boundaries."""
        data, base, limit = self._span()
        size = limit - base
        if end is None:
            end = size

        for index in (start, end):
            if index < 0 or index > size:
                panic(f"byte index {index} is out of bounds of string of length {size}")
        if start > end:
            panic(f"slice index starts at {start} but ends at {end}")
        for index in (start, end):
            if not utf8.is_char_boundary(data, index, base, limit):
                panic(f"byte index {index} is not a char boundary")

        return self._borrow(base + start, base + end)

    def __getitem__(self, key: slice) -> Str:
        if not isinstance(key, slice):
            raise TypeError("string views are indexed by byte slices, e.g. s[0:5]")
        if key.step not in (None, 1):
            raise ValueError("string slices do not support a step")
        return self.slice(0 if key.start is None else key.start, key.stop)

    def trim_ascii_start(self) -> Str:
        data, start, end = self._span()
        while start < end and data[start] in ASCII_WHITESPACE:
            start += 1
        return self._borrow(start, end)

    def trim_ascii_end(self) -> Str:
        data, start, end = self._span()
        while end > start and data[end - 1] in ASCII_WHITESPACE:
            end -= 1
        return self._borrow(start, end)

    def trim_ascii(self) -> Str:
        return self.trim_ascii_start().trim_ascii_end()

    def strip_prefix(self, prefix: Any) -> Option[Str]:
        data, start, end = self._span()
        needle = as_pattern(prefix)
        if data.startswith(needle, start, end):
            return Option(self._borrow(start + len(needle), end))
        return Option()

    def strip_suffix(self, suffix: Any) -> Option[Str]:
        data, start, end = self._span()
        needle = as_pattern(suffix)
        if data.endswith(needle, start, end):
            return Option(self._borrow(start, end - len(needle)))
        return Option()

    # -- lazy sequences -------------------------------------------------

    def split(self, separator: Any) -> Lazy[Str]:
        """Pieces between occurrences of ``separator``.

        Leading and trailing separators produce empty pieces. An empty
        separator matches nowhere, so the whole view is the only piece.
        """
        data, start, end = self._span()
        needle = as_pattern(separator)

        def walk() -> Iterator[Str]:
            if not needle:
                yield self._borrow(start, end)
                return
            pos = start
            while True:
                index = data.find(needle, pos, end)
                if index == -1:
                    yield self._borrow(pos, end)
                    return
                yield self._borrow(pos, index)
                pos = index + len(needle)

        return Lazy(walk)

    def split_ascii_whitespace(self) -> Lazy[Str]:
        """Runs of non-whitespace; never yields empty pieces."""
        data, start, end = self._span()

        def walk() -> Iterator[Str]:
            for match in _NON_WHITESPACE_RUN.finditer(data, start, end):
                yield self._borrow(match.start(), match.end())

        return Lazy(walk)

    def lines(self) -> Lazy[Str]:
        """Lines split on ``\\n`` with one trailing ``\\r`` removed.

        A final line terminator does not produce an extra empty line.
        """
        data, start, end = self._span()

        def walk() -> Iterator[Str]:
            pos = start
            while pos < end:
                index = data.find(b"\n", pos, end)
                if index == -1:
                    line_end = next_pos = end
                else:
                    line_end, next_pos = index, index + 1
                if line_end > pos and data[line_end - 1] == 0x0D:
                    line_end -= 1
                yield self._borrow(pos, line_end)
                pos = next_pos

        return Lazy(walk)

    def chars(self) -> Lazy[Char]:
        data, start, end = self._span()
        return Lazy(lambda: utf8.decode(data, start, end))

    def char_indices(self) -> Lazy[tuple[int, Char]]:
        """``(byte_offset, Char)`` pairs."""
        data, start, end = self._span()

        def walk() -> Iterator[tuple[int, Char]]:
            pos = start
            while pos < end:
                value, width = utf8.decode_char(data, pos, end)
                yield pos - start, Char._trusted(value)
                pos += width

        return Lazy(walk)

    # -- conversion -----------------------------------------------------

    def parse(self, target: Target) -> Result[Number, ParseError]:
        """Parse the whole view as a number of type ``target``.

        Trailing bytes after a valid numeric prefix are INVALID_ARGUMENT.
        """
        data, start, end = self._span()
        converted = from_chars(data, target, start, end)
        if converted.is_err():
            return Err(converted.unwrap_err())
        value, consumed = converted.unwrap()
        if consumed != end - start:
            name = getattr(target, "name", getattr(target, "__name__", repr(target)))
            return Err(
                ParseError(ErrorCode.INVALID_ARGUMENT, target=name).with_context(offset=consumed)
            )
        return Ok(value)

    # -- new owned strings ----------------------------------------------

    def to_ascii_lowercase(self) -> String:
        from crab.core.string import String

        return String._from_validated(self.as_raw().lower())

    def to_ascii_uppercase(self) -> String:
        from crab.core.string import String

        return String._from_validated(self.as_raw().upper())

    def replace(self, pattern: Any, replacement: Any) -> String:
        """Replace every non-overlapping match; an empty pattern replaces nothing."""
        return self._replace(pattern, replacement, -1)

    def replace_n(self, pattern: Any, replacement: Any, limit: int) -> String:
        """Replace at most ``limit`` leftmost matches."""
        if limit < 0:
            panic(f"replace_n limit must be non-negative, got {limit}")
        return self._replace(pattern, replacement, limit)

    def _replace(self, pattern: Any, replacement: Any, limit: int) -> String:
        from crab.core.string import String

        raw = self.as_raw()
        needle = as_pattern(pattern)
        new = as_text(replacement)
        if not needle or limit == 0:
            return String._from_validated(raw)
        return String._from_validated(raw.replace(needle, new, limit))

    def repeat(self, times: int) -> String:
        """The view concatenated ``times`` times; panics on size overflow."""
        from crab.core.string import String

        if times < 0:
            panic(f"Repeat times must be non-negative, got {times}")
        size = self.size()
        if size == 0 or times == 0:
            return String()
        if size * times > SIZE_MAX:
            panic("Repeat times overflow")
        return String._from_validated(self.as_raw() * times)

    def __add__(self, other: Any) -> String:
        from crab.core.string import String

        if not isinstance(other, (StrMethods, Char, str)):
            return NotImplemented
        result = String(self)
        result += other
        return result

    def __radd__(self, other: Any) -> String:
        from crab.core.string import String

        if not isinstance(other, str):
            return NotImplemented
        result = String(other)
        result += self
        return result


class Str(StrMethods):
    """
    A borrowed, UTF-8-validated view.

    ``Str()`` is the empty view. Use the ``from_*`` constructors to validate
    external bytes; each returns ``Result[Str, Utf8Error]``.

    Examples:
        >>> Str().empty()
        True
        >>> Str.from_cstr(b"World\\x00junk").unwrap().size()
        5
        >>> Str.from_raw_parts(b"\\xe4\\xbd", 2).unwrap_err().error_len is None
        True
    """

    __slots__ = ("_data", "_start", "_len", "_owner", "_generation")

    def __init__(self) -> None:
        self._data: Buffer = b""
        self._start = 0
        self._len = 0
        self._owner = None
        self._generation = 0

    @classmethod
    def _view(
        cls,
        data: Buffer,
        start: int,
        length: int,
        owner: Any = None,
        generation: int = 0,
    ) -> Str:
        view = cls.__new__(cls)
        view._data = data
        view._start = start
        view._len = length
        view._owner = owner
        view._generation = generation
        return view

    # -- constructors ---------------------------------------------------

    @classmethod
    def from_raw_parts(cls, data: Buffer | None, length: int) -> Result[Str, Utf8Error]:
        """Validate the first ``length`` bytes of ``data``."""
        if data is None:
            if length != 0:
                panic(f"from_raw_parts: null buffer with length {length}")
            return Ok(cls())
        if isinstance(data, memoryview):
            data = data.tobytes()
        if length < 0 or length > len(data):
            panic(f"from_raw_parts: length {length} is out of bounds of buffer of length {len(data)}")

        checked = utf8.validate(data, 0, length)
        if checked.is_err():
            return Err(checked.unwrap_err().with_context(operation="from_raw_parts", length=length))
        return Ok(cls._view(data, 0, length))

    @classmethod
    def from_cstr(cls, data: Buffer) -> Result[Str, Utf8Error]:
        """Validate ``data`` up to its first NUL byte (or its end)."""
        nul = data.find(b"\x00")
        return cls.from_raw_parts(data, len(data) if nul == -1 else nul)

    @classmethod
    def from_utf8(cls, data: Buffer) -> Result[Str, Utf8Error]:
        return cls.from_raw_parts(data, len(data))

    @classmethod
    def from_str(cls, text: str) -> Result[Str, Utf8Error]:
        """Encode a Python ``str``; lone surrogates are reported as Utf8Error."""
        return cls.from_utf8(text.encode("utf-8", "surrogatepass"))

    @classmethod
    def from_bytes_unchecked(cls, data: Buffer, start: int = 0, length: int | None = None) -> Str:
        """Wrap bytes that are already known to be valid UTF-8."""
        if length is None:
            length = len(data) - start
        return cls._view(data, start, length)

    # -- StrMethods -----------------------------------------------------

    def _span(self) -> tuple[Buffer, int, int]:
        if self._owner is not None and self._owner._generation != self._generation:
            panic("use of a str view invalidated by mutation of its String")
        return self._data, self._start, self._start + self._len

    def _borrow(self, start: int, end: int) -> Str:
        return Str._view(self._data, start, end - start, self._owner, self._generation)

    def __hash__(self) -> int:
        return hash(self.as_raw())

    def __repr__(self) -> str:
        return f"Str({self.to_std_string()!r})"


__all__ = ["Str", "StrMethods", "Lazy", "SIZE_MAX", "as_pattern", "as_text"]
