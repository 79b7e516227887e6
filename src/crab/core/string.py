"""
Owned, growable UTF-8 strings.

Provides :class:`String`, which owns a byte buffer sized to its capacity and
tracks how many of those bytes are in use. Every mutation keeps the used
prefix valid UTF-8: appends take already-valid text (Str, String, Char, or a
Python ``str``), and every cut (``truncate``, ``split_off``, ``pop``) lands on
a character boundary or panics.

Read-only behaviour comes from :class:`~crab.core.str_view.StrMethods`; the
views it returns borrow this String's buffer.

Manifesto:
    - **Capacity is observable:** ``capacity() >= size()`` always; growth
      doubles, ``reserve`` never shrinks
    - **Copy vs move is explicit:** ``String(other)``/``clone()`` deep-copy,
      ``String.move_from(other)`` transfers the buffer and leaves ``other``
      empty with capacity 0
    - **Invalid cuts panic:** Truncating inside a multi-byte sequence is a
      caller bug

Architecture:
    ::

        String
          _buf: bytearray   (len(_buf) == capacity)
          _len: int         (bytes in use, valid UTF-8)
          _generation: int  (bumped on reallocation, truncation, clear)
               │
               │ as_str(), slice(), split(), ...
               ▼
          Str view over _buf[0:_len]

Examples:
    >>> s = String.from_str("hello").unwrap()
    >>> s.push_str(" world")
    >>> s += Char("!")
    >>> str(s)
    'hello world!'
    >>> tail = s.split_off(6)
    >>> (str(s), str(tail))
    ('hello ', 'world!')
    >>> s.pop().unwrap()
    Char(' ')

Guardrails:
    ❌ DON'T: Use a Str borrowed from a String after mutating the String
    ✅ DO: Borrow again with ``as_str()``

Tags:
    string, utf8, buffer, ownership, crab-core
"""

from __future__ import annotations

from typing import Any, Iterable

from crab.core import utf8
from crab.core.char import Char
from crab.core.errors import Utf8Error
from crab.core.logging import get_logger
from crab.core.option import Option
from crab.core.panic import panic
from crab.core.result import Result
from crab.core.settings import get_settings
from crab.core.str_view import Buffer, Str, StrMethods, as_text

logger = get_logger(__name__)


class String(StrMethods):
    """
    An owned, growable, UTF-8-validated buffer.

    ``String()`` is empty with capacity 0. ``String(source)`` deep-copies a
    Str, String or Python ``str``.

    Examples:
        >>> String().capacity()
        0
        >>> String("abc") == "abc"
        True
    """

    __slots__ = ("_buf", "_len", "_generation")

    def __init__(self, source: Any = None):
        self._generation = 0
        if source is None:
            self._buf = bytearray()
            self._len = 0
            return

        raw = as_text(source)
        capacity = source.capacity() if isinstance(source, String) else len(raw)
        self._buf = bytearray(capacity)
        self._buf[: len(raw)] = raw
        self._len = len(raw)

    @classmethod
    def _from_validated(cls, raw: bytes) -> String:
        string = cls.__new__(cls)
        string._buf = bytearray(raw)
        string._len = len(raw)
        string._generation = 0
        return string

    # -- constructors ---------------------------------------------------

    @classmethod
    def from_raw_parts(cls, data: Buffer | None, length: int) -> Result[String, Utf8Error]:
        """Validate and copy the first ``length`` bytes of ``data``."""
        return Str.from_raw_parts(data, length).map(lambda view: cls._from_validated(view.as_raw()))

    @classmethod
    def from_cstr(cls, data: Buffer) -> Result[String, Utf8Error]:
        return Str.from_cstr(data).map(lambda view: cls._from_validated(view.as_raw()))

    @classmethod
    def from_utf8(cls, data: Buffer) -> Result[String, Utf8Error]:
        return Str.from_utf8(data).map(lambda view: cls._from_validated(view.as_raw()))

    @classmethod
    def from_str(cls, text: str) -> Result[String, Utf8Error]:
        return Str.from_str(text).map(lambda view: cls._from_validated(view.as_raw()))

    @classmethod
    def with_capacity(cls, capacity: int) -> String:
        string = cls()
        string.reserve(capacity)
        return string

    @classmethod
    def from_iter(cls, items: Iterable[Any]) -> String:
        """Collect Chars and strings into a new String."""
        string = cls()
        for item in items:
            if isinstance(item, Char):
                string.push(item)
            else:
                string.push_str(item)
        return string

    @classmethod
    def move_from(cls, other: String) -> String:
        """Take ``other``'s buffer, leaving it empty with capacity 0."""
        string = cls.__new__(cls)
        string._buf = other._buf
        string._len = other._len
        string._generation = 0
        other._buf = bytearray()
        other._len = 0
        return string

    def clone(self) -> String:
        return String(self)

    def __copy__(self) -> String:
        return String(self)

    def __deepcopy__(self, memo: dict[int, Any]) -> String:
        return String(self)

    # -- accessors ------------------------------------------------------

    def capacity(self) -> int:
        return len(self._buf)

    def as_str(self) -> Str:
        """Borrow the whole String as a view."""
        return self._borrow(0, self._len)

    def _span(self) -> tuple[Buffer, int, int]:
        return self._buf, 0, self._len

    def _borrow(self, start: int, end: int) -> Str:
        owner = self if get_settings().debug_borrow_checks else None
        return Str._view(self._buf, start, end - start, owner, self._generation)

    def _invalidate(self) -> None:
        self._generation += 1

    # -- capacity -------------------------------------------------------

    def _reallocate(self, capacity: int) -> None:
        logger.debug(
            "string_reallocate",
            old_capacity=len(self._buf),
            new_capacity=capacity,
            size=self._len,
        )
        buf = bytearray(capacity)
        buf[: self._len] = self._buf[: self._len]
        self._buf = buf
        self._invalidate()

    def reserve(self, capacity: int) -> None:
        """Ensure ``capacity() >= capacity``; never shrinks."""
        if capacity < 0:
            panic(f"reserve: negative capacity {capacity}")
        current = len(self._buf)
        if capacity <= current:
            return
        self._reallocate(max(capacity, 2 * current))

    def shrink_to_fit(self) -> None:
        if len(self._buf) > self._len:
            self._reallocate(self._len)

    # -- mutation -------------------------------------------------------

    def _append(self, raw: bytes) -> None:
        new_len = self._len + len(raw)
        self.reserve(new_len)
        self._buf[self._len:new_len] = raw
        self._len = new_len

    def push(self, ch: Char | str) -> None:
        """Append one character."""
        if not isinstance(ch, Char):
            ch = Char(ch)
        self._append(ch.encode_utf8())

    def push_str(self, text: Any) -> None:
        """Append a Str, String or Python ``str``."""
        self._append(as_text(text))

    def clear(self) -> None:
        """Drop the contents, keep the capacity."""
        self._len = 0
        self._invalidate()

    def _check_cut(self, index: int, operation: str) -> None:
        if index < 0 or index > self._len:
            panic(f"{operation}: byte index {index} is out of bounds of string of length {self._len}")
        if not utf8.is_char_boundary(self._buf, index, 0, self._len):
            panic(f"{operation}: byte index {index} is not a char boundary")

    def split_off(self, at: int) -> String:
        """Move bytes ``[at, size())`` into a new String."""
        self._check_cut(at, "split_off")
        tail = String._from_validated(bytes(self._buf[at:self._len]))
        self._len = at
        self._invalidate()
        return tail

    def truncate(self, new_len: int) -> None:
        """Shorten to ``new_len`` bytes; no-op when already that short."""
        if new_len >= self._len:
            return
        self._check_cut(new_len, "truncate")
        self._len = new_len
        self._invalidate()

    def pop(self) -> Option[Char]:
        """Remove and return the last character."""
        if self._len == 0:
            return Option()
        value, width = utf8.decode_last_char(self._buf, 0, self._len)
        self._len -= width
        self._invalidate()
        return Option(Char._trusted(value))

    def make_ascii_lowercase(self) -> None:
        self._buf[: self._len] = self._buf[: self._len].lower()

    def make_ascii_uppercase(self) -> None:
        self._buf[: self._len] = self._buf[: self._len].upper()

    # -- operators ------------------------------------------------------

    def __iadd__(self, other: Any) -> String:
        if isinstance(other, Char):
            self.push(other)
        elif isinstance(other, (StrMethods, str)):
            self.push_str(other)
        else:
            return NotImplemented
        return self

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"String({self.to_std_string()!r})"


def join_with(pieces: Iterable[Any], separator: Any) -> String:
    """Concatenate ``pieces`` with ``separator`` between each pair.

    Examples:
        >>> view = Str.from_str("hello,world").unwrap()
        >>> str(join_with(view.split(","), "."))
        'hello.world'
    """
    sep = as_text(separator)
    result = String()
    for index, piece in enumerate(pieces):
        if index:
            result._append(sep)
        if isinstance(piece, Char):
            result.push(piece)
        else:
            result.push_str(piece)
    return result


__all__ = ["String", "join_with"]
