"""
Option envelope for explicit presence/absence.

Provides ``Option[T]``, a container that holds either nothing or exactly one
value. Unlike ``T | None``, an Option distinguishes "no value" from "the value
``None``", supports in-place ownership transfers (``take``, ``replace``,
``take_if``), and panics loudly when a caller extracts from an empty Option.

Manifesto:
    - **Explicit absence:** "none" is its own discriminant, never a sentinel
      value, so ``Some(None)`` is a legitimate, present payload
    - **Contract violations panic:** ``unwrap``/``take`` on none is a bug in the
      caller, reported through :func:`crab.core.panic.panic`
    - **Ownership transfers are visible:** ``take`` empties the source,
      ``replace`` hands back the previous payload
    - **Composable:** ``map``/``and_then`` chain without unwrapping

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                        Option[T]                             │
        │            _is_some: bool   │   _value: T                    │
        ├─────────────────┬─────────────────┬─────────────────────────┤
        │  Inspection     │  Extraction     │  In-place transfer      │
        │  • is_some()    │  • unwrap()     │  • take()               │
        │  • is_none()    │  • expect()     │  • take_if()            │
        │                 │  • unwrap_or()  │  • take_or_default()    │
        │  Transformation │  • ok_or()      │  • take_or_else()       │
        │  • map()        │                 │  • replace()            │
        │  • and_then()   │  Operators      │                         │
        │  • filter()     │  • + - * / // % │                         │
        │  • inspect()    │    ** (none-    │                         │
        │                 │    absorbing)   │                         │
        └─────────────────┴─────────────────┴─────────────────────────┘

Examples:
    >>> opt = Some(42)
    >>> opt.map(lambda x: x * 2).unwrap()
    84
    >>> opt.take()
    42
    >>> opt.is_none()
    True
    >>> Option[int]().take_or_default()
    0
    >>> (Some(2) + Nothing()).is_none()
    True

Guardrails:
    ❌ DON'T: Call unwrap() without knowing the Option is some
    ✅ DO: Use unwrap_or()/take_or_else() or check is_some() first

    ❌ DON'T: Use Option to report *why* something failed
    ✅ DO: Use Result with an error payload for that

Tags:
    option, maybe, optional-value, ownership, crab-core
"""

from __future__ import annotations

import operator
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar, get_args

from crab.core.panic import panic

if TYPE_CHECKING:
    from crab.core.result import Result

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


class _NoneMarker:
    """Explicit "none" marker accepted by the Option constructor."""

    __slots__ = ()
    _instance: _NoneMarker | None = None

    def __new__(cls) -> _NoneMarker:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NONE"

    def __reduce__(self) -> str:
        return "NONE"


NONE = _NoneMarker()


class Option(Generic[T]):
    """
    A value that may be absent.

    ``Option(value)`` is some, ``Option()`` and ``Option(NONE)`` are none.
    Parametrising the constructor (``Option[int]()``) records ``T`` so that
    ``take_or_default`` can build a default value.

    Examples:
        >>> Option(5).is_some()
        True
        >>> Option().is_none()
        True
        >>> Option(None).is_some()
        True
    """

    __slots__ = ("_is_some", "_value", "__orig_class__")

    def __init__(self, value: T | _NoneMarker = NONE):
        if value is NONE:
            self._is_some = False
            self._value = None
        else:
            self._is_some = True
            self._value = value

    @classmethod
    def from_nullable(cls, value: T | None) -> Option[T]:
        """Build an Option where ``None`` means absent."""
        if value is None:
            return cls()
        return cls(value)

    # -- inspection -----------------------------------------------------

    def is_some(self) -> bool:
        return self._is_some

    def is_none(self) -> bool:
        return not self._is_some

    # -- extraction -----------------------------------------------------

    def unwrap(self) -> T:
        """Get the payload; panics if none."""
        if not self._is_some:
            panic("Calling Option<T>::unwrap() on a None value")
        return self._value

    def expect(self, message: str) -> T:
        """Get the payload; panics with ``message`` if none."""
        if not self._is_some:
            panic(message)
        return self._value

    def unwrap_or(self, default: T) -> T:
        return self._value if self._is_some else default

    def unwrap_or_else(self, f: Callable[[], T]) -> T:
        return self._value if self._is_some else f()

    def ok_or(self, error: E) -> Result[T, E]:
        """Convert to a Result, using ``error`` when none."""
        from crab.core.result import Err, Ok

        if self._is_some:
            return Ok(self._value)
        return Err(error)

    # -- transformation -------------------------------------------------

    def map(self, f: Callable[[T], U]) -> Option[U]:
        """Apply ``f`` to the payload if some. The receiver is unchanged."""
        if self._is_some:
            return Option(f(self._value))
        return Option()

    def and_then(self, f: Callable[[T], Option[U]]) -> Option[U]:
        """Chain an Option-returning function; none short-circuits."""
        if self._is_some:
            return f(self._value)
        return Option()

    def filter(self, predicate: Callable[[T], bool]) -> Option[T]:
        if self._is_some and predicate(self._value):
            return Option(self._value)
        return Option()

    def inspect(self, f: Callable[[T], Any]) -> Option[T]:
        """Call ``f`` with the payload for side effects, return self."""
        if self._is_some:
            f(self._value)
        return self

    # -- in-place transfer ----------------------------------------------

    def _release(self) -> T:
        value = self._value
        self._is_some = False
        self._value = None
        return value

    def take(self) -> T:
        """Move the payload out, leaving none; panics if already none."""
        if not self._is_some:
            panic("Calling Option<T>::take() on a None value")
        return self._release()

    def take_if(self, predicate: Callable[[T], bool]) -> Option[T]:
        """Take the payload only if ``predicate`` holds for it."""
        if self._is_some and predicate(self._value):
            return Option(self._release())
        return Option()

    def take_or_default(self, default_type: Callable[[], T] | None = None) -> T:
        """Take the payload, or build ``T()`` when none.

        ``T`` is ``default_type`` when given, otherwise the type argument of a
        parametrised construction such as ``Option[int]()``.
        """
        if self._is_some:
            return self._release()
        factory = default_type or self._type_argument()
        if factory is None:
            panic("Calling Option<T>::take_or_default() without a known T")
        return factory()

    def take_or_else(self, f: Callable[[], T]) -> T:
        if self._is_some:
            return self._release()
        return f()

    def replace(self, value: T) -> Option[T]:
        """Store ``value`` and return the previous state."""
        previous = Option(self._value) if self._is_some else Option()
        self._is_some = True
        self._value = value
        return previous

    def _type_argument(self) -> type | None:
        orig = getattr(self, "__orig_class__", None)
        if orig is None:
            return None
        args = get_args(orig)
        if args and isinstance(args[0], type):
            return args[0]
        return None

    # -- operators ------------------------------------------------------
    #
    # Binary operators are some only when both operands are some. A none on
    # either side short-circuits before the operator is looked up.

    def _combine(self, other: object, op: Callable[[Any, Any], Any]) -> Option[Any]:
        if not isinstance(other, Option):
            return NotImplemented
        if not (self._is_some and other._is_some):
            return Option()
        return Option(op(self._value, other._value))

    def __add__(self, other: object) -> Option[Any]:
        return self._combine(other, operator.add)

    def __sub__(self, other: object) -> Option[Any]:
        return self._combine(other, operator.sub)

    def __mul__(self, other: object) -> Option[Any]:
        return self._combine(other, operator.mul)

    def __truediv__(self, other: object) -> Option[Any]:
        return self._combine(other, operator.truediv)

    def __floordiv__(self, other: object) -> Option[Any]:
        return self._combine(other, operator.floordiv)

    def __mod__(self, other: object) -> Option[Any]:
        return self._combine(other, operator.mod)

    def __pow__(self, other: object) -> Option[Any]:
        return self._combine(other, operator.pow)

    # -- protocol -------------------------------------------------------

    def __bool__(self) -> bool:
        return self._is_some

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Option):
            return NotImplemented
        if self._is_some != other._is_some:
            return False
        return not self._is_some or self._value == other._value

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if self._is_some:
            return {"some": True, "value": self._value}
        return {"some": False}

    def __repr__(self) -> str:
        if self._is_some:
            return f"Some({self._value!r})"
        return "Nothing()"


def Some(value: T) -> Option[T]:
    """Build a present Option."""
    return Option(value)


def Nothing() -> Option[Any]:
    """Build an absent Option."""
    return Option()


__all__ = ["Option", "Some", "Nothing", "NONE"]
