"""
Result envelope for consistent success/failure handling.

Provides ``Result[T, E]``: a container holding either a success value ``T``
(built with :func:`Ok`) or an error value ``E`` (built with :func:`Err`).
Results carry *expected* runtime failures (invalid UTF-8, unparsable numbers)
as ordinary values; extracting the wrong side is a contract violation and
panics.

Manifesto:
    - **Explicit over Implicit:** No hidden exceptions that callers might miss
    - **Two channels:** Data errors are Err values; misuse is a panic
    - **Functional composition:** Chain with map/and_then without nested
      try/except blocks
    - **Non-destructive views:** ok()/err() never invalidate the Result
    - **Batch-friendly:** collect_results() and partition_results()

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                      Result[T, E]                            │
        │             _is_ok: bool   │   _value: T | E                 │
        ├─────────────────┬─────────────────┬─────────────────────────┤
        │  Inspection     │  Extraction     │  Transformation         │
        │  • is_ok()      │  • unwrap()     │  • map() / map_err()    │
        │  • is_err()     │  • unwrap_err() │  • and_then()           │
        │  • ok()         │  • expect()     │  • or_else()            │
        │  • err()        │  • expect_err() │  • inspect()            │
        │                 │  • unwrap_or()  │  • inspect_err()        │
        ├─────────────────┴─────────────────┴─────────────────────────┤
        │  In-place: replace(value) -> Option[T]                       │
        │  Utilities: try_result, collect_results, partition_results   │
        └─────────────────────────────────────────────────────────────┘

Examples:
    >>> def divide(a: int, b: int) -> Result[float, str]:
    ...     if b == 0:
    ...         return Err("division by zero")
    ...     return Ok(a / b)
    >>> divide(10, 2).map(lambda x: x + 1).unwrap()
    6.0
    >>> divide(1, 0).unwrap_err()
    'division by zero'
    >>> divide(1, 0).ok().is_none()
    True

Guardrails:
    ❌ DON'T: Use unwrap() without checking is_ok() first
    ✅ DO: Use unwrap_or() or branch on is_ok()

    ❌ DON'T: Raise exceptions inside map/and_then functions
    ✅ DO: Return Err from and_then if the step can fail

Tags:
    result-pattern, error-handling, functional-programming, crab-core
"""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

from crab.core.option import Option
from crab.core.panic import panic

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


class Result(Generic[T, E]):
    """
    Success value or error value.

    Build with :func:`Ok` and :func:`Err`; exactly one of ``is_ok()`` and
    ``is_err()`` is true at any time.

    Examples:
        >>> Ok(42).is_ok()
        True
        >>> Err("bad").is_err()
        True
        >>> Ok(1) == Ok(1)
        True
    """

    __slots__ = ("_is_ok", "_value", "__orig_class__")

    def __init__(self, is_ok: bool, value: T | E):
        self._is_ok = is_ok
        self._value = value

    def is_ok(self) -> bool:
        return self._is_ok

    def is_err(self) -> bool:
        return not self._is_ok

    # -- extraction -----------------------------------------------------

    def _cause(self) -> BaseException | None:
        return self._value if isinstance(self._value, BaseException) else None

    def unwrap(self) -> T:
        """Get the success value; panics on Err."""
        if not self._is_ok:
            panic("Calling Result<T, E>::unwrap() on an Err value", cause=self._cause())
        return self._value

    def unwrap_err(self) -> E:
        """Get the error value; panics on Ok."""
        if self._is_ok:
            panic("Calling Result<T, E>::unwrap_err() on an Ok value")
        return self._value

    def expect(self, message: str) -> T:
        """Get the success value; panics with ``message`` on Err."""
        if not self._is_ok:
            panic(message, cause=self._cause())
        return self._value

    def expect_err(self, message: str) -> E:
        """Get the error value; panics with ``message`` on Ok."""
        if self._is_ok:
            panic(message)
        return self._value

    def unwrap_or(self, default: T) -> T:
        return self._value if self._is_ok else default

    def unwrap_or_else(self, f: Callable[[E], T]) -> T:
        """Get value or call f with error."""
        return self._value if self._is_ok else f(self._value)

    # -- views ----------------------------------------------------------

    def ok(self) -> Option[T]:
        """Success side as an Option. The Result is unchanged."""
        return Option(self._value) if self._is_ok else Option()

    def err(self) -> Option[E]:
        """Error side as an Option. The Result is unchanged."""
        return Option() if self._is_ok else Option(self._value)

    # -- transformation -------------------------------------------------

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        """Transform the value if Ok."""
        if self._is_ok:
            return Ok(f(self._value))
        return Err(self._value)

    def map_err(self, f: Callable[[E], F]) -> Result[T, F]:
        """Transform the error if Err."""
        if self._is_ok:
            return Ok(self._value)
        return Err(f(self._value))

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chain to another Result-returning function."""
        if self._is_ok:
            return f(self._value)
        return Err(self._value)

    flat_map = and_then

    def or_else(self, f: Callable[[E], Result[T, F]]) -> Result[T, F]:
        """Return self if Ok, otherwise call f with error."""
        if self._is_ok:
            return Ok(self._value)
        return f(self._value)

    def inspect(self, f: Callable[[T], Any]) -> Result[T, E]:
        """Call f with value for side effects, return self."""
        if self._is_ok:
            f(self._value)
        return self

    def inspect_err(self, f: Callable[[E], Any]) -> Result[T, E]:
        """Call f with error for side effects, return self."""
        if not self._is_ok:
            f(self._value)
        return self

    # -- in-place -------------------------------------------------------

    def replace(self, value: T) -> Option[T]:
        """Make this Result ``Ok(value)``.

        Returns the previous success value, or none if the Result held an
        error (the error is discarded).
        """
        previous = Option(self._value) if self._is_ok else Option()
        self._is_ok = True
        self._value = value
        return previous

    # -- protocol -------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return self._is_ok == other._is_ok and self._value == other._value

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if self._is_ok:
            return {"ok": True, "value": self._value}
        error = self._value
        if hasattr(error, "to_dict"):
            return {"ok": False, "error": error.to_dict()}
        if isinstance(error, BaseException):
            return {
                "ok": False,
                "error": {
                    "error_type": type(error).__name__,
                    "message": str(error),
                },
            }
        return {"ok": False, "error": error}

    def __repr__(self) -> str:
        if self._is_ok:
            return f"Ok({self._value!r})"
        return f"Err({self._value!r})"


def Ok(value: T) -> Result[T, Any]:
    """Build a successful Result."""
    return Result(True, value)


def Err(error: E) -> Result[Any, E]:
    """Build a failed Result."""
    return Result(False, error)


# =============================================================================
# RESULT CONSTRUCTORS AND UTILITIES
# =============================================================================


def try_result(
    f: Callable[[], T],
    error_mapper: Callable[[Exception], Any] | None = None,
) -> Result[T, Any]:
    """
    Execute a function and wrap its outcome in a Result.

    Ordinary exceptions become ``Err`` (optionally transformed by
    ``error_mapper``). A :class:`~crab.core.panic.Panic` is a ``BaseException``
    and propagates untouched.

    Examples:
        >>> try_result(lambda: int("12")).unwrap()
        12
        >>> try_result(lambda: int("x")).is_err()
        True
    """
    try:
        return Ok(f())
    except Exception as e:
        if error_mapper:
            return Err(error_mapper(e))
        return Err(e)


def collect_results(results: list[Result[T, E]]) -> Result[list[T], E]:
    """
    Collect a list of Results into a Result of list (fail-fast).

    Examples:
        >>> collect_results([Ok(1), Ok(2)]).unwrap()
        [1, 2]
        >>> collect_results([Ok(1), Err("a"), Err("b")]).unwrap_err()
        'a'
    """
    values = []
    for result in results:
        if result.is_err():
            return Err(result.unwrap_err())
        values.append(result.unwrap())
    return Ok(values)


def partition_results(results: list[Result[T, E]]) -> tuple[list[T], list[E]]:
    """
    Partition Results into successful values and errors.

    Examples:
        >>> partition_results([Ok(1), Err("a"), Ok(2)])
        ([1, 2], ['a'])
    """
    values = []
    errors = []
    for result in results:
        if result.is_ok():
            values.append(result.unwrap())
        else:
            errors.append(result.unwrap_err())
    return values, errors


__all__ = [
    "Result",
    "Ok",
    "Err",
    "try_result",
    "collect_results",
    "partition_results",
]
