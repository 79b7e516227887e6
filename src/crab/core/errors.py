"""
Structured error types for crab-core.

Provides the typed errors that travel through the ``Err`` side of a Result:
UTF-8 decoding failures and numeric parse failures. These are *data* errors,
produced by untrusted input, and are always returned as values. Contract
violations never use this hierarchy; they go through :mod:`crab.core.panic`.

Every CrabError carries:
- **Category:** What kind of error (encoding, parse, internal)
- **Context:** Structured metadata (operation, offset, length, target type)
- **Cause:** Chained underlying exception for root cause analysis

Manifesto:
    - **Errors are values:** Returned in ``Err``, never raised by the core
    - **Precise positions:** Decoding errors carry the exact byte offset
    - **Classified failures:** Parse errors carry an ``ErrorCode`` callers branch on
    - **Serializable:** ``to_dict()`` for structured logging

Architecture:
    ::

        ┌──────────────────────────────────────────────────────┐
        │                      CrabError                        │
        │            (category, context, cause)                 │
        ├──────────────────────────┬───────────────────────────┤
        │        Utf8Error         │        ParseError          │
        │        (ENCODING)        │         (PARSE)            │
        │   pos, error_len         │   ec: ErrorCode            │
        └──────────────────────────┴───────────────────────────┘

Examples:
    >>> error = Utf8Error(3, error_len=1)
    >>> error.pos
    3
    >>> error.category
    <ErrorCategory.ENCODING: 'ENCODING'>

    >>> error = ParseError(ErrorCode.RESULT_OUT_OF_RANGE, target="i32")
    >>> error.is_overflow()
    True

Guardrails:
    ❌ DON'T: Raise Utf8Error/ParseError from library code
    ✅ DO: Return them wrapped in Err(...)

    ❌ DON'T: Use CrabError for programmer mistakes (bad index, unwrap on None)
    ✅ DO: Call panic() for contract violations

Tags:
    error-handling, utf8, parsing, error-context, crab-core
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification.

    Examples:
        >>> ErrorCategory.ENCODING.value
        'ENCODING'
    """

    ENCODING = "ENCODING"  # Invalid UTF-8 input
    PARSE = "PARSE"        # Numeric conversion failures

    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


class ErrorCode(str, Enum):
    """
    Classification of a numeric conversion failure.

    INVALID_ARGUMENT covers empty input, non-numeric input and input with
    trailing bytes after a numeric prefix. RESULT_OUT_OF_RANGE covers values
    whose magnitude does not fit the target type.
    """

    INVALID_ARGUMENT = "invalid_argument"
    RESULT_OUT_OF_RANGE = "result_out_of_range"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Attributes:
        operation: Name of the operation that failed (e.g. "from_raw_parts")
        offset: Byte offset relevant to the failure
        length: Length of the input that was inspected
        target: Target type name for conversions (e.g. "i32")
        metadata: Additional key-value pairs
    """

    operation: str | None = None
    offset: int | None = None
    length: int | None = None
    target: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["operation", "offset", "length", "target"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class CrabError(Exception):
    """
    Base exception for all crab-core data errors.

    Subclasses set ``default_category``. Instances are normally carried inside
    ``Err`` rather than raised, but they remain ordinary exceptions so they can
    be chained, raised by callers, or rendered by tracebacks.

    Examples:
        >>> error = CrabError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(operation="parse").context.operation
        'parse'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> CrabError:
        """
        Add context to this error (fluent API).

        Usage:
            return Err(Utf8Error(pos).with_context(operation="from_cstr"))
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }

        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict

        if self.cause is not None:
            result["cause"] = str(self.cause)

        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# DATA ERRORS
# =============================================================================


class Utf8Error(CrabError):
    """
    Input bytes are not valid UTF-8.

    ``pos`` is the zero-based offset of the first byte of the first invalid
    (or truncated) sequence; every byte before it is valid UTF-8. A lead
    byte followed by a byte that cannot continue it is reported at the lead
    byte, so the bytes ``E2 41`` fail with ``pos == 0`` and ``error_len == 1``.
    ``error_len`` is the length of the invalid sequence, or ``None`` when the
    input ended in the middle of an otherwise valid sequence.

    Examples:
        >>> Utf8Error(0, error_len=1).pos
        0
        >>> str(Utf8Error(5))
        'incomplete utf-8 byte sequence from index 5'
    """

    default_category = ErrorCategory.ENCODING

    def __init__(self, pos: int, error_len: int | None = None, **kwargs: Any):
        if error_len is None:
            message = f"incomplete utf-8 byte sequence from index {pos}"
        else:
            message = f"invalid utf-8 sequence of {error_len} bytes from index {pos}"
        super().__init__(message, **kwargs)
        self.pos = pos
        self.error_len = error_len
        self.context.offset = pos

    @property
    def valid_up_to(self) -> int:
        """Number of leading bytes that form valid UTF-8."""
        return self.pos

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Utf8Error):
            return NotImplemented
        return self.pos == other.pos and self.error_len == other.error_len

    def __hash__(self) -> int:
        return hash((Utf8Error, self.pos, self.error_len))

    def __repr__(self) -> str:
        return f"Utf8Error(pos={self.pos}, error_len={self.error_len})"


class ParseError(CrabError):
    """
    A byte span could not be converted to the requested numeric type.

    Examples:
        >>> ParseError(ErrorCode.INVALID_ARGUMENT).ec
        <ErrorCode.INVALID_ARGUMENT: 'invalid_argument'>
    """

    default_category = ErrorCategory.PARSE

    def __init__(self, ec: ErrorCode, *, target: str | None = None, **kwargs: Any):
        if ec is ErrorCode.RESULT_OUT_OF_RANGE:
            message = "number too large or too small to fit in target type"
        else:
            message = "invalid numeric literal"
        if target is not None:
            message = f"{message} ({target})"
        super().__init__(message, **kwargs)
        self.ec = ec
        self.context.target = target

    def is_overflow(self) -> bool:
        """True when the failure is a range error rather than bad syntax."""
        return self.ec is ErrorCode.RESULT_OUT_OF_RANGE

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return self.ec is other.ec

    def __hash__(self) -> int:
        return hash((ParseError, self.ec))

    def __repr__(self) -> str:
        return f"ParseError(ec={self.ec.value})"


__all__ = [
    "ErrorCategory",
    "ErrorCode",
    "ErrorContext",
    "CrabError",
    "Utf8Error",
    "ParseError",
]
