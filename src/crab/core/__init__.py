"""Crab Core -- explicit presence, explicit failure, always-valid UTF-8.

Manifesto:
    Python code usually signals absence with ``None`` and failure with
    exceptions, and treats text as either ``str`` (already decoded) or
    ``bytes`` (anything goes). ``crab.core`` offers the stricter discipline of
    ownership-centric languages: an Option that separates "absent" from
    "present but None", a Result that carries expected failures as values,
    and string types whose bytes are valid UTF-8 at every moment.

    - **Two error channels:** Data errors are ``Err`` values; contract
      violations panic
    - **Byte-offset strings:** Views and buffers addressed by byte offset,
      never by guesswork about character indexes
    - **Validated at the boundary:** Bytes become a Str/String only after
      UTF-8 validation

Architecture::

    Layer 1 -- Ambient
        errors.py          CrabError, Utf8Error, ParseError, ErrorCode
        settings.py        CrabSettings (CRAB_* environment)
        logging.py         structlog configuration
        panic.py           Panic / panic()

    Layer 2 -- Algebra
        option.py          Option[T], Some, Nothing, NONE
        result.py          Result[T, E], Ok, Err, batch helpers

    Layer 3 -- Text
        char.py            Char (Unicode scalar value)
        utf8.py            UTF-8 validation / decoding / encoding
        numeric.py         from_chars numeric conversion
        str_view.py        Str (borrowed view) + shared algorithms
        string.py          String (owned buffer), join_with

Tags:
    crab-core, option, result, utf8, string, foundation
"""

from crab.core.char import Char
from crab.core.errors import (
    CrabError,
    ErrorCategory,
    ErrorCode,
    ErrorContext,
    ParseError,
    Utf8Error,
)
from crab.core.logging import configure_logging, get_logger
from crab.core.numeric import (
    NumericType,
    f32,
    f64,
    from_chars,
    i8,
    i16,
    i32,
    i64,
    u8,
    u16,
    u32,
    u64,
)
from crab.core.option import NONE, Nothing, Option, Some
from crab.core.panic import Panic, panic
from crab.core.result import (
    Err,
    Ok,
    Result,
    collect_results,
    partition_results,
    try_result,
)
from crab.core.settings import CrabSettings, clear_settings_cache, get_settings
from crab.core.str_view import Lazy, Str
from crab.core.string import String, join_with

__all__ = [
    # Errors
    "CrabError",
    "ErrorCategory",
    "ErrorCode",
    "ErrorContext",
    "ParseError",
    "Utf8Error",
    # Panic
    "Panic",
    "panic",
    # Option / Result
    "Option",
    "Some",
    "Nothing",
    "NONE",
    "Result",
    "Ok",
    "Err",
    "try_result",
    "collect_results",
    "partition_results",
    # Text
    "Char",
    "Str",
    "String",
    "Lazy",
    "join_with",
    # Numeric
    "NumericType",
    "from_chars",
    "i8", "i16", "i32", "i64",
    "u8", "u16", "u32", "u64",
    "f32", "f64",
    # Ambient
    "CrabSettings",
    "get_settings",
    "clear_settings_cache",
    "configure_logging",
    "get_logger",
]
