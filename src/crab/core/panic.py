"""
Panic mechanism for contract violations.

A panic reports a *programmer* error: unwrapping an empty Option, taking the
wrong side of a Result, slicing a string inside a multi-byte sequence. It is
never used for bad input data; those failures travel as ``Err`` values.

Manifesto:
    - **Loud:** Every panic is logged at ``critical`` with a fixed prefix
    - **Unrecoverable by accident:** ``Panic`` derives from ``BaseException``,
      so ``except Exception`` blocks do not swallow it
    - **Greppable:** Messages are fixed strings naming the operation
    - **Configurable termination:** ``CRAB_ABORT_ON_PANIC=1`` aborts the
      process instead of raising

Architecture:
    ::

        panic("Calling Option<T>::unwrap() on a None value")
            │
            ├── logger.critical("panic", message=..., backtrace=...)
            │
            ├── settings.abort_on_panic ──► stderr diagnostic + os.abort()
            │
            └── raise Panic("Panic encountered: ...")

Examples:
    >>> try:
    ...     panic("boom")
    ... except Panic as exc:
    ...     str(exc)
    'Panic encountered: boom'

Tags:
    panic, contract-violation, abort, crab-core
"""

from __future__ import annotations

import os
import sys
import traceback
from typing import NoReturn

from crab.core.logging import get_logger
from crab.core.settings import get_settings

logger = get_logger(__name__)

PANIC_PREFIX = "Panic encountered: "


class Panic(BaseException):
    """A contract violation. Not meant to be caught outside of tests."""

    def __init__(self, message: str):
        super().__init__(PANIC_PREFIX + message)
        self.message = message

    def __repr__(self) -> str:
        return f"Panic({self.message!r})"


def panic(message: str, *, cause: BaseException | None = None) -> NoReturn:
    """Report a contract violation and never return.

    Args:
        message: Description of the violated precondition
        cause: Optional payload exception to chain (e.g. the error inside an Err)
    """
    settings = get_settings()
    diagnostic = PANIC_PREFIX + message

    backtrace = None
    if settings.panic_backtrace:
        backtrace = "".join(traceback.format_stack()[:-1])

    logger.critical("panic", message=message, backtrace=backtrace)

    if settings.abort_on_panic:
        print(diagnostic, file=sys.stderr)
        if backtrace:
            print(backtrace, file=sys.stderr, end="")
        sys.stderr.flush()
        os.abort()

    raise Panic(message) from cause


__all__ = ["Panic", "panic", "PANIC_PREFIX"]
