"""
Crab - Option/Result/str/String value types for Python.

The implementation lives in :mod:`crab.core`; everything public is
re-exported here.
"""

__version__ = "0.1.0"

from crab.core import *  # noqa
from crab.core import __all__  # noqa: F401
