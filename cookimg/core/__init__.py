"""Core types: results and exit codes.

`cookimg.core.config` is imported directly; it depends on the platform
layer, which itself depends on this package.
"""

from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = ["ErrorCode", "Err", "Ok", "Result"]
