"""Host platform abstraction layer."""

from .arch import (
    Arch,
    UnsupportedArch,
    detect_host_arch,
    parse_arch,
    parse_platform,
)
from .process import (
    ProcessError,
    run,
    run_silent,
)

__all__ = [
    # arch
    "Arch",
    "UnsupportedArch",
    "detect_host_arch",
    "parse_arch",
    "parse_platform",
    # process
    "ProcessError",
    "run",
    "run_silent",
]
