"""Turning pipeline errors into a diagnostic and a process exit code."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from cookimg.artifact.fetcher import FetchError
from cookimg.core.errors import ErrorCode
from cookimg.services.release import ReleaseError

if TYPE_CHECKING:
    from cookimg.output.console import ConsoleProtocol

__all__ = ["Reportable", "print_error", "exit_code_for"]


class Reportable(Protocol):
    """Any error payload with a message and an optional hint."""

    @property
    def message(self) -> str: ...

    @property
    def hint(self) -> str | None: ...


_EXIT_CODES: dict[str, ErrorCode] = {
    # release
    "invalid_config": ErrorCode.ENV_ERROR,
    "unsupported_arch": ErrorCode.ENV_ERROR,
    "not_logged_in": ErrorCode.ENV_ERROR,
    "builder_failed": ErrorCode.ENV_ERROR,
    "lookup_failed": ErrorCode.NETWORK_ERROR,
    "io_failed": ErrorCode.IO_ERROR,
    "build_failed": ErrorCode.BUILD_ERROR,
    "push_failed": ErrorCode.BUILD_ERROR,
    "run_failed": ErrorCode.BUILD_ERROR,
    "health_check_failed": ErrorCode.HEALTH_ERROR,
    # fetch
    "download_failed": ErrorCode.NETWORK_ERROR,
    "extract_failed": ErrorCode.VERIFY_ERROR,
    "install_failed": ErrorCode.IO_ERROR,
    "verify_failed": ErrorCode.VERIFY_ERROR,
}


def print_error(error: Reportable, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.hint(error.hint)


def exit_code_for(error: ReleaseError | FetchError) -> int:
    """Exit code for a failed build, test, publish or fetch run."""
    return int(_EXIT_CODES.get(error.kind, ErrorCode.BUILD_ERROR))
