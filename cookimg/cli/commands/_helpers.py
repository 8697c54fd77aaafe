"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from cookimg.core.result import Err, Result
from cookimg.output.errors import exit_code_for, print_error

if TYPE_CHECKING:
    from cookimg.artifact.fetcher import FetchError
    from cookimg.output.console import ConsoleProtocol
    from cookimg.services.release import ReleaseError


def exit_on_error[T](
    result: Result[T, ReleaseError | FetchError],
    console: ConsoleProtocol,
) -> T:
    """Return the Ok value, or print the error and exit with its code."""
    if isinstance(result, Err):
        print_error(result.error, console)
        raise typer.Exit(code=exit_code_for(result.error))
    return result.value
