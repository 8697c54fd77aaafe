"""Running `docker` and the fetched `cook` binary.

`run` captures output for commands whose stdout we parse (`docker info`,
`docker run -d`, `cook --version`). `run_silent` leaves stdout and stderr
attached to the terminal for long builds and `docker logs`.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from cookimg.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_silent"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that exited non-zero, timed out or could not start.

    returncode is -1 when no exit status exists. stdout and stderr are
    empty for streamed commands.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def _spawn_failure(cmd: Sequence[str], reason: str, stdout: str = "") -> Err[ProcessError]:
    return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout=stdout, stderr=reason))


def run(
    cmd: Sequence[str],
    cwd: Path,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run cmd to completion and return its stdout."""
    try:
        proc = subprocess.run(
            list(cmd),
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return _spawn_failure(cmd, f"Command timed out after {timeout}s", partial)
    except OSError as e:
        return _spawn_failure(cmd, str(e))

    if proc.returncode != 0:
        return Err(ProcessError(tuple(cmd), proc.returncode, proc.stdout, proc.stderr))
    return Ok(proc.stdout)


def run_silent(cmd: Sequence[str], cwd: Path) -> Result[None, ProcessError]:
    """Run cmd with output streamed live; only the exit status is kept."""
    try:
        returncode = subprocess.call(list(cmd), cwd=cwd)
    except OSError as e:
        return _spawn_failure(cmd, str(e))

    if returncode != 0:
        return Err(ProcessError(tuple(cmd), returncode, "", ""))
    return Ok(None)
