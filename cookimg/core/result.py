"""Ok / Err results for the image pipeline.

Resolving a version, fetching an artifact, rendering the Dockerfile and
every docker invocation hand back a Result. Callers check it with
`isinstance(result, Err)` and return early, so the first failing step ends
the release run and the CLI turns its payload into an exit code.

    resolved = resolve_version("latest", http)
    if isinstance(resolved, Err):
        return Err(ReleaseError(kind="lookup_failed", message=resolved.error.message))
    tags = resolved.value.unique_tags()
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))

    def map_err(self, f: Callable[[object], object]) -> Ok[T]:
        return self

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E

    def map(self, f: Callable[[object], object]) -> Err[E]:
        return self

    def map_err[F](self, f: Callable[[E], F]) -> Err[F]:
        """Re-wrap a lower-level error in the caller's error type."""
        return Err(f(self.error))

    def unwrap(self) -> None:
        raise ValueError(f"unwrap() on a failed step: {self.error}")


type Result[T, E] = Ok[T] | Err[E]
