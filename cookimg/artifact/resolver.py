"""Version resolution: explicit version or the latest upstream release."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from cookimg.artifact.github import DEFAULT_REPO, latest_release_tag
from cookimg.artifact.version import LATEST, Version
from cookimg.core.result import Ok, Result

if TYPE_CHECKING:
    from cookimg.artifact.http import HttpClient

__all__ = ["ResolveError", "is_latest", "resolve_version"]


@dataclass(frozen=True, slots=True)
class ResolveError:
    kind: Literal["lookup_failed"]
    message: str
    hint: str | None = None


def is_latest(requested: str | None) -> bool:
    """True when the caller asked for whatever upstream released last."""
    return requested is None or requested.strip() in ("", LATEST)


def resolve_version(
    requested: str | None,
    http: HttpClient,
    repo: str = DEFAULT_REPO,
) -> Result[Version, ResolveError]:
    """Decide which upstream release to use.

    An empty request or "latest" costs exactly one call to the release
    listing API; any other value is returned unchanged without a lookup.
    There is no fallback version when the lookup fails.
    """
    if requested is not None and not is_latest(requested):
        return Ok(Version(requested))

    return (
        latest_release_tag(http, repo)
        .map(Version)
        .map_err(
            lambda e: ResolveError(
                kind="lookup_failed",
                message=f"could not determine the latest {repo} release",
                hint=str(e),
            )
        )
    )
