"""GitHub Releases endpoints for the upstream CookCLI project.

Upstream publishes one archive per target triple:
    github.com/{repo}/releases/download/v{version}/cook-{suffix}.tar.gz
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cookimg.artifact.http import HttpError
from cookimg.core.result import Err, Ok, Result
from cookimg.core.structured import get_str

if TYPE_CHECKING:
    from cookimg.artifact.http import HttpClient
    from cookimg.artifact.version import Version
    from cookimg.platform.arch import Arch

__all__ = [
    "DEFAULT_REPO",
    "latest_release_url",
    "latest_release_tag",
    "asset_name",
    "artifact_url",
]

DEFAULT_REPO = "cooklang/cookcli"


def latest_release_url(repo: str = DEFAULT_REPO) -> str:
    return f"https://api.github.com/repos/{repo}/releases/latest"


def latest_release_tag(http: HttpClient, repo: str = DEFAULT_REPO) -> Result[str, HttpError]:
    """Fetch the newest release's tag, without its leading 'v'.

    Args:
        http: HTTP client to use
        repo: Repository in "owner/repo" format

    Returns:
        Ok with the version string (e.g. "0.18.1"), or Err with HttpError
    """
    url = latest_release_url(repo)
    result = http.get_json(url)
    if isinstance(result, Err):
        return result

    tag_name = get_str(result.value, "tag_name")
    if tag_name is None:
        return Err(HttpError(url=url, status=0, message="Missing tag_name in response"))

    version = tag_name.removeprefix("v")
    if not version:
        return Err(HttpError(url=url, status=0, message=f"Unusable tag_name: {tag_name!r}"))
    return Ok(version)


def asset_name(arch: Arch) -> str:
    """Archive filename for an architecture, e.g. "cook-aarch64-unknown-linux-musl.tar.gz"."""
    return f"cook-{arch.artifact_suffix}.tar.gz"


def artifact_url(version: Version, arch: Arch, repo: str = DEFAULT_REPO) -> str:
    """Deterministic download URL for one (version, arch) pair."""
    return f"https://github.com/{repo}/releases/download/v{version}/{asset_name(arch)}"
