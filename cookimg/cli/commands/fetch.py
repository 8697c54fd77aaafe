"""Image-build helpers: `fetch` runs inside the Dockerfile's downloader stage."""

from __future__ import annotations

from pathlib import Path

import typer

from cookimg.artifact.fetcher import DEFAULT_DEST, ArtifactFetcher
from cookimg.artifact.github import DEFAULT_REPO
from cookimg.artifact.http import RealHttpClient
from cookimg.artifact.resolver import is_latest, resolve_version
from cookimg.cli.commands._helpers import exit_on_error
from cookimg.core.errors import ErrorCode
from cookimg.core.result import Err
from cookimg.image.dockerfile import render_dockerfile
from cookimg.output.console import RichConsole
from cookimg.output.errors import print_error
from cookimg.platform.arch import parse_arch


def fetch(
    arch: str = typer.Option(..., "--arch", help="Target architecture (amd64, arm64)"),
    release: str = typer.Option("latest", "--release", help="CookCLI version or 'latest'"),
    dest: Path = typer.Option(DEFAULT_DEST, "--dest", help="Where to place the executable"),
    repo: str = typer.Option(DEFAULT_REPO, "--repo", help="Upstream GitHub repository"),
) -> None:
    """Download and verify the CookCLI executable for one architecture."""
    console = RichConsole()

    parsed = parse_arch(arch)
    if isinstance(parsed, Err):
        print_error(parsed.error, console)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    http = RealHttpClient()
    if is_latest(release):
        console.info("Fetching latest CookCLI version...")
    resolved = resolve_version(release, http, repo)
    if isinstance(resolved, Err):
        print_error(resolved.error, console)
        raise typer.Exit(code=int(ErrorCode.NETWORK_ERROR))
    console.info(f"Using CookCLI version: {resolved.value}")

    fetcher = ArtifactFetcher(http, repo=repo, console=console)
    exit_on_error(fetcher.fetch(resolved.value, parsed.value, dest), console)


def dockerfile() -> None:
    """Print the Dockerfile used by build, test and publish."""
    typer.echo(render_dockerfile(), nl=False)
