"""build / test / publish commands."""

from __future__ import annotations

import typer

from cookimg.cli.commands._helpers import exit_on_error
from cookimg.cli.context import CLIContext, build_context
from cookimg.services.release import ReleaseService


def _service(ctx: CLIContext) -> ReleaseService:
    return ReleaseService(
        config=ctx.config,
        context=ctx.context,
        console=ctx.console,
        docker=ctx.docker,
        http=ctx.http,
    )


def build(ctx: typer.Context) -> None:
    """Build image for local architecture only (fast, for development)."""
    cli = build_context(ctx)
    exit_on_error(_service(cli).build(), cli.console)


def test(ctx: typer.Context) -> None:
    """Build and test the image locally with a sample recipe."""
    cli = build_context(ctx)
    exit_on_error(_service(cli).test(), cli.console)


def publish(ctx: typer.Context) -> None:
    """Build and push the multi-architecture image (amd64 + arm64)."""
    cli = build_context(ctx)
    exit_on_error(_service(cli).publish(), cli.console)
