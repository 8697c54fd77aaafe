from __future__ import annotations

from pathlib import Path

import typer

from cookimg import __version__
from cookimg.cli.commands.fetch import dockerfile, fetch
from cookimg.cli.commands.release import build, publish, test
from cookimg.core.errors import ErrorCode

EPILOG = """\
Environment variables:
  VERSION     CookCLI version to build (default: latest, auto-fetched from GitHub)
  IMAGE_NAME  Image repository (default: inigochoa/cookcli)

Examples:
  cookimg build                     Build with latest version from GitHub
  VERSION=0.18.1 cookimg build      Build specific version
  cookimg test                      Test with latest version
  cookimg publish                   Build multi-arch with latest and push
  VERSION=0.18.0 cookimg publish    Publish specific version
"""

app = typer.Typer(
    add_completion=False,
    invoke_without_command=True,
    rich_markup_mode="rich",
    epilog=EPILOG,
)

app.command()(build)
app.command(name="test")(test)
app.command()(publish)
app.command(hidden=True)(fetch)
app.command(hidden=True)(dockerfile)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    context: Path | None = typer.Option(
        None,
        "--context",
        help="Build context root (defaults to the current directory)",
    ),
) -> None:
    """Build, test and publish the CookCLI container image."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if context is not None:
        root = context.expanduser().resolve()
        if not root.is_dir():
            typer.echo(f"error: --context '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        ctx.obj = root

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))


def main() -> None:
    app()
