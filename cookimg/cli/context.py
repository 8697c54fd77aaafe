from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from cookimg.artifact.http import HttpClient, RealHttpClient
from cookimg.core.config import Config, load_config
from cookimg.core.errors import ErrorCode
from cookimg.core.result import Err
from cookimg.docker.client import DockerCli, DockerClient
from cookimg.output.console import ConsoleProtocol, RichConsole
from cookimg.output.errors import print_error

@dataclass(frozen=True, slots=True)
class CLIContext:
    context: Path
    config: Config
    console: ConsoleProtocol
    docker: DockerClient
    http: HttpClient


def context_dir(ctx: typer.Context | None = None) -> Path:
    """Build context root: the --context value kept on ctx.obj, else the cwd."""
    if ctx is not None and isinstance(ctx.obj, Path):
        return ctx.obj
    return Path.cwd()


def build_context(ctx: typer.Context | None = None) -> CLIContext:
    console = RichConsole()
    root = context_dir(ctx)

    config_result = load_config(root, os.environ)
    if isinstance(config_result, Err):
        print_error(config_result.error, console)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(
        context=root,
        config=config_result.value,
        console=console,
        docker=DockerCli(cwd=root),
        http=RealHttpClient(),
    )
