"""Thin wrapper over the `docker` CLI.

Commands are described by small frozen dataclasses (`BuildRequest`,
`RunRequest`) whose `to_args()` builds the exact argv, so what gets
executed can be asserted in tests without a Docker daemon.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Protocol

from cookimg.core.result import Err, Ok, Result
from cookimg.platform.process import ProcessError, run, run_silent

__all__ = [
    "BuildRequest",
    "RunRequest",
    "DockerClient",
    "DockerCli",
]


@dataclass(frozen=True, slots=True)
class BuildRequest:
    """One `docker buildx build` invocation."""

    platforms: tuple[str, ...]
    tags: tuple[str, ...]
    output: Literal["load", "push"]
    dockerfile: Path
    context: Path
    build_args: dict[str, str] = field(default_factory=dict)

    def to_args(self) -> list[str]:
        args = ["docker", "buildx", "build"]
        if self.platforms:
            args.extend(["--platform", ",".join(self.platforms)])
        for key, value in self.build_args.items():
            args.extend(["--build-arg", f"{key}={value}"])
        for tag in self.tags:
            args.extend(["-t", tag])
        args.append(f"--{self.output}")
        args.extend(["-f", str(self.dockerfile), str(self.context)])
        return args


@dataclass(frozen=True, slots=True)
class RunRequest:
    """A detached `docker run` with port, volume and resource limits."""

    name: str
    image: str
    host_port: int
    container_port: int
    volume: Path
    mount_point: str
    cpus: str
    memory: str

    def to_args(self) -> list[str]:
        return [
            "docker",
            "run",
            "-d",
            "--name",
            self.name,
            "-p",
            f"{self.host_port}:{self.container_port}",
            "-v",
            f"{self.volume}:{self.mount_point}",
            f"--cpus={self.cpus}",
            f"--memory={self.memory}",
            self.image,
        ]


class DockerClient(Protocol):
    """Docker operations used by the release workflow."""

    def build(self, request: BuildRequest) -> Result[None, ProcessError]: ...

    def builder_exists(self, name: str) -> bool: ...

    def create_builder(self, name: str) -> Result[None, ProcessError]: ...

    def use_builder(self, name: str) -> Result[None, ProcessError]: ...

    def run_container(self, request: RunRequest) -> Result[str, ProcessError]: ...

    def remove_container(self, name: str) -> None: ...

    def show_logs(self, name: str) -> Result[None, ProcessError]: ...

    def info(self) -> Result[str, ProcessError]: ...


class DockerCli:
    """DockerClient backed by the real `docker` executable."""

    def __init__(self, cwd: Path) -> None:
        self._cwd = cwd

    def build(self, request: BuildRequest) -> Result[None, ProcessError]:
        return run_silent(request.to_args(), cwd=self._cwd)

    def builder_exists(self, name: str) -> bool:
        return isinstance(run(["docker", "buildx", "inspect", name], cwd=self._cwd), Ok)

    def create_builder(self, name: str) -> Result[None, ProcessError]:
        created = run(["docker", "buildx", "create", "--name", name, "--use"], cwd=self._cwd)
        if isinstance(created, Err):
            return created
        return run_silent(["docker", "buildx", "inspect", "--bootstrap"], cwd=self._cwd)

    def use_builder(self, name: str) -> Result[None, ProcessError]:
        return run(["docker", "buildx", "use", name], cwd=self._cwd).map(lambda _: None)

    def run_container(self, request: RunRequest) -> Result[str, ProcessError]:
        return run(request.to_args(), cwd=self._cwd).map(str.strip)

    def remove_container(self, name: str) -> None:
        # A missing container is the normal case here.
        run(["docker", "stop", name], cwd=self._cwd)
        run(["docker", "rm", name], cwd=self._cwd)

    def show_logs(self, name: str) -> Result[None, ProcessError]:
        """Stream the container's stdout and stderr to the terminal."""
        return run_silent(["docker", "logs", name], cwd=self._cwd)

    def info(self) -> Result[str, ProcessError]:
        return run(["docker", "info"], cwd=self._cwd)
