"""Typed description of the runtime image layer."""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = [
    "CONTAINER_PORT",
    "HealthCheck",
    "ImageRecipe",
    "Labels",
    "RuntimeUser",
]

CONTAINER_PORT = 9080


@dataclass(frozen=True, slots=True)
class Labels:
    """OCI annotations attached to the image. No behavioral effect."""

    title: str = "CookCLI"
    description: str = "Docker image for CookCLI - CLI tool for managing Cooklang recipes"
    url: str = "https://github.com/inigochoa/cookcli-docker"
    source: str = "https://github.com/inigochoa/cookcli-docker"
    vendor: str = "Iñigo Ochoa"
    licenses: str = "MIT"
    documentation: str = "https://github.com/inigochoa/cookcli-docker/blob/main/README.md"

    def as_dict(self) -> dict[str, str]:
        return {
            "org.opencontainers.image.title": self.title,
            "org.opencontainers.image.description": self.description,
            "org.opencontainers.image.url": self.url,
            "org.opencontainers.image.source": self.source,
            "org.opencontainers.image.vendor": self.vendor,
            "org.opencontainers.image.licenses": self.licenses,
            "org.opencontainers.image.documentation": self.documentation,
        }


@dataclass(frozen=True, slots=True)
class RuntimeUser:
    """The single unprivileged account the server runs as."""

    name: str = "appuser"
    uid: int = 1000
    gid: int = 1000


@dataclass(frozen=True, slots=True)
class HealthCheck:
    """Liveness probe policy declared to the container runtime (seconds)."""

    interval: int = 30
    timeout: int = 3
    start_period: int = 5
    retries: int = 3
    path: str = "/"


@dataclass(frozen=True, slots=True)
class ImageRecipe:
    """Everything the final stage needs; rendered by `render_dockerfile`."""

    labels: Labels = field(default_factory=Labels)
    packages: tuple[str, ...] = ("ca-certificates", "curl")
    user: RuntimeUser = field(default_factory=RuntimeUser)
    workdir: str = "/recipes"
    binary_path: str = "/usr/local/bin/cook"
    port: int = CONTAINER_PORT
    healthcheck: HealthCheck = field(default_factory=HealthCheck)
    base_image: str = "alpine:latest"
    builder_image: str = "python:3.12-alpine"
    fetch_dest: str = "/tmp/cookcli"

    @property
    def entrypoint(self) -> tuple[str, ...]:
        """Start the server over the mounted recipes, bound to all interfaces."""
        return ("cook", "server", ".", "--host")

    @property
    def probe_url(self) -> str:
        return f"http://localhost:{self.port}{self.healthcheck.path}"
