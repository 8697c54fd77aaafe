"""Registry login detection from cached local credential state.

No authentication exchange is performed. A registry counts as logged in
when the Docker client config has an `auths` entry or a `credHelpers`
entry for it. Older engines that report `Username:` in `docker info` are
accepted as a last resort.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from cookimg.core.result import Err, Ok, Result
from cookimg.core.structured import StrDict, as_str_dict, get_table

if TYPE_CHECKING:
    from cookimg.docker.client import DockerClient

__all__ = [
    "DOCKER_HUB",
    "AuthError",
    "registry_for_image",
    "docker_config_path",
    "check_registry_auth",
]

DOCKER_HUB = "docker.io"

# Keys the docker CLI has used for Docker Hub over the years.
_DOCKER_HUB_KEYS = (
    "https://index.docker.io/v1/",
    "index.docker.io",
    "docker.io",
    "registry-1.docker.io",
    "https://registry-1.docker.io",
)


@dataclass(frozen=True, slots=True)
class AuthError:
    registry: str
    message: str
    hint: str


def registry_for_image(image_name: str) -> str:
    """Registry host of an image reference ("inigochoa/cookcli" -> "docker.io")."""
    first, sep, _ = image_name.partition("/")
    if sep and ("." in first or ":" in first or first == "localhost"):
        return first
    return DOCKER_HUB


def docker_config_path(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    config_dir = env.get("DOCKER_CONFIG")
    if config_dir:
        return Path(config_dir).expanduser() / "config.json"
    return Path.home() / ".docker" / "config.json"


def _load_docker_config(path: Path) -> StrDict:
    try:
        data_obj: object = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return {}
    return as_str_dict(data_obj) or {}


def _registry_keys(registry: str) -> tuple[str, ...]:
    if registry == DOCKER_HUB:
        return _DOCKER_HUB_KEYS
    return (registry, f"https://{registry}", f"http://{registry}")


def _has_cached_credentials(config: StrDict, registry: str) -> bool:
    keys = _registry_keys(registry)
    for table_name in ("auths", "credHelpers"):
        table = get_table(config, table_name) or {}
        if any(k.rstrip("/") in (t.rstrip("/") for t in table) for k in keys):
            return True
    return False


def _info_reports_username(info_output: str) -> bool:
    return any(line.strip().startswith("Username:") for line in info_output.splitlines())


def check_registry_auth(
    docker: DockerClient,
    registry: str = DOCKER_HUB,
    config_path: Path | None = None,
) -> Result[None, AuthError]:
    """Verify the operator is already logged in to registry.

    Args:
        docker: Docker client (only `info` is used, as a fallback)
        registry: Registry host, e.g. "docker.io" or "ghcr.io"
        config_path: Docker client config (defaults to $DOCKER_CONFIG or ~/.docker)
    """
    path = config_path or docker_config_path()
    if _has_cached_credentials(_load_docker_config(path), registry):
        return Ok(None)

    info = docker.info()
    if isinstance(info, Ok) and _info_reports_username(info.value):
        return Ok(None)

    login_cmd = "docker login" if registry == DOCKER_HUB else f"docker login {registry}"
    return Err(
        AuthError(
            registry=registry,
            message=f"Not logged in to {registry}",
            hint=f"Please run: {login_cmd}",
        )
    )
