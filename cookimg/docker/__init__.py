"""Docker CLI wrapper and registry login detection."""

from .auth import AuthError, check_registry_auth, registry_for_image
from .client import BuildRequest, DockerCli, DockerClient, RunRequest

__all__ = [
    "AuthError",
    "BuildRequest",
    "DockerCli",
    "DockerClient",
    "RunRequest",
    "check_registry_auth",
    "registry_for_image",
]
