"""Target architecture identifiers.

The image is published for exactly two CPU families. Each maps one-to-one
onto a Docker platform string and onto the suffix upstream uses to name its
release archives. Anything else is rejected: there is no default platform.
"""

from __future__ import annotations

import platform as _platform
from dataclasses import dataclass
from enum import Enum

from cookimg.core.result import Err, Ok, Result

__all__ = [
    "Arch",
    "UnsupportedArch",
    "parse_arch",
    "parse_platform",
    "detect_host_arch",
]


class Arch(Enum):
    """CPU architecture the image is built for.

    The value is the Docker `TARGETARCH` name.
    """

    AMD64 = "amd64"
    ARM64 = "arm64"

    def __str__(self) -> str:
        return self.value

    @property
    def docker_platform(self) -> str:
        """Platform string for `docker buildx --platform`."""
        return f"linux/{self.value}"

    @property
    def artifact_suffix(self) -> str:
        """Suffix of the upstream release archive for this architecture."""
        return _ARTIFACT_SUFFIXES[self]


_ARTIFACT_SUFFIXES: dict[Arch, str] = {
    Arch.AMD64: "x86_64-unknown-linux-musl",
    Arch.ARM64: "aarch64-unknown-linux-musl",
}

# Docker TARGETARCH names and `uname -m` names.
_ALIASES: dict[str, Arch] = {
    "amd64": Arch.AMD64,
    "x86_64": Arch.AMD64,
    "arm64": Arch.ARM64,
    "aarch64": Arch.ARM64,
}


@dataclass(frozen=True, slots=True)
class UnsupportedArch:
    """An architecture identifier outside the supported set."""

    value: str

    @property
    def message(self) -> str:
        return f"Unsupported architecture: {self.value or '<empty>'}"

    @property
    def hint(self) -> str:
        supported = ", ".join(a.value for a in Arch)
        return f"supported: {supported}"


def parse_arch(value: str) -> Result[Arch, UnsupportedArch]:
    """Map a TARGETARCH or machine name onto an Arch.

    Example: parse_arch("aarch64") -> Ok(Arch.ARM64)
    """
    arch = _ALIASES.get(value.strip().lower())
    if arch is None:
        return Err(UnsupportedArch(value))
    return Ok(arch)


def parse_platform(value: str) -> Result[Arch, UnsupportedArch]:
    """Map a Docker platform string ("linux/arm64") onto an Arch."""
    os_name, _, arch_name = value.strip().partition("/")
    if os_name != "linux" or not arch_name:
        return Err(UnsupportedArch(value))
    return parse_arch(arch_name).map_err(lambda _: UnsupportedArch(value))


def detect_host_arch(machine: str | None = None) -> Result[Arch, UnsupportedArch]:
    """Detect the host CPU architecture.

    Args:
        machine: Machine name to use instead of `platform.machine()`.
    """
    if machine is None:
        machine = _platform.machine()
    return parse_arch(machine)
