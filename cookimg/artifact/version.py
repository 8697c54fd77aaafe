"""Resolved release version and the image tags derived from it."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["LATEST", "Version"]

LATEST = "latest"


@dataclass(frozen=True, slots=True)
class Version:
    """A concrete upstream release identifier, e.g. "0.18.1".

    The string is used verbatim: a caller-supplied version is not validated,
    the download simply fails if upstream has no such release.
    """

    raw: str

    def __str__(self) -> str:
        return self.raw

    @property
    def major(self) -> str:
        return self.raw.split(".")[0]

    @property
    def minor(self) -> str:
        return ".".join(self.raw.split(".")[:2])

    def tags(self) -> tuple[str, str, str, str]:
        """Tag Set for a publish: exact, minor, major, latest."""
        return (self.raw, self.minor, self.major, LATEST)

    def unique_tags(self) -> list[str]:
        """Tag Set without repeats, in order ("2" -> ["2", "latest"])."""
        seen: list[str] = []
        for tag in self.tags():
            if tag not in seen:
                seen.append(tag)
        return seen
