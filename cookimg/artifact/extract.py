"""Safe extraction of the upstream release archive.

Upstream ships a `.tar.gz` holding the `cook` executable. Only regular files
are extracted; absolute paths, `..` components, links and device entries
are skipped so a hostile archive cannot write outside the scratch directory.
"""

from __future__ import annotations

import shutil
import tarfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from cookimg.core.result import Err, Ok, Result

__all__ = ["ExtractError", "extract_executable"]


@dataclass(frozen=True, slots=True)
class ExtractError:
    """Extraction error details.

    Attributes:
        archive: Path to the archive that failed
        message: Human-readable error message
    """

    archive: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.archive.name}"


def _safe_relative_path(member_name: str) -> Path | None:
    """Return a sanitized relative extraction path, or None if unsafe."""
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None

    parts = [p for p in PurePosixPath(normalized).parts if p != "."]
    if not parts or any(p in ("", "..") for p in parts):
        return None
    return Path(*parts)


def _is_within_root(root: Path, target: Path) -> bool:
    try:
        return target.resolve().is_relative_to(root.resolve())
    except OSError:
        return False


def extract_executable(
    archive: Path,
    scratch_dir: Path,
    name: str = "cook",
) -> Result[Path, ExtractError]:
    """Extract archive into scratch_dir and return the path of `name`.

    The executable may sit at the archive root or in a single top-level
    directory; the shallowest match wins.
    """
    if not archive.exists():
        return Err(ExtractError(archive=archive, message="Archive not found"))

    found: list[Path] = []
    try:
        scratch_dir.mkdir(parents=True, exist_ok=True)
        with tarfile.open(archive, "r:gz") as tar:
            for member in tar.getmembers():
                if not member.isreg():
                    continue

                rel_path = _safe_relative_path(member.name)
                if rel_path is None:
                    continue

                full_path = scratch_dir / rel_path
                if not _is_within_root(scratch_dir, full_path):
                    continue

                src = tar.extractfile(member)
                if src is None:
                    continue

                full_path.parent.mkdir(parents=True, exist_ok=True)
                with src, open(full_path, "wb") as dst:
                    shutil.copyfileobj(src, dst)

                if rel_path.name == name:
                    found.append(full_path)
    except tarfile.TarError as e:
        return Err(ExtractError(archive=archive, message=f"Tar extraction failed: {e}"))
    except OSError as e:
        return Err(ExtractError(archive=archive, message=f"IO error: {e}"))

    if not found:
        return Err(ExtractError(archive=archive, message=f"No '{name}' executable in archive"))

    found.sort(key=lambda p: len(p.relative_to(scratch_dir).parts))
    return Ok(found[0])
