"""Architecture-specific download of the CookCLI executable.

The fetcher runs during image construction only (in the Dockerfile's
downloader stage). Its scratch directory never outlives a call; the single
surviving output is the verified executable at the requested destination.
"""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from cookimg.artifact.extract import extract_executable
from cookimg.artifact.github import DEFAULT_REPO, artifact_url, asset_name
from cookimg.core.result import Err, Ok, Result
from cookimg.platform.process import ProcessError, run

if TYPE_CHECKING:
    from cookimg.artifact.http import HttpClient
    from cookimg.artifact.version import Version
    from cookimg.output.console import ConsoleProtocol
    from cookimg.platform.arch import Arch

__all__ = [
    "DEFAULT_DEST",
    "FetchError",
    "ArtifactFetcher",
    "Verifier",
    "verify_executable",
]

DEFAULT_DEST = Path("/tmp/cookcli")

type Verifier = Callable[[Path], Result[str, ProcessError]]


@dataclass(frozen=True, slots=True)
class FetchError:
    kind: Literal["download_failed", "extract_failed", "install_failed", "verify_failed"]
    message: str
    hint: str | None = None


def verify_executable(path: Path) -> Result[str, ProcessError]:
    """Run `<path> --version`; a zero exit means the artifact is usable."""
    return run([str(path), "--version"], cwd=path.parent, timeout=30.0)


class ArtifactFetcher:
    """Downloads, extracts and verifies the executable for one architecture.

    Usage:
        fetcher = ArtifactFetcher(RealHttpClient())
        result = fetcher.fetch(Version("0.18.1"), Arch.ARM64, Path("/tmp/cookcli"))
    """

    def __init__(
        self,
        http: HttpClient,
        *,
        repo: str = DEFAULT_REPO,
        verifier: Verifier = verify_executable,
        console: ConsoleProtocol | None = None,
    ) -> None:
        self._http = http
        self._repo = repo
        self._verifier = verifier
        self._console = console

    def url_for(self, version: Version, arch: Arch) -> str:
        return artifact_url(version, arch, self._repo)

    def fetch(
        self,
        version: Version,
        arch: Arch,
        dest: Path = DEFAULT_DEST,
    ) -> Result[Path, FetchError]:
        """Fetch the executable for (version, arch) to dest.

        Network failures are not retried. A binary that fails its
        `--version` self-check is removed and reported as verify_failed.
        """
        url = self.url_for(version, arch)
        if self._console is not None:
            self._console.info(f"Downloading from: {url}")

        with tempfile.TemporaryDirectory(prefix="cookimg-") as tmp:
            scratch = Path(tmp)
            archive = scratch / asset_name(arch)

            downloaded = self._http.download(url, archive)
            if isinstance(downloaded, Err):
                return Err(
                    FetchError(
                        kind="download_failed",
                        message=f"download failed for {arch} ({version})",
                        hint=str(downloaded.error),
                    )
                )

            extracted = extract_executable(archive, scratch / "extract")
            if isinstance(extracted, Err):
                return Err(FetchError(kind="extract_failed", message=str(extracted.error)))

            try:
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(extracted.value, dest)
                dest.chmod(0o755)
            except OSError as e:
                return Err(
                    FetchError(kind="install_failed", message=f"cannot write {dest}: {e}")
                )

        verified = self._verifier(dest)
        if isinstance(verified, Err):
            dest.unlink(missing_ok=True)
            error = verified.error
            return Err(
                FetchError(
                    kind="verify_failed",
                    message=f"downloaded executable failed its self-check ({error})",
                    hint=error.stderr.strip() or "the archive may be corrupt or for another CPU",
                )
            )

        if self._console is not None:
            self._console.success(verified.value.strip() or str(dest))
        return Ok(dest)
