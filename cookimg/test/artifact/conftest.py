from __future__ import annotations

import io
import tarfile
from collections.abc import Callable
from pathlib import Path

import pytest

COOK_SCRIPT = b'#!/bin/sh\necho "cook 0.18.1"\n'


def make_tarball(files: dict[str, bytes], symlinks: dict[str, str] | None = None) -> bytes:
    """Build an in-memory .tar.gz from {member name: content}."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(content))
        for name, target in (symlinks or {}).items():
            info = tarfile.TarInfo(name)
            info.type = tarfile.SYMTYPE
            info.linkname = target
            tar.addfile(info)
    return buffer.getvalue()


@pytest.fixture
def cook_archive() -> bytes:
    return make_tarball({"cook": COOK_SCRIPT})


@pytest.fixture
def archive_path(tmp_path: Path, cook_archive: bytes) -> Path:
    path = tmp_path / "cook-x86_64-unknown-linux-musl.tar.gz"
    path.write_bytes(cook_archive)
    return path


@pytest.fixture
def tarball() -> Callable[..., bytes]:
    return make_tarball
