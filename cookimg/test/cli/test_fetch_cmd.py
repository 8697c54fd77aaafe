from __future__ import annotations

from pathlib import Path

import pytest
import typer

from cookimg.artifact.http import MockHttpClient
from cookimg.artifact.version import Version
from cookimg.core.errors import ErrorCode


class _NoNetwork:
    def __init__(self, *_: object, **__: object) -> None:
        raise AssertionError("network client must not be created")


@pytest.mark.parametrize("arch", ["riscv64", "386", "arm", ""])
def test_unsupported_arch_exits_before_network(
    arch: str, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    import cookimg.cli.commands.fetch as fetch_cmd

    monkeypatch.setattr(fetch_cmd, "RealHttpClient", _NoNetwork)

    with pytest.raises(typer.Exit) as exc:
        fetch_cmd.fetch(arch=arch, release="0.18.1", dest=tmp_path / "cook", repo="x/y")

    assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)
    assert not (tmp_path / "cook").exists()


def test_lookup_failure_is_network_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    import cookimg.cli.commands.fetch as fetch_cmd

    monkeypatch.setattr(fetch_cmd, "RealHttpClient", MockHttpClient)

    with pytest.raises(typer.Exit) as exc:
        fetch_cmd.fetch(arch="amd64", release="latest", dest=tmp_path / "cook", repo="x/y")

    assert exc.value.exit_code == int(ErrorCode.NETWORK_ERROR)


def test_download_failure_exit_code(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    import cookimg.cli.commands.fetch as fetch_cmd

    monkeypatch.setattr(fetch_cmd, "RealHttpClient", MockHttpClient)

    with pytest.raises(typer.Exit) as exc:
        fetch_cmd.fetch(arch="arm64", release="0.18.1", dest=tmp_path / "cook", repo="x/y")

    assert exc.value.exit_code == int(ErrorCode.NETWORK_ERROR)


def test_fetches_for_parsed_arch(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    import cookimg.cli.commands.fetch as fetch_cmd
    from cookimg.core.result import Ok
    from cookimg.platform.arch import Arch

    seen: list[tuple[Version, Arch, Path]] = []

    class FakeFetcher:
        def __init__(self, *_: object, **__: object) -> None:
            pass

        def fetch(self, version: Version, arch: Arch, dest: Path) -> Ok[Path]:
            seen.append((version, arch, dest))
            return Ok(dest)

    monkeypatch.setattr(fetch_cmd, "RealHttpClient", MockHttpClient)
    monkeypatch.setattr(fetch_cmd, "ArtifactFetcher", FakeFetcher)

    fetch_cmd.fetch(arch="x86_64", release="0.18.1", dest=tmp_path / "cook", repo="x/y")

    assert seen == [(Version("0.18.1"), Arch.AMD64, tmp_path / "cook")]
