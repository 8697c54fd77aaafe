"""Tests for cookimg.output.errors module."""

from __future__ import annotations

import pytest

from cookimg.artifact.fetcher import FetchError
from cookimg.core.errors import ErrorCode
from cookimg.output.console import MockConsole, Style
from cookimg.output.errors import exit_code_for, print_error
from cookimg.platform.arch import UnsupportedArch
from cookimg.services.release import ReleaseError


class TestExitCodeFor:
    @pytest.mark.parametrize(
        ("kind", "code"),
        [
            ("unsupported_arch", ErrorCode.ENV_ERROR),
            ("not_logged_in", ErrorCode.ENV_ERROR),
            ("lookup_failed", ErrorCode.NETWORK_ERROR),
            ("io_failed", ErrorCode.IO_ERROR),
            ("build_failed", ErrorCode.BUILD_ERROR),
            ("push_failed", ErrorCode.BUILD_ERROR),
            ("run_failed", ErrorCode.BUILD_ERROR),
            ("health_check_failed", ErrorCode.HEALTH_ERROR),
        ],
    )
    def test_release_kinds(self, kind: str, code: ErrorCode) -> None:
        error = ReleaseError(kind=kind, message="x")  # type: ignore[arg-type]
        assert exit_code_for(error) == int(code)

    @pytest.mark.parametrize(
        ("kind", "code"),
        [
            ("download_failed", ErrorCode.NETWORK_ERROR),
            ("extract_failed", ErrorCode.VERIFY_ERROR),
            ("install_failed", ErrorCode.IO_ERROR),
            ("verify_failed", ErrorCode.VERIFY_ERROR),
        ],
    )
    def test_fetch_kinds(self, kind: str, code: ErrorCode) -> None:
        error = FetchError(kind=kind, message="x")  # type: ignore[arg-type]
        assert exit_code_for(error) == int(code)


class TestPrintError:
    def test_message_and_hint(self) -> None:
        console = MockConsole()
        print_error(
            ReleaseError(kind="not_logged_in", message="Not logged in", hint="Please run: docker login"),
            console,
        )

        assert console.messages == ["error: Not logged in", "hint: Please run: docker login"]
        assert console.outputs[1].style is Style.HINT

    def test_without_hint(self) -> None:
        console = MockConsole()
        print_error(FetchError(kind="download_failed", message="404"), console)

        assert console.messages == ["error: 404"]

    def test_unsupported_arch(self) -> None:
        console = MockConsole()
        print_error(UnsupportedArch("riscv64"), console)

        assert console.messages == [
            "error: Unsupported architecture: riscv64",
            "hint: supported: amd64, arm64",
        ]
