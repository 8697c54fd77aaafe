"""Tests for version resolution and the GitHub endpoints."""

from __future__ import annotations

import pytest

from cookimg.artifact.github import (
    artifact_url,
    asset_name,
    latest_release_tag,
    latest_release_url,
)
from cookimg.artifact.http import HttpError, MockHttpClient
from cookimg.artifact.resolver import is_latest, resolve_version
from cookimg.artifact.version import Version
from cookimg.core.result import Err, Ok
from cookimg.platform.arch import Arch

LATEST_URL = "https://api.github.com/repos/cooklang/cookcli/releases/latest"


class TestGitHubEndpoints:
    def test_latest_release_url(self) -> None:
        assert latest_release_url() == LATEST_URL
        assert latest_release_url("a/b") == "https://api.github.com/repos/a/b/releases/latest"

    def test_asset_name(self) -> None:
        assert asset_name(Arch.AMD64) == "cook-x86_64-unknown-linux-musl.tar.gz"

    @pytest.mark.parametrize("arch", list(Arch))
    def test_artifact_url_template(self, arch: Arch) -> None:
        url = artifact_url(Version("1.2.3"), arch)
        assert url == (
            "https://github.com/cooklang/cookcli/releases/download/"
            f"v1.2.3/cook-{arch.artifact_suffix}.tar.gz"
        )

    def test_arm64_url(self) -> None:
        assert artifact_url(Version("0.18.1"), Arch.ARM64).endswith(
            "/v0.18.1/cook-aarch64-unknown-linux-musl.tar.gz"
        )


class TestLatestReleaseTag:
    def test_strips_v_prefix(self) -> None:
        client = MockHttpClient()
        client.set_json(LATEST_URL, {"tag_name": "v0.18.1"})
        assert latest_release_tag(client) == Ok("0.18.1")

    def test_tag_without_prefix(self) -> None:
        client = MockHttpClient()
        client.set_json(LATEST_URL, {"tag_name": "0.18.1"})
        assert latest_release_tag(client) == Ok("0.18.1")

    def test_strips_only_one_v(self) -> None:
        client = MockHttpClient()
        client.set_json(LATEST_URL, {"tag_name": "vv1"})
        assert latest_release_tag(client) == Ok("v1")

    @pytest.mark.parametrize("payload", [{}, {"tag_name": None}, {"tag_name": ""}, {"tag_name": "v"}])
    def test_unparseable_tag(self, payload: dict[str, object]) -> None:
        client = MockHttpClient()
        client.set_json(LATEST_URL, payload)
        assert isinstance(latest_release_tag(client), Err)

    def test_http_failure(self) -> None:
        client = MockHttpClient()
        client.set_json(LATEST_URL, HttpError(url=LATEST_URL, status=403, message="rate limited"))

        result = latest_release_tag(client)

        assert isinstance(result, Err)
        assert result.error.status == 403


class TestIsLatest:
    def test_sentinels(self) -> None:
        assert is_latest(None)
        assert is_latest("")
        assert is_latest("latest")
        assert is_latest("  latest ")

    def test_explicit(self) -> None:
        assert not is_latest("0.18.1")
        assert not is_latest("Latest-ish")


class TestResolveVersion:
    def test_latest_performs_one_lookup(self) -> None:
        client = MockHttpClient()
        client.set_json(LATEST_URL, {"tag_name": "v0.18.1"})

        result = resolve_version("latest", client)

        assert result == Ok(Version("0.18.1"))
        assert client.calls == [("get_json", LATEST_URL)]

    def test_empty_equals_latest(self) -> None:
        client_a = MockHttpClient()
        client_a.set_json(LATEST_URL, {"tag_name": "v0.18.1"})
        client_b = MockHttpClient()
        client_b.set_json(LATEST_URL, {"tag_name": "v0.18.1"})

        assert resolve_version("", client_a) == resolve_version("latest", client_b)
        assert len(client_a.calls) == 1
        assert len(client_b.calls) == 1

    def test_explicit_version_is_verbatim_without_lookup(self) -> None:
        client = MockHttpClient()

        assert resolve_version("1.2.3", client) == Ok(Version("1.2.3"))
        assert resolve_version("not-a-semver", client) == Ok(Version("not-a-semver"))
        assert client.calls == []

    def test_custom_repo(self) -> None:
        client = MockHttpClient()
        client.set_json(latest_release_url("fork/cookcli"), {"tag_name": "v9.0.0"})

        assert resolve_version(None, client, "fork/cookcli") == Ok(Version("9.0.0"))

    def test_lookup_failure_has_no_fallback(self) -> None:
        client = MockHttpClient()

        result = resolve_version("latest", client)

        assert isinstance(result, Err)
        assert result.error.kind == "lookup_failed"
        assert "cooklang/cookcli" in result.error.message
        assert result.error.hint is not None
