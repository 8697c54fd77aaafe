"""Tests for the image recipe and rendered Dockerfile."""

from __future__ import annotations

from pathlib import Path

from cookimg.core.result import Err, Ok
from cookimg.image.dockerfile import render_dockerfile, write_dockerfile
from cookimg.image.recipe import HealthCheck, ImageRecipe, Labels, RuntimeUser


def _stages(text: str) -> tuple[str, str]:
    head, _, tail = text.partition("# Stage 2")
    return head, tail


class TestRecipeDefaults:
    def test_runtime_contract(self) -> None:
        recipe = ImageRecipe()
        assert recipe.port == 9080
        assert recipe.user == RuntimeUser(name="appuser", uid=1000, gid=1000)
        assert recipe.healthcheck == HealthCheck(interval=30, timeout=3, start_period=5, retries=3)
        assert recipe.packages == ("ca-certificates", "curl")
        assert recipe.workdir == "/recipes"
        assert recipe.entrypoint == ("cook", "server", ".", "--host")
        assert recipe.probe_url == "http://localhost:9080/"

    def test_labels(self) -> None:
        labels = Labels().as_dict()
        assert labels["org.opencontainers.image.title"] == "CookCLI"
        assert labels["org.opencontainers.image.licenses"] == "MIT"
        assert len(labels) == 7


class TestRenderDockerfile:
    def test_downloader_stage_fetches_for_target_arch(self) -> None:
        downloader, _ = _stages(render_dockerfile())

        assert "FROM python:3.12-alpine AS downloader" in downloader
        assert "ARG TARGETARCH" in downloader
        assert "ARG VERSION=latest" in downloader
        assert (
            'RUN cookimg fetch --arch "${TARGETARCH}" --release "${VERSION}" --dest /tmp/cookcli'
            in downloader
        )

    def test_runtime_stage(self) -> None:
        _, runtime = _stages(render_dockerfile())
        lines = runtime.splitlines()

        assert "FROM alpine:latest" in lines
        assert "RUN apk add --no-cache ca-certificates curl" in lines
        assert "RUN addgroup -g 1000 appuser && \\" in lines
        assert "    adduser -D -u 1000 -G appuser appuser" in lines
        assert "WORKDIR /recipes" in lines
        assert "RUN chown -R appuser:appuser /recipes" in lines
        assert (
            "COPY --from=downloader --chown=appuser:appuser /tmp/cookcli /usr/local/bin/cook"
            in lines
        )
        assert "USER appuser" in lines
        assert "EXPOSE 9080" in lines
        assert (
            "HEALTHCHECK --interval=30s --timeout=3s --start-period=5s --retries=3 \\" in lines
        )
        assert "  CMD curl -f http://localhost:9080/ || exit 1" in lines
        assert lines[-1] == 'ENTRYPOINT ["cook", "server", ".", "--host"]'

    def test_no_build_tools_in_runtime_stage(self) -> None:
        _, runtime = _stages(render_dockerfile())

        assert "pip" not in runtime
        assert "python" not in runtime
        assert "cookimg" not in runtime

    def test_user_switch_comes_after_ownership(self) -> None:
        text = render_dockerfile()

        assert text.index("RUN chown -R") < text.index("USER appuser")
        assert text.index("COPY --from=downloader") < text.index("USER appuser")

    def test_labels_are_quoted(self) -> None:
        text = render_dockerfile()

        assert 'LABEL org.opencontainers.image.title="CookCLI" \\' in text
        assert 'org.opencontainers.image.vendor="Iñigo Ochoa"' in text

    def test_custom_recipe(self) -> None:
        recipe = ImageRecipe(
            user=RuntimeUser(name="chef", uid=2000, gid=2001),
            port=8080,
            healthcheck=HealthCheck(interval=10, timeout=2, start_period=1, retries=5),
        )
        text = render_dockerfile(recipe)

        assert "addgroup -g 2001 chef" in text
        assert "adduser -D -u 2000 -G chef chef" in text
        assert "EXPOSE 8080" in text
        assert "--interval=10s --timeout=2s --start-period=1s --retries=5" in text
        assert "curl -f http://localhost:8080/" in text


class TestWriteDockerfile:
    def test_writes_file(self, tmp_path: Path) -> None:
        path = tmp_path / ".cookimg" / "Dockerfile"

        assert write_dockerfile(path) == Ok(path)
        assert path.read_text(encoding="utf-8") == render_dockerfile()

    def test_unwritable_location(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")

        result = write_dockerfile(blocker / "Dockerfile")

        assert isinstance(result, Err)
        assert "cannot write" in result.error
