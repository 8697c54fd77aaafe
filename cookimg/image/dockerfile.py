"""Render the two-stage Dockerfile for an ImageRecipe.

Stage `downloader` installs this package and runs `cookimg fetch` for the
build's TARGETARCH, which downloads and self-checks the executable. The
final stage starts from a clean base image and receives only that file.
"""

from __future__ import annotations

import json
from pathlib import Path

from cookimg.core.result import Err, Ok, Result
from cookimg.image.recipe import ImageRecipe

__all__ = ["render_dockerfile", "write_dockerfile"]


def _label_block(recipe: ImageRecipe) -> list[str]:
    items = list(recipe.labels.as_dict().items())
    lines: list[str] = []
    for i, (key, value) in enumerate(items):
        prefix = "LABEL " if i == 0 else "      "
        suffix = " \\" if i < len(items) - 1 else ""
        lines.append(f"{prefix}{key}={json.dumps(value, ensure_ascii=False)}{suffix}")
    return lines


def _downloader_stage(recipe: ImageRecipe) -> list[str]:
    return [
        "# Stage 1: download and verify the CookCLI binary",
        f"FROM {recipe.builder_image} AS downloader",
        "",
        "WORKDIR /src",
        "COPY pyproject.toml README.md ./",
        "COPY cookimg ./cookimg",
        "RUN pip install --no-cache-dir .",
        "",
        "ARG TARGETARCH",
        "ARG VERSION=latest",
        "",
        'RUN cookimg fetch --arch "${TARGETARCH}" --release "${VERSION}" '
        f"--dest {recipe.fetch_dest}",
    ]


def _runtime_stage(recipe: ImageRecipe) -> list[str]:
    user = recipe.user
    hc = recipe.healthcheck
    owner = f"{user.name}:{user.name}"
    return [
        "# Stage 2: minimal runtime image",
        f"FROM {recipe.base_image}",
        "",
        *_label_block(recipe),
        "",
        f"RUN apk add --no-cache {' '.join(recipe.packages)}",
        "",
        f"RUN addgroup -g {user.gid} {user.name} && \\",
        f"    adduser -D -u {user.uid} -G {user.name} {user.name}",
        "",
        f"WORKDIR {recipe.workdir}",
        f"RUN chown -R {owner} {recipe.workdir}",
        "",
        f"COPY --from=downloader --chown={owner} {recipe.fetch_dest} {recipe.binary_path}",
        "",
        f"USER {user.name}",
        "",
        f"EXPOSE {recipe.port}",
        "",
        f"HEALTHCHECK --interval={hc.interval}s --timeout={hc.timeout}s "
        f"--start-period={hc.start_period}s --retries={hc.retries} \\",
        f"  CMD curl -f {recipe.probe_url} || exit 1",
        "",
        f"ENTRYPOINT {json.dumps(list(recipe.entrypoint))}",
    ]


def render_dockerfile(recipe: ImageRecipe | None = None) -> str:
    """Return the Dockerfile text for recipe (defaults to the stock image)."""
    recipe = recipe or ImageRecipe()
    lines = [*_downloader_stage(recipe), "", *_runtime_stage(recipe)]
    return "\n".join(lines) + "\n"


def write_dockerfile(path: Path, recipe: ImageRecipe | None = None) -> Result[Path, str]:
    """Write the rendered Dockerfile, creating parent directories."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_dockerfile(recipe), encoding="utf-8")
    except OSError as e:
        return Err(f"cannot write {path}: {e}")
    return Ok(path)
