"""Release workflow: local build, local smoke test, multi-arch publish.

Each mode is a short pipeline of Result-returning steps; the first Err
stops the pipeline and is returned to the CLI, which prints it and maps it
to an exit code. The only retried step is the liveness poll in `test`.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from cookimg.artifact.resolver import is_latest, resolve_version
from cookimg.artifact.version import LATEST, Version
from cookimg.core.result import Err, Ok, Result
from cookimg.docker.auth import DOCKER_HUB, check_registry_auth, registry_for_image
from cookimg.docker.client import BuildRequest, RunRequest
from cookimg.image.dockerfile import write_dockerfile
from cookimg.image.recipe import ImageRecipe
from cookimg.platform.arch import Arch, UnsupportedArch, detect_host_arch
from cookimg.services.probe import RetryPolicy, poll_until_ready

if TYPE_CHECKING:
    from cookimg.artifact.http import HttpClient
    from cookimg.core.config import Config
    from cookimg.docker.client import DockerClient
    from cookimg.output.console import ConsoleProtocol

__all__ = [
    "SAMPLE_RECIPE",
    "ReleaseError",
    "BuildOutcome",
    "SmokeTestOutcome",
    "PublishOutcome",
    "ReleaseService",
]

SAMPLE_RECIPE = """\
>> title: Test Recipe
>> tags: test

This is a test recipe.

Mix @flour{2%cups} with @water{1%cup}.
"""

_DOCKERFILE = Path(".cookimg") / "Dockerfile"


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: Literal[
        "invalid_config",
        "unsupported_arch",
        "not_logged_in",
        "lookup_failed",
        "io_failed",
        "builder_failed",
        "build_failed",
        "push_failed",
        "run_failed",
        "health_check_failed",
    ]
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class BuildOutcome:
    platform: str
    tags: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SmokeTestOutcome:
    container: str
    url: str
    attempts: int


@dataclass(frozen=True, slots=True)
class PublishOutcome:
    version: Version
    tags: tuple[str, ...]


def _unsupported(error: UnsupportedArch) -> ReleaseError:
    return ReleaseError(kind="unsupported_arch", message=error.message, hint=error.hint)


class ReleaseService:
    """Drives docker buildx for the three release modes.

    Collaborators are injected so the workflow runs against fakes in tests:
    docker (CLI wrapper), http (version lookup and liveness probe), sleep
    (polling clock) and host_arch (CPU detection).
    """

    def __init__(
        self,
        *,
        config: Config,
        context: Path,
        console: ConsoleProtocol,
        docker: DockerClient,
        http: HttpClient,
        recipe: ImageRecipe | None = None,
        sleep: Callable[[float], None] = time.sleep,
        host_arch: Callable[[], Result[Arch, UnsupportedArch]] = detect_host_arch,
        docker_config: Path | None = None,
    ) -> None:
        self._config = config
        self._context = context
        self._console = console
        self._docker = docker
        self._http = http
        self._recipe = recipe or ImageRecipe()
        self._sleep = sleep
        self._host_arch = host_arch
        self._docker_config = docker_config

    @property
    def dockerfile_path(self) -> Path:
        return self._context / _DOCKERFILE

    def _ref(self, tag: str) -> str:
        return f"{self._config.image_name}:{tag}"

    def _log_requested_version(self) -> None:
        if is_latest(self._config.version):
            self._console.info("Version: will fetch latest release from GitHub during build")
        else:
            self._console.info(f"Version: {self._config.version}")

    def _local_platform(self) -> Result[Arch, ReleaseError]:
        return self._host_arch().map_err(_unsupported)

    def _render_dockerfile(self) -> Result[Path, ReleaseError]:
        written = write_dockerfile(self.dockerfile_path, self._recipe)
        if isinstance(written, Err):
            return Err(ReleaseError(kind="io_failed", message=written.error))
        return Ok(written.value)

    def _buildx(
        self,
        *,
        platforms: tuple[Arch, ...],
        version: str,
        tags: list[str],
        output: Literal["load", "push"],
    ) -> Result[tuple[str, ...], ReleaseError]:
        dockerfile = self._render_dockerfile()
        if isinstance(dockerfile, Err):
            return dockerfile

        refs = tuple(dict.fromkeys(self._ref(t) for t in tags))
        request = BuildRequest(
            platforms=tuple(a.docker_platform for a in platforms),
            tags=refs,
            output=output,
            dockerfile=dockerfile.value,
            context=self._context,
            build_args={"VERSION": version},
        )
        built = self._docker.build(request)
        if isinstance(built, Err):
            kind: Literal["build_failed", "push_failed"] = (
                "push_failed" if output == "push" else "build_failed"
            )
            return Err(
                ReleaseError(
                    kind=kind,
                    message=f"docker buildx build failed (exit {built.error.returncode})",
                    hint=built.error.stderr.strip() or None,
                )
            )
        return Ok(refs)

    # -- build ---------------------------------------------------------------

    def build(self) -> Result[BuildOutcome, ReleaseError]:
        """Build for the host architecture only and load the image locally."""
        arch = self._local_platform()
        if isinstance(arch, Err):
            return arch

        platform = arch.value.docker_platform
        self._console.info(f"Building {self._config.image_name} for local platform ({platform})")
        self._log_requested_version()

        version = self._config.version
        built = self._buildx(
            platforms=(arch.value,), version=version, tags=[version, LATEST], output="load"
        )
        if isinstance(built, Err):
            return built

        self._console.success("Build completed successfully!")
        self._console.info(f"Tagged as: {' and '.join(built.value)}")
        self._console.warning(f"This is a single-architecture build for {platform}")
        self._console.warning("Use 'publish' for multi-architecture builds")
        return Ok(BuildOutcome(platform=platform, tags=built.value))

    # -- test ----------------------------------------------------------------

    def _ensure_sample_recipes(self) -> Result[Path, ReleaseError]:
        recipes = self._context / self._config.local_test.recipes_dir
        try:
            recipes.mkdir(parents=True, exist_ok=True)
            if not any(recipes.iterdir()):
                self._console.info("Creating sample recipe for testing...")
                (recipes / "test.cook").write_text(SAMPLE_RECIPE, encoding="utf-8")
        except OSError as e:
            return Err(ReleaseError(kind="io_failed", message=f"cannot prepare {recipes}: {e}"))
        return Ok(recipes.resolve())

    def _probe(self, url: str) -> bool:
        return isinstance(self._http.get_status(url), Ok)

    def test(self) -> Result[SmokeTestOutcome, ReleaseError]:
        """Build a `:test` image, start it and wait for it to answer HTTP."""
        settings = self._config.local_test
        self._console.info(f"Building and testing {self._config.image_name}")
        self._log_requested_version()

        arch = self._local_platform()
        if isinstance(arch, Err):
            return arch

        built = self._buildx(
            platforms=(arch.value,), version=self._config.version, tags=["test"], output="load"
        )
        if isinstance(built, Err):
            return built

        recipes = self._ensure_sample_recipes()
        if isinstance(recipes, Err):
            return recipes

        self._console.info("Starting container for testing...")
        self._docker.remove_container(settings.container)
        started = self._docker.run_container(
            RunRequest(
                name=settings.container,
                image=self._ref("test"),
                host_port=settings.host_port,
                container_port=self._recipe.port,
                volume=recipes.value,
                mount_point=self._recipe.workdir,
                cpus=settings.cpus,
                memory=settings.memory,
            )
        )
        if isinstance(started, Err):
            self._docker.remove_container(settings.container)
            return Err(
                ReleaseError(
                    kind="run_failed",
                    message=f"could not start container {settings.container}",
                    hint=started.error.stderr.strip() or None,
                )
            )

        url = f"http://localhost:{settings.host_port}{self._recipe.healthcheck.path}"
        policy = RetryPolicy(
            max_attempts=settings.attempts,
            delay=settings.delay,
            initial_delay=settings.initial_delay,
        )

        def on_retry(attempt: int, total: int) -> None:
            self._console.warning(f"Health check failed, retrying... ({attempt}/{total})")

        self._console.info("Waiting for server to start...")
        polled = poll_until_ready(
            lambda: self._probe(url), policy, sleep=self._sleep, on_retry=on_retry
        )
        if isinstance(polled, Err):
            self._console.error(f"Health check failed after {polled.error} attempts")
            self._console.error("Container logs:")
            self._docker.show_logs(settings.container)
            self._docker.remove_container(settings.container)
            return Err(
                ReleaseError(
                    kind="health_check_failed",
                    message=f"{url} did not respond after {polled.error} attempts",
                    hint="the container has been stopped and removed",
                )
            )

        self._console.success("Health check passed!")
        self._console.info(f"Server is running at http://localhost:{settings.host_port}")
        self._console.info(f"Container '{settings.container}' is running.")
        self._console.info(f"To stop: docker stop {settings.container}")
        self._console.info(f"To view logs: docker logs {settings.container}")
        return Ok(
            SmokeTestOutcome(container=settings.container, url=url, attempts=polled.value)
        )

    # -- publish -------------------------------------------------------------

    def _ensure_builder(self) -> Result[None, ReleaseError]:
        name = self._config.builder
        if self._docker.builder_exists(name):
            result = self._docker.use_builder(name)
        else:
            self._console.info("Creating buildx builder...")
            result = self._docker.create_builder(name)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="builder_failed",
                    message=f"could not select buildx builder '{name}'",
                    hint=result.error.stderr.strip() or None,
                )
            )
        return Ok(None)

    def publish(self) -> Result[PublishOutcome, ReleaseError]:
        """Build every configured platform and push the full Tag Set at once.

        Login and version are settled before the builder is touched, so a
        failure here never leaves a partial tag set in the registry.
        """
        image = self._config.image_name
        self._console.info(f"Publishing {image}")

        registry = registry_for_image(image)
        auth = check_registry_auth(self._docker, registry, self._docker_config)
        if isinstance(auth, Err):
            return Err(
                ReleaseError(kind="not_logged_in", message=auth.error.message, hint=auth.error.hint)
            )

        if is_latest(self._config.version):
            self._console.info("Fetching latest CookCLI version for tagging...")
        resolved = resolve_version(self._config.version, self._http, self._config.repo)
        if isinstance(resolved, Err):
            e = resolved.error
            return Err(ReleaseError(kind="lookup_failed", message=e.message, hint=e.hint))
        version = resolved.value
        self._console.info(f"Version: {version}")

        builder = self._ensure_builder()
        if isinstance(builder, Err):
            return builder

        self._console.info("Building and pushing multi-architecture image...")
        pushed = self._buildx(
            platforms=self._config.platforms,
            version=version.raw,
            tags=version.unique_tags(),
            output="push",
        )
        if isinstance(pushed, Err):
            return pushed

        tags = tuple(version.unique_tags())
        self._console.success(f"Successfully published {image}")
        if registry == DOCKER_HUB:
            self._console.info(f"Available at: https://hub.docker.com/r/{image}")
        self._console.info(f"Tags: {', '.join(tags)}")
        return Ok(PublishOutcome(version=version, tags=tags))
