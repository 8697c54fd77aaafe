"""Typed configuration for the release workflow.

Configuration is an explicit value handed to the orchestrator. It comes
from three layers, later ones winning:

1. built-in defaults (below)
2. an optional `cookimg.toml` at the build context root
3. the `VERSION` and `IMAGE_NAME` environment variables

Example cookimg.toml:

    [image]
    name = "inigochoa/cookcli"
    platforms = ["linux/amd64", "linux/arm64"]

    [upstream]
    repo = "cooklang/cookcli"

    [test]
    port = 9080
    attempts = 10
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from cookimg.platform.arch import Arch, parse_platform

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_int, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILENAME",
    "Config",
    "ConfigError",
    "LocalTestConfig",
    "load_config",
]

CONFIG_FILENAME = "cookimg.toml"

DEFAULT_IMAGE_NAME = "inigochoa/cookcli"
DEFAULT_REPO = "cooklang/cookcli"
DEFAULT_BUILDER = "multiarch-builder"
DEFAULT_VERSION = "latest"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class LocalTestConfig:
    """Settings for `cookimg test` (container run + liveness polling)."""

    container: str = "cookcli-test"
    recipes_dir: str = "test-recipes"
    host_port: int = 9080
    cpus: str = "0.10"
    memory: str = "32m"
    attempts: int = 10
    delay: float = 3.0
    initial_delay: float = 5.0


def _default_platforms() -> tuple[Arch, ...]:
    return (Arch.AMD64, Arch.ARM64)


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    image_name: str = DEFAULT_IMAGE_NAME
    version: str = DEFAULT_VERSION
    repo: str = DEFAULT_REPO
    builder: str = DEFAULT_BUILDER
    platforms: tuple[Arch, ...] = field(default_factory=_default_platforms)
    local_test: LocalTestConfig = field(default_factory=LocalTestConfig)

    @property
    def platform_list(self) -> str:
        """Comma-separated platforms for `docker buildx --platform`."""
        return ",".join(a.docker_platform for a in self.platforms)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Result[Config, str]:
        """Create Config from a mapping (parsed TOML)."""
        image: StrDict = get_table(data, "image") or {}
        upstream: StrDict = get_table(data, "upstream") or {}
        builder: StrDict = get_table(data, "builder") or {}
        test: StrDict = get_table(data, "test") or {}

        platforms = _default_platforms()
        raw_platforms = get_str_list(image, "platforms")
        if raw_platforms is not None:
            parsed: list[Arch] = []
            for value in raw_platforms:
                result = parse_platform(value)
                if isinstance(result, Err):
                    return Err(f"[image].platforms: {result.error.message}")
                parsed.append(result.value)
            if not parsed:
                return Err("[image].platforms must not be empty")
            platforms = tuple(parsed)

        defaults = LocalTestConfig()
        return Ok(
            cls(
                image_name=get_str(image, "name") or DEFAULT_IMAGE_NAME,
                repo=get_str(upstream, "repo") or DEFAULT_REPO,
                builder=get_str(builder, "name") or DEFAULT_BUILDER,
                platforms=platforms,
                local_test=LocalTestConfig(
                    container=get_str(test, "container") or defaults.container,
                    recipes_dir=get_str(test, "recipes_dir") or defaults.recipes_dir,
                    host_port=get_int(test, "port") or defaults.host_port,
                    cpus=get_str(test, "cpus") or defaults.cpus,
                    memory=get_str(test, "memory") or defaults.memory,
                    attempts=get_int(test, "attempts") or defaults.attempts,
                    delay=_or_default(get_float(test, "delay"), defaults.delay),
                    initial_delay=_or_default(
                        get_float(test, "initial_delay"), defaults.initial_delay
                    ),
                ),
            )
        )

    def with_env(self, environ: Mapping[str, str]) -> Config:
        """Apply VERSION / IMAGE_NAME overrides."""
        version = environ.get("VERSION", "").strip() or self.version
        image_name = environ.get("IMAGE_NAME", "").strip() or self.image_name
        return Config(
            image_name=image_name,
            version=version,
            repo=self.repo,
            builder=self.builder,
            platforms=self.platforms,
            local_test=self.local_test,
        )


def _or_default(value: float | None, default: float) -> float:
    # 0 is a valid delay, so `or` would be wrong here.
    return default if value is None else value


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and syntax errors."""
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except (UnicodeDecodeError, OSError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(context_dir: Path, environ: Mapping[str, str]) -> Result[Config, ConfigError]:
    """Load configuration for a build context.

    Args:
        context_dir: Build context root (where cookimg.toml may live)
        environ: Environment mapping (usually os.environ)

    Returns:
        Ok(Config) on success, Err(ConfigError) if cookimg.toml is invalid
    """
    path = context_dir / CONFIG_FILENAME
    if not path.is_file():
        return Ok(Config().with_env(environ))

    parsed = _parse_toml(path)
    if isinstance(parsed, Err):
        return parsed

    config = Config.from_dict(parsed.value)
    if isinstance(config, Err):
        return Err(
            ConfigError(
                f"Invalid config: {config.error}",
                path=path,
                hint="supported platforms: linux/amd64, linux/arm64",
            )
        )
    return Ok(config.value.with_env(environ))
