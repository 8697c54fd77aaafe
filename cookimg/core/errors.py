"""Process exit codes.

CI jobs wrapping `cookimg publish` branch on these, so the numbers are
part of the interface and never get reused.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0
    USER_ERROR = 1  # bad invocation, missing subcommand
    ENV_ERROR = 2  # unsupported CPU, not logged in, bad cookimg.toml, no builder
    BUILD_ERROR = 3  # docker buildx build / run / push
    NETWORK_ERROR = 4  # release lookup or artifact download
    IO_ERROR = 5  # Dockerfile, fixtures or destination not writable
    VERIFY_ERROR = 6  # artifact missing from archive or failed `cook --version`
    HEALTH_ERROR = 7  # container never answered the liveness probe
