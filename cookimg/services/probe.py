"""Bounded liveness polling for a freshly started container."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from cookimg.core.result import Err, Ok, Result

__all__ = ["RetryPolicy", "poll_until_ready"]


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """How long to wait for the server before giving up.

    Worst case blocks for initial_delay + max_attempts * delay seconds.
    """

    max_attempts: int = 10
    delay: float = 3.0
    initial_delay: float = 5.0


def poll_until_ready(
    probe: Callable[[], bool],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], None],
    on_retry: Callable[[int, int], None] | None = None,
) -> Result[int, int]:
    """Call probe until it returns True or attempts run out.

    There is no cancellation; the loop always ends in success or exhaustion.

    Returns:
        Ok(attempts used) on success, Err(attempts made) on exhaustion.
    """
    attempts = max(1, policy.max_attempts)
    if policy.initial_delay > 0:
        sleep(policy.initial_delay)

    for attempt in range(1, attempts + 1):
        if probe():
            return Ok(attempt)
        if on_retry is not None:
            on_retry(attempt, attempts)
        if attempt < attempts:
            sleep(policy.delay)

    return Err(attempts)
