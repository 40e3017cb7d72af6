"""Client configuration."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable

ResponseTimeout = Callable[[float, float], float]


def default_response_timeout(start: float, duration: float) -> float:
    """Return the instant a response is due: start plus duration (seconds)."""
    return start + duration


@dataclass(frozen=True)
class Config:
    """Timing settings for the AT client; durations are in seconds."""

    cmd_cooldown: float = 0.02
    tx_timeout: float = 0.0
    flush_timeout: float = 0.0
    get_response_timeout: ResponseTimeout = default_response_timeout

    def with_tx_timeout(self, duration: float) -> Config:
        return replace(self, tx_timeout=duration)

    def with_flush_timeout(self, duration: float) -> Config:
        return replace(self, flush_timeout=duration)

    def with_cmd_cooldown(self, duration: float) -> Config:
        return replace(self, cmd_cooldown=duration)

    def with_response_timeout(self, compute: ResponseTimeout) -> Config:
        """Use a custom computation for the instant a response times out.

        It is re-evaluated while waiting, so it may extend the deadline.
        """
        return replace(self, get_response_timeout=compute)