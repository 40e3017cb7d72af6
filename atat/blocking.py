"""Blocking AT client."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional, Protocol, TypeVar

from atat.asynch import AtatCommand
from atat.config import Config
from atat.errors import AtError, ErrorKind, InternalError
from atat.helpers import lossy_str

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LONG_PAYLOAD = 50
_POLL_INTERVAL = 0.0005


class BlockingWriter(Protocol):
    def write(self, data: bytes) -> Any: ...

    def flush(self) -> None: ...


class BlockingResponseSlot(Protocol):
    def reset(self) -> None: ...

    def try_get(self) -> bytes | InternalError | None: ...


class BlockingTimer:
    """A deadline that can be waited for by blocking the calling thread."""

    def __init__(self, expires_at: float) -> None:
        self.expires_at = expires_at

    @classmethod
    def after(cls, duration: float) -> BlockingTimer:
        """A timer expiring ``duration`` seconds from now."""
        return cls(time.monotonic() + duration)

    def wait(self) -> None:
        """Block until the timer has expired."""
        while True:
            remaining = self.expires_at - time.monotonic()
            if remaining <= 0:
                return
            time.sleep(remaining)


class Client:
    """Sends commands over ``writer`` and polls ``response_slot`` for replies."""

    def __init__(
        self,
        writer: BlockingWriter,
        response_slot: BlockingResponseSlot,
        config: Config | None = None,
    ) -> None:
        self._writer = writer
        self._slot = response_slot
        self._config = config if config is not None else Config()
        self._cooldown: BlockingTimer | None = None

    def send(self, cmd: AtatCommand) -> Any:
        """Send ``cmd`` and return its parsed response.

        Waits out the command cooldown since the previous request first, and
        raises AtError(TIMEOUT) if no response arrives in time.
        """
        data = bytes(cmd.write())
        self._send_request(data)
        if not cmd.expects_response_code:
            return cmd.parse(b"")
        response = self._with_timeout(cmd.max_timeout_ms / 1000, self._slot.try_get)
        return cmd.parse(response)

    def send_retry(self, cmd: AtatCommand) -> Any:
        """Send ``cmd`` up to ``cmd.attempts`` times, retrying on timeouts only."""
        for attempt in range(1, cmd.attempts + 1):
            if attempt > 1:
                logger.debug("Attempt %d:", attempt)
            try:
                return self.send(cmd)
            except AtError as exc:
                if exc.kind is not ErrorKind.TIMEOUT:
                    raise
        raise AtError(ErrorKind.TIMEOUT)

    def _send_request(self, data: bytes) -> None:
        if len(data) < _LONG_PAYLOAD:
            logger.debug("Sending command: %s", lossy_str(data))
        else:
            logger.debug("Sending command with long payload (%d bytes)", len(data))

        self._wait_cooldown()
        self._slot.reset()
        try:
            self._writer.write(data)
            self._writer.flush()
        except OSError as exc:
            raise AtError(ErrorKind.WRITE) from exc
        self._cooldown = BlockingTimer.after(self._config.cmd_cooldown)

    def _wait_cooldown(self) -> None:
        cooldown, self._cooldown = self._cooldown, None
        if cooldown is not None:
            cooldown.wait()

    def _with_timeout(self, timeout: float, poll: Callable[[], Optional[T]]) -> T:
        compute = self._config.get_response_timeout
        start = time.monotonic()
        while True:
            result = poll()
            if result is not None:
                return result
            if compute(start, timeout) <= time.monotonic():
                raise AtError(ErrorKind.TIMEOUT)
            time.sleep(_POLL_INTERVAL)