"""Asynchronous AT client."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Protocol, TypeVar

from atat.config import Config
from atat.errors import AtError, ErrorKind, InternalError
from atat.helpers import lossy_str

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LONG_PAYLOAD = 50


class AtatCommand(Protocol):
    """A command the client can send.

    ``write`` returns the bytes to send; ``parse`` turns the response (data
    bytes, or the InternalError the device replied with) into the result,
    raising AtError on failure.
    """

    expects_response_code: bool
    max_timeout_ms: int
    attempts: int
    reattempt_on_parse_err: bool

    def write(self) -> bytes: ...

    def parse(self, response: bytes | InternalError) -> Any: ...


class AsyncWriter(Protocol):
    async def write(self, data: bytes) -> None: ...

    async def flush(self) -> None: ...


class AsyncResponseSlot(Protocol):
    def reset(self) -> None: ...

    async def get(self) -> bytes | InternalError: ...


class AsyncClient:
    """Sends commands over ``writer`` and awaits replies from ``response_slot``."""

    def __init__(
        self,
        writer: AsyncWriter,
        response_slot: AsyncResponseSlot,
        config: Config | None = None,
    ) -> None:
        self._writer = writer
        self._slot = response_slot
        self._config = config if config is not None else Config()
        self._cooldown_until: float | None = None

    async def send(self, cmd: AtatCommand) -> Any:
        """Send ``cmd`` and return its parsed response.

        Waits out the command cooldown since the previous request first.
        """
        data = bytes(cmd.write())
        await self._send_request(data)
        if not cmd.expects_response_code:
            return cmd.parse(b"")
        response = await self._with_timeout(cmd.max_timeout_ms / 1000, self._slot.get())
        return cmd.parse(response)

    async def send_retry(self, cmd: AtatCommand) -> Any:
        """Send ``cmd`` up to ``cmd.attempts`` times, retrying on timeouts.

        Parse errors are retried only if the command allows it.
        """
        for attempt in range(1, cmd.attempts + 1):
            if attempt > 1:
                logger.debug("Attempt %d:", attempt)
            try:
                return await self.send(cmd)
            except AtError as exc:
                if exc.kind is ErrorKind.TIMEOUT:
                    continue
                if exc.kind is ErrorKind.PARSE and cmd.reattempt_on_parse_err:
                    continue
                raise
        raise AtError(ErrorKind.TIMEOUT)

    async def _send_request(self, data: bytes) -> None:
        if len(data) < _LONG_PAYLOAD:
            logger.debug("Sending command: %s", lossy_str(data))
        else:
            logger.debug("Sending command with long payload (%d bytes)", len(data))

        await self._wait_cooldown()
        self._slot.reset()
        try:
            await self._writer.write(data)
            await self._writer.flush()
        except OSError as exc:
            raise AtError(ErrorKind.WRITE) from exc
        self._cooldown_until = time.monotonic() + self._config.cmd_cooldown

    async def _wait_cooldown(self) -> None:
        until, self._cooldown_until = self._cooldown_until, None
        if until is not None:
            remaining = until - time.monotonic()
            if remaining > 0:
                await asyncio.sleep(remaining)

    async def _with_timeout(self, timeout: float, awaitable: Awaitable[T]) -> T:
        compute = self._config.get_response_timeout
        start = time.monotonic()
        expires = compute(start, timeout)
        task = asyncio.ensure_future(awaitable)
        try:
            while True:
                remaining = max(0.0, expires - time.monotonic())
                done, _ = await asyncio.wait({task}, timeout=remaining)
                if done:
                    return task.result()
                new_expires = compute(start, timeout)
                if new_expires <= expires:
                    raise AtError(ErrorKind.TIMEOUT)
                expires = new_expires
        finally:
            if not task.done():
                task.cancel()