"""Feeds received bytes through a digester and dispatches what it finds."""

from __future__ import annotations

import asyncio
import logging
import queue
from typing import Any, Callable, Protocol

from atat.digest import AtDigester
from atat.errors import InternalError
from atat.helpers import lossy_str
from atat.results import DigestKind, DigestResult

logger = logging.getLogger(__name__)

_QUEUE_FULL = (asyncio.QueueFull, queue.Full)

UrcParse = Callable[[bytes], Any]


class IngressError(Exception):
    """Base class for errors raised while ingesting bytes."""


class ResponseSlotBusy(IngressError):
    """A response or prompt arrived while another one is still pending."""


class UrcChannelFull(IngressError):
    """A URC could not be published because the channel has no room."""


class ResponseSlot(Protocol):
    """Receives responses and prompts; raises ResponseSlotBusy when occupied."""

    def signal_response(self, response: bytes | InternalError) -> None: ...

    def signal_prompt(self, prompt: int) -> None: ...


class UrcPublisher(Protocol):
    """Queue-like sink for parsed URCs, such as :class:`asyncio.Queue`."""

    def put_nowait(self, item: Any) -> None: ...

    async def put(self, item: Any) -> None: ...


class Reader(Protocol):
    async def read(self, n: int) -> bytes: ...


class Ingress:
    """Buffers incoming bytes and hands digested items to their consumers.

    Responses and prompts go to the response slot; URC lines are turned into
    URC values by ``urc_parse`` (which returns None for lines it does not
    know) and published. The buffer holds at most ``capacity`` bytes.
    """

    def __init__(
        self,
        digester: AtDigester,
        urc_parse: UrcParse,
        response_slot: ResponseSlot,
        urc_publisher: UrcPublisher,
        capacity: int,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._digester = digester
        self._urc_parse = urc_parse
        self._slot = response_slot
        self._publisher = urc_publisher
        self._capacity = capacity
        self._buf = bytearray()

    def free_space(self) -> int:
        """Number of bytes that can be written before the buffer is full."""
        return self._capacity - len(self._buf)

    def try_write(self, data: bytes) -> int:
        """Ingest as much of ``data`` as fits; return the number of bytes taken.

        Raises UrcChannelFull if a URC cannot be published without waiting.
        """
        remaining = memoryview(bytes(data))
        written = 0
        while remaining:
            space = self.free_space()
            if space == 0:
                return written
            chunk = remaining[:space]
            self._buf += chunk
            self._process_now()
            remaining = remaining[len(chunk):]
            written += len(chunk)
        return written

    async def write(self, data: bytes) -> None:
        """Ingest all of ``data``, waiting for room in the URC channel as needed."""
        remaining = memoryview(bytes(data))
        while remaining:
            space = self.free_space()
            if space == 0:
                await asyncio.sleep(0)
                continue
            chunk = remaining[:space]
            self._buf += chunk
            await self._process()
            remaining = remaining[len(chunk):]

    async def read_from(self, reader: Reader) -> None:
        """Ingest everything read from ``reader`` until it reports end of stream.

        A read error discards the bytes buffered so far and reading goes on.
        """
        while True:
            try:
                received = await reader.read(self.free_space())
            except OSError as exc:
                logger.error("Got serial read error %r", exc)
                self.clear()
                continue
            if not received:
                return
            self._buf += received
            await self._process()

    def clear(self) -> None:
        """Discard all buffered bytes."""
        self._buf.clear()

    def _next(self) -> tuple[DigestResult, int]:
        return self._digester.digest(bytes(self._buf))

    def _parse_urc(self, line: bytes, swallowed: int) -> Any:
        urc = self._urc_parse(line)
        if urc is None:
            logger.error("Parsing URC FAILED: %s", lossy_str(line))
        else:
            logger.debug(
                "Received URC (%d/%d): %s", swallowed, len(self._buf), lossy_str(line)
            )
        return urc

    def _process_now(self) -> None:
        while self._buf:
            result, swallowed = self._next()
            if result.kind is DigestKind.URC:
                urc = self._parse_urc(result.value, swallowed)
                if urc is not None:
                    try:
                        self._publisher.put_nowait(urc)
                    except _QUEUE_FULL:
                        raise UrcChannelFull("URC channel is full") from None
            else:
                self._handle(result, swallowed)
            if swallowed == 0:
                break
            del self._buf[:swallowed]

    async def _process(self) -> None:
        while self._buf:
            result, swallowed = self._next()
            if result.kind is DigestKind.URC:
                urc = self._parse_urc(result.value, swallowed)
                if urc is not None:
                    try:
                        self._publisher.put_nowait(urc)
                    except _QUEUE_FULL:
                        await self._publisher.put(urc)
            else:
                self._handle(result, swallowed)
            if swallowed == 0:
                break
            del self._buf[:swallowed]

    def _handle(self, result: DigestResult, swallowed: int) -> None:
        pending = len(self._buf)
        if result.kind is DigestKind.NONE:
            if swallowed > 0:
                logger.debug(
                    "Received echo or space (%d/%d): %s",
                    swallowed,
                    pending,
                    lossy_str(bytes(self._buf)),
                )
        elif result.kind is DigestKind.PROMPT:
            logger.debug("Received prompt (%d/%d)", swallowed, pending)
            try:
                self._slot.signal_prompt(result.value)
            except ResponseSlotBusy:
                logger.error("Received prompt but a response is already pending")
        elif result.kind is DigestKind.RESPONSE:
            response = result.value
            if isinstance(response, InternalError):
                logger.warning(
                    "Received error response (%d/%d): %r", swallowed, pending, response
                )
            elif response:
                logger.debug(
                    "Received response (%d/%d): %s", swallowed, pending, lossy_str(response)
                )
            else:
                logger.debug("Received OK (%d/%d)", swallowed, pending)
            try:
                self._slot.signal_response(response)
            except ResponseSlotBusy:
                logger.error("Received response but a response is already pending")