"""Splits the incoming byte stream into responses, URCs and data prompts."""

from __future__ import annotations

import copy
from typing import Callable

from atat.error_parse import error_response
from atat.errors import ErrorKind, InternalError
from atat.responses import echo, prompt_response, success_response
from atat.results import DigestResult
from atat.scan import Incomplete, NoMatch, trim_start_ascii_space

# A parser takes the buffer and returns (matched bytes, bytes consumed).
# It raises Incomplete when more input may complete a match, NoMatch otherwise.
MatchParser = Callable[[bytes], "tuple[bytes, int]"]
PromptParser = Callable[[bytes], "tuple[int, int]"]


def _no_match(buf: bytes) -> tuple[bytes, int]:
    raise NoMatch("no custom match")


class AtDigester:
    """Request/response digester for the basic AT protocol, with or without echo.

    The buffer may hold a command echo, a response followed by a result code,
    an unsolicited result code (URC) or a data prompt. Each call to
    :meth:`digest` recognises at most one of these and reports how many bytes
    of the buffer it used up.
    """

    def __init__(self, urc_parser: MatchParser) -> None:
        self._urc_parser = urc_parser
        self._custom_success: MatchParser = _no_match
        self._custom_error: MatchParser = _no_match
        self._custom_prompt: PromptParser = _no_match

    def _with(self, attribute: str, func: Callable) -> AtDigester:
        clone = copy.copy(self)
        setattr(clone, attribute, func)
        return clone

    def with_custom_success(self, func: MatchParser) -> AtDigester:
        """Return a digester that tries ``func`` before the standard success replies."""
        return self._with("_custom_success", func)

    def with_custom_error(self, func: MatchParser) -> AtDigester:
        """Return a digester that tries ``func`` before the standard error replies."""
        return self._with("_custom_error", func)

    def with_custom_prompt(self, func: PromptParser) -> AtDigester:
        """Return a digester that tries ``func`` before the standard prompts."""
        return self._with("_custom_prompt", func)

    def digest(self, buf: bytes) -> tuple[DigestResult, int]:
        """Recognise the next item in ``buf``; return it and the bytes consumed."""
        data = bytes(buf)

        # Leading spaces and a command echo are always eaten.
        trimmed = trim_start_ascii_space(data)
        space_bytes = len(data) - len(trimmed)
        try:
            echoed, rest = echo(trimmed)
        except NoMatch:
            echoed, rest = b"", trimmed
        skipped = space_bytes + len(echoed)
        incomplete = (DigestResult.none(), skipped)

        try:
            line, consumed = self._urc_parser(rest)
        except Incomplete:
            return incomplete
        except NoMatch:
            pass
        else:
            return DigestResult.urc(line), consumed

        try:
            response, consumed = self._custom_success(rest)
        except Incomplete:
            return incomplete
        except NoMatch:
            pass
        else:
            return DigestResult.response(response), consumed + skipped

        try:
            result, consumed = success_response(rest)
        except Incomplete:
            return incomplete
        except NoMatch:
            pass
        else:
            return result, consumed + skipped

        try:
            prompt, consumed = self._custom_prompt(rest)
        except Incomplete:
            return incomplete
        except NoMatch:
            pass
        else:
            return DigestResult.prompt(prompt), consumed + skipped

        try:
            result, consumed = prompt_response(rest)
        except (Incomplete, NoMatch):
            pass
        else:
            return result, consumed + skipped

        try:
            message, consumed = self._custom_error(rest)
        except Incomplete:
            return incomplete
        except NoMatch:
            pass
        else:
            failure = InternalError(ErrorKind.CUSTOM, message)
            return DigestResult.error(failure), consumed + skipped

        try:
            result, consumed = error_response(rest)
        except (Incomplete, NoMatch):
            pass
        else:
            return result, consumed + skipped

        return incomplete