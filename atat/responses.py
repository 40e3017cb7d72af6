"""Parsers for URCs, success replies, data prompts and command echoes."""

from __future__ import annotations

from typing import Callable, Union

from atat.results import DigestResult
from atat.scan import Incomplete, NoMatch, take_until_including, trim_ascii_whitespace

_MULTISPACE = b" \t\r\n"
_PROMPTS = b">@"

UrcParser = Callable[[bytes], "tuple[bytes, int]"]


def _streaming_tag(buf: bytes, tag: bytes) -> None:
    """Check that ``buf`` starts with ``tag``, allowing for more bytes to come."""
    shared = min(len(buf), len(tag))
    if buf[:shared] != tag[:shared]:
        raise NoMatch(f"expected {tag!r}")
    if len(buf) < len(tag):
        raise Incomplete(f"waiting for {tag!r}")


def _line_ending(buf: bytes) -> int:
    """Length of the line ending at the start of ``buf``."""
    if buf.startswith(b"\n"):
        return 1
    if buf.startswith(b"\r\n"):
        return 2
    raise NoMatch("expected a line ending")


def urc_helper(token: Union[bytes, str]) -> UrcParser:
    """Build a parser for a URC line starting with ``token``.

    The parser matches ``\\r\\n{token}(:.*)?\\r\\n`` at the start of the buffer
    and returns ``(urc_line, consumed)``. It raises Incomplete when the buffer
    may still become a match, and NoMatch when it cannot.
    """
    tag = token.encode("ascii") if isinstance(token, str) else bytes(token)

    def parse(buf: bytes) -> tuple[bytes, int]:
        data = bytes(buf)
        ending = _line_ending(data)
        rest = data[ending:]
        _streaming_tag(rest, tag)
        after = rest[len(tag):]
        try:
            _streaming_tag(after, b":")
            body, end, _ = take_until_including(after[1:], b"\r\n")
            line = tag + b":" + body + end
        except NoMatch:
            _streaming_tag(after, b"\r\n")
            line = tag + b"\r\n"
        return trim_ascii_whitespace(line), ending + len(line)

    return parse


def prompt_response(buf: bytes) -> tuple[DigestResult, int]:
    """Match a data prompt ('>' or '@') that ends the buffer, bar whitespace."""
    data = bytes(buf)
    for prompt in _PROMPTS:
        index = data.find(bytes([prompt]))
        if index < 0:
            continue
        if not data[index + 1:].lstrip(_MULTISPACE):
            return DigestResult.prompt(prompt), len(data)
    raise NoMatch("no prompt")


def success_response(buf: bytes) -> tuple[DigestResult, int]:
    """Match a response terminated by OK or by a CONNECT line."""
    data = bytes(buf)
    try:
        body, tag, _ = take_until_including(data, b"\r\nOK\r\n")
    except NoMatch:
        pass
    else:
        return DigestResult.response(trim_ascii_whitespace(body)), len(body) + len(tag)

    body, tag, rest = take_until_including(data, b"\r\nCONNECT")
    line, end, _ = take_until_including(rest, b"\r\n")
    consumed = len(body) + len(tag) + len(line) + len(end)
    return DigestResult.response(trim_ascii_whitespace(body)), consumed


def echo(buf: bytes) -> tuple[bytes, bytes]:
    """Split off a command echo: everything before the first CR LF.

    Returns ``(echoed, rest)``. Buffers shorter than two bytes have no echo.
    Raises NoMatch when the buffer holds no CR LF.
    """
    data = bytes(buf)
    if len(data) < 2:
        return b"", data
    index = data.find(b"\r\n")
    if index < 0:
        raise NoMatch("no line ending after echo")
    return data[:index], data[index:]