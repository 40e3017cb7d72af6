"""Low-level byte scanning primitives used by the response parsers."""

from __future__ import annotations

# The bytes Rust's `u8::is_ascii_whitespace` accepts (no vertical tab).
_ASCII_WHITESPACE = b" \t\n\r\x0c"


class Incomplete(Exception):
    """The input may match once more bytes have arrived."""


class NoMatch(Exception):
    """The input does not match, however many bytes follow."""


def take_until_including(buf: bytes, tag: bytes) -> tuple[bytes, bytes, bytes]:
    """Split ``buf`` at the first occurrence of ``tag``.

    Returns ``(data, tag, rest)``: the bytes before the tag, the tag itself
    and whatever follows it. Raises NoMatch if the tag does not occur.
    """
    data = bytes(buf)
    needle = bytes(tag)
    index = data.find(needle)
    if index < 0:
        raise NoMatch(f"{needle!r} not found")
    end = index + len(needle)
    return data[:index], data[index:end], data[end:]


def trim_ascii_whitespace(data: bytes) -> bytes:
    """Strip ASCII whitespace from both ends."""
    return bytes(data).strip(_ASCII_WHITESPACE)


def trim_start_ascii_space(data: bytes) -> bytes:
    """Strip leading space characters only."""
    return bytes(data).lstrip(b" ")