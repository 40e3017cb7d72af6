"""Small formatting helpers."""

from __future__ import annotations

_ESCAPES = {
    "\0": "\\0",
    "\t": "\\t",
    "\r": "\\r",
    "\n": "\\n",
    "\\": "\\\\",
    '"': '\\"',
}


def _escape(char: str) -> str:
    if char in _ESCAPES:
        return _ESCAPES[char]
    if char.isprintable():
        return char
    return f"\\u{{{ord(char):x}}}"


def lossy_str(data: bytes) -> str:
    """Format bytes as a quoted string when valid UTF-8, else as a byte list."""
    raw = bytes(data)
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return "[" + ", ".join(str(b) for b in raw) + "]"
    return '"' + "".join(_escape(c) for c in text) + '"'