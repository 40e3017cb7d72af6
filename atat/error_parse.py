"""Parser for error replies: ERROR, +CME/+CMS ERROR, connection failures."""

from __future__ import annotations

import re
from typing import Callable

from atat.errors import CmeReport, CmsError, ConnectionErrorKind, ErrorKind, InternalError
from atat.results import DigestResult
from atat.scan import Incomplete, NoMatch, take_until_including, trim_ascii_whitespace

_MULTISPACE = b" \t\r\n"
_DIGITS = re.compile(rb"[0-9]+")
_U16_MAX = 0xFFFF

_CME_TOKEN = b"\r\n+CME ERROR:"
_CMS_TOKEN = b"\r\n+CMS ERROR:"
_MODEM_TOKEN = b"\r\nMODEM ERROR:"

_Branch = Callable[[bytes], "tuple[DigestResult, int]"]


def _streaming_tag(buf: bytes, tag: bytes) -> None:
    shared = min(len(buf), len(tag))
    if buf[:shared] != tag[:shared]:
        raise NoMatch(f"expected {tag!r}")
    if len(buf) < len(tag):
        raise Incomplete(f"waiting for {tag!r}")


def _line_ending(buf: bytes) -> int:
    if buf.startswith(b"\n"):
        return 1
    if buf.startswith(b"\r\n"):
        return 2
    raise NoMatch("expected a line ending")


def _numeric_error(buf: bytes, token: bytes) -> tuple[int, int]:
    """Match ``{token}\\s*(\\d+)\\r\\n``; return the code and bytes consumed."""
    data, tag, rest = take_until_including(buf, token)
    stripped = rest.lstrip(_MULTISPACE)
    found = _DIGITS.match(stripped)
    if found is None:
        raise NoMatch("expected an error code")
    digits = found.group()
    code = int(digits)
    if code > _U16_MAX:
        raise NoMatch("error code out of range")
    ending = _line_ending(stripped[len(digits):])
    consumed = len(data) + len(tag) + (len(rest) - len(stripped)) + len(digits) + ending
    return code, consumed


def _string_error(buf: bytes, token: bytes) -> tuple[bytes, int]:
    """Match ``{token}\\s*([^\\r\\n]+)\\r\\n``; return the message and bytes consumed."""
    data, tag, rest = take_until_including(buf, token)
    if not rest:
        raise Incomplete("waiting for the error message")
    if rest.startswith(b"\r"):
        raise NoMatch("empty error message")
    message, end, _ = take_until_including(rest, b"\r\n")
    return trim_ascii_whitespace(message + end), len(data) + len(tag) + len(message) + len(end)


def _failure(kind: ErrorKind, detail=None) -> DigestResult:
    return DigestResult.error(InternalError(kind, detail))


def _cme_numeric(buf: bytes) -> tuple[DigestResult, int]:
    code, consumed = _numeric_error(buf, _CME_TOKEN)
    return _failure(ErrorKind.CME_ERROR, CmeReport(code=code)), consumed


def _cms_numeric(buf: bytes) -> tuple[DigestResult, int]:
    code, consumed = _numeric_error(buf, _CMS_TOKEN)
    return _failure(ErrorKind.CMS_ERROR, CmsError.from_code(code)), consumed


def _cme_message(buf: bytes) -> tuple[DigestResult, int]:
    message, consumed = _string_error(buf, _CME_TOKEN)
    report = CmeReport(message=message) if message else CmeReport()
    return _failure(ErrorKind.CME_ERROR, report), consumed


def _cms_message(buf: bytes) -> tuple[DigestResult, int]:
    message, consumed = _string_error(buf, _CMS_TOKEN)
    return _failure(ErrorKind.CMS_ERROR, CmsError.from_msg(message)), consumed


def _modem_numeric(buf: bytes) -> tuple[DigestResult, int]:
    _, consumed = _numeric_error(buf, _MODEM_TOKEN)
    return _failure(ErrorKind.CME_ERROR, CmeReport()), consumed


def _generic(buf: bytes) -> tuple[DigestResult, int]:
    for tag in (b"\r\nERROR\r\n", b"\r\nCOMMAND NOT SUPPORT\r\n"):
        try:
            data, found, _ = take_until_including(buf, tag)
        except NoMatch:
            continue
        return _failure(ErrorKind.ERROR), len(data) + len(found)
    raise NoMatch("no generic error")


_CONNECTION_TAGS = (
    (b"\r\nNO CARRIER\r\n", ConnectionErrorKind.NO_CARRIER),
    (b"\r\nBUSY\r\n", ConnectionErrorKind.BUSY),
    (b"\r\nNO ANSWER\r\n", ConnectionErrorKind.NO_ANSWER),
    (b"\r\nNO DIALTONE\r\n", ConnectionErrorKind.NO_DIALTONE),
)


def _connection(buf: bytes) -> tuple[DigestResult, int]:
    for tag, kind in _CONNECTION_TAGS:
        try:
            data, found, _ = take_until_including(buf, tag)
        except NoMatch:
            continue
        return _failure(ErrorKind.CONNECTION_ERROR, kind), len(data) + len(found)
    raise NoMatch("no connection error")


def _not_available(buf: bytes) -> tuple[DigestResult, int]:
    # Some modems reply "NA" to report a not-available error.
    tag = b"\r\nNA\r\n"
    _streaming_tag(buf, tag)
    report = CmeReport(message=b"Operation not allowed")
    return _failure(ErrorKind.CME_ERROR, report), len(tag)


_BRANCHES: tuple[_Branch, ...] = (
    _cme_numeric,
    _cms_numeric,
    _cme_message,
    _cms_message,
    _modem_numeric,
    _generic,
    _connection,
    _not_available,
)


def error_response(buf: bytes) -> tuple[DigestResult, int]:
    """Match the first error reply form that fits the buffer.

    Returns ``(result, consumed)``. Raises Incomplete if a form may still
    match once more bytes arrive, and NoMatch if none can.
    """
    data = bytes(buf)
    for branch in _BRANCHES:
        try:
            return branch(data)
        except NoMatch:
            continue
    raise NoMatch("no error response")