"""Error types reported by AT devices and by the AT client."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Union

CUSTOM_MESSAGE_LIMIT = 64


class CmsError(IntEnum):
    """Message service errors, as defined in 3GPP TS 27.005 section 3.2.5."""

    ME_FAILURE = 300
    SMS_SERVICE_RESERVED = 301
    NOT_ALLOWED = 302
    NOT_SUPPORTED = 303
    INVALID_PDU_PARAMETER = 304
    INVALID_TEXT_PARAMETER = 305
    SIM_NOT_INSERTED = 310
    SIM_PIN = 311
    PH_SIM_PIN = 312
    SIM_FAILURE = 313
    SIM_BUSY = 314
    SIM_WRONG = 315
    SIM_PUK = 316
    SIM_PIN2 = 317
    SIM_PUK2 = 318
    MEMORY_FAILURE = 320
    INVALID_INDEX = 321
    MEMORY_FULL = 322
    SMSC_ADDRESS_UNKNOWN = 330
    NO_NETWORK = 331
    NETWORK_TIMEOUT = 332
    NO_CNMA_ACK_EXPECTED = 340
    UNKNOWN = 500

    @classmethod
    def from_code(cls, code: int) -> CmsError:
        """Map a numeric error code; unrecognised codes become UNKNOWN."""
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN

    @classmethod
    def from_msg(cls, msg: bytes) -> CmsError:
        """Map a verbose error message; unrecognised messages become UNKNOWN."""
        return _CMS_FROM_MSG.get(bytes(msg), cls.UNKNOWN)

    def __str__(self) -> str:
        return _CMS_TEXT[self]


_CMS_TEXT = {
    CmsError.ME_FAILURE: "ME failure",
    CmsError.SMS_SERVICE_RESERVED: "SMS service reserved",
    CmsError.NOT_ALLOWED: "Operation not allowed",
    CmsError.NOT_SUPPORTED: "Operation not supported",
    CmsError.INVALID_PDU_PARAMETER: "Invalid PDU mode parameter",
    CmsError.INVALID_TEXT_PARAMETER: "Invalid text mode parameter",
    CmsError.SIM_NOT_INSERTED: "SIM not inserted",
    CmsError.SIM_PIN: "SIM PIN required",
    CmsError.PH_SIM_PIN: "PH-SIM PIN required",
    CmsError.SIM_FAILURE: "SIM failure",
    CmsError.SIM_BUSY: "SIM busy",
    CmsError.SIM_WRONG: "SIM wrong",
    CmsError.SIM_PUK: "SIM PUK required",
    CmsError.SIM_PIN2: "SIM PIN2 required",
    CmsError.SIM_PUK2: "SIM PUK2 required",
    CmsError.MEMORY_FAILURE: "Memory failure",
    CmsError.INVALID_INDEX: "Invalid index",
    CmsError.MEMORY_FULL: "Memory full",
    CmsError.SMSC_ADDRESS_UNKNOWN: "SMSC address unknown",
    CmsError.NO_NETWORK: "No network",
    CmsError.NETWORK_TIMEOUT: "Network timeout",
    CmsError.NO_CNMA_ACK_EXPECTED: "No CNMA acknowledgement expected",
    CmsError.UNKNOWN: "Unknown",
}

# Only these messages are recognised when parsing verbose replies.
_CMS_FROM_MSG = {
    _CMS_TEXT[member].encode("ascii"): member
    for member in (
        CmsError.ME_FAILURE,
        CmsError.SMS_SERVICE_RESERVED,
        CmsError.NOT_ALLOWED,
        CmsError.NOT_SUPPORTED,
        CmsError.INVALID_PDU_PARAMETER,
        CmsError.INVALID_TEXT_PARAMETER,
        CmsError.SIM_NOT_INSERTED,
        CmsError.SIM_PIN,
        CmsError.SIM_FAILURE,
        CmsError.SIM_BUSY,
        CmsError.SIM_WRONG,
        CmsError.SIM_PUK,
        CmsError.MEMORY_FAILURE,
        CmsError.INVALID_INDEX,
        CmsError.MEMORY_FULL,
        CmsError.SMSC_ADDRESS_UNKNOWN,
        CmsError.NO_NETWORK,
        CmsError.NETWORK_TIMEOUT,
    )
}


class ConnectionErrorKind(IntEnum):
    """Result codes that end a connection attempt."""

    UNKNOWN = 0
    NO_CARRIER = 1
    NO_DIALTONE = 2
    BUSY = 3
    NO_ANSWER = 4

    @classmethod
    def from_code(cls, code: int) -> ConnectionErrorKind:
        """Map a numeric code; unrecognised codes become UNKNOWN."""
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN

    def __str__(self) -> str:
        return _CONNECTION_TEXT[self]


_CONNECTION_TEXT = {
    ConnectionErrorKind.UNKNOWN: "Unknown",
    ConnectionErrorKind.NO_CARRIER: "No carrier",
    ConnectionErrorKind.NO_DIALTONE: "No dialtone",
    ConnectionErrorKind.BUSY: "Busy",
    ConnectionErrorKind.NO_ANSWER: "No answer",
}


@dataclass(frozen=True)
class CmeReport:
    """An equipment (+CME ERROR) report: a numeric code, a message, or neither."""

    code: int | None = None
    message: bytes | None = None

    def __post_init__(self) -> None:
        if self.code is not None and self.message is not None:
            raise ValueError("a CME report holds either a code or a message")
        if self.message is not None and not isinstance(self.message, (bytes, bytearray)):
            raise TypeError("CME message must be bytes")
        if self.message is not None:
            object.__setattr__(self, "message", bytes(self.message))

    def __str__(self) -> str:
        if self.code is not None:
            return f"CME error {self.code}"
        if self.message:
            return self.message.decode("utf-8", errors="replace")
        return "Unknown"


class ErrorKind(Enum):
    """Categories of failure shared by internal and public errors."""

    READ = "read"
    WRITE = "write"
    TIMEOUT = "timeout"
    INVALID_RESPONSE = "invalid_response"
    ABORTED = "aborted"
    PARSE = "parse"
    ERROR = "error"
    CME_ERROR = "cme_error"
    CMS_ERROR = "cms_error"
    CONNECTION_ERROR = "connection_error"
    CUSTOM = "custom"


Detail = Union[CmeReport, CmsError, ConnectionErrorKind, bytes, None]

_DETAIL_TYPES = {
    ErrorKind.CME_ERROR: CmeReport,
    ErrorKind.CMS_ERROR: CmsError,
    ErrorKind.CONNECTION_ERROR: ConnectionErrorKind,
    ErrorKind.CUSTOM: bytes,
}


def _check_detail(kind: ErrorKind, detail: Detail, optional_custom: bool) -> Detail:
    expected = _DETAIL_TYPES.get(kind)
    if expected is None:
        if detail is not None:
            raise TypeError(f"{kind.name} carries no detail")
        return None
    if expected is bytes:
        if detail is None and optional_custom:
            return None
        if not isinstance(detail, (bytes, bytearray, memoryview)):
            raise TypeError(f"{kind.name} requires bytes")
        return bytes(detail)
    if not isinstance(detail, expected):
        raise TypeError(f"{kind.name} requires {expected.__name__}")
    return detail


@dataclass(frozen=True)
class InternalError:
    """An error reply as recognised in the incoming byte stream."""

    kind: ErrorKind
    detail: Detail = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "detail", _check_detail(self.kind, self.detail, False))


class AtError(Exception):
    """Error raised to users of the AT client."""

    def __init__(self, kind: ErrorKind, detail: Detail = None) -> None:
        detail = _check_detail(kind, detail, True)
        if isinstance(detail, bytes):
            detail = detail[:CUSTOM_MESSAGE_LIMIT]
        super().__init__(kind, detail)
        self.kind = kind
        self.detail = detail

    @classmethod
    def from_internal(cls, internal: InternalError) -> AtError:
        """Build the public error for an internal one."""
        return cls(internal.kind, internal.detail)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AtError):
            return NotImplemented
        return (self.kind, self.detail) == (other.kind, other.detail)

    def __hash__(self) -> int:
        return hash((self.kind, self.detail))

    def __repr__(self) -> str:
        return f"AtError({self.kind!r}, {self.detail!r})"

    def __str__(self) -> str:
        if self.detail is None:
            return self.kind.name
        if isinstance(self.detail, bytes):
            return f"{self.kind.name}: {self.detail.decode('utf-8', errors='replace')}"
        return f"{self.kind.name}: {self.detail}"