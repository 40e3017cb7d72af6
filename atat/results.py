"""Outcome of digesting the incoming byte stream."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from atat.errors import InternalError

Value = Union[bytes, InternalError, int, None]


class DigestKind(Enum):
    """What a digest step recognised."""

    NONE = "none"
    URC = "urc"
    RESPONSE = "response"
    PROMPT = "prompt"


def _as_bytes(value: object, what: str) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"{what} must be bytes")
    return bytes(value)


@dataclass(frozen=True)
class DigestResult:
    """A URC line, a response (data or error), a prompt byte, or nothing."""

    kind: DigestKind
    value: Value = None

    def __post_init__(self) -> None:
        kind, value = self.kind, self.value
        if kind is DigestKind.NONE:
            if value is not None:
                raise TypeError("an empty result carries no value")
        elif kind is DigestKind.URC:
            object.__setattr__(self, "value", _as_bytes(value, "URC line"))
        elif kind is DigestKind.RESPONSE:
            if not isinstance(value, InternalError):
                object.__setattr__(self, "value", _as_bytes(value, "response data"))
        elif kind is DigestKind.PROMPT:
            if isinstance(value, (bytes, bytearray)):
                if len(value) != 1:
                    raise ValueError("a prompt is a single byte")
                value = value[0]
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError("prompt must be a byte")
            if not 0 <= value <= 0xFF:
                raise ValueError("prompt must be in range 0..255")
            object.__setattr__(self, "value", value)
        else:
            raise TypeError("kind must be a DigestKind")

    @classmethod
    def none(cls) -> DigestResult:
        return cls(DigestKind.NONE)

    @classmethod
    def urc(cls, line: bytes) -> DigestResult:
        return cls(DigestKind.URC, line)

    @classmethod
    def response(cls, data: bytes) -> DigestResult:
        """A successful response carrying its data."""
        return cls(DigestKind.RESPONSE, _as_bytes(data, "response data"))

    @classmethod
    def error(cls, internal: InternalError) -> DigestResult:
        """A response that reports an error."""
        if not isinstance(internal, InternalError):
            raise TypeError("error response requires an InternalError")
        return cls(DigestKind.RESPONSE, internal)

    @classmethod
    def prompt(cls, char: int | bytes) -> DigestResult:
        return cls(DigestKind.PROMPT, char)

    @property
    def is_error(self) -> bool:
        """True for a response that reports an error."""
        return self.kind is DigestKind.RESPONSE and isinstance(self.value, InternalError)