"""Upper bounds on the serialised length of AT command arguments."""

from __future__ import annotations

_SCALAR_LENGTHS = {
    "char": 1,
    "bool": 5,
    "isize": 19,
    "usize": 20,
    "u8": 3,
    "u16": 5,
    "u32": 10,
    "u64": 20,
    "u128": 39,
    "i8": 4,
    "i16": 6,
    "i32": 11,
    "i64": 20,
    "i128": 40,
    "f32": 42,
    "f64": 312,
}

# "0x" followed by colon-separated hex digits: (2 + N/2 - 1) * 2 bytes.
_HEX_STR_LENGTHS = {
    "u8": 10,
    "u16": 18,
    "u32": 30,
    "u64": 66,
    "u128": 130,
}


def _check_count(value: int, what: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{what} must be an integer")
    if value < 0:
        raise ValueError(f"{what} must not be negative")
    return value


def scalar_len(kind: str) -> int:
    """Maximum length of a scalar of the given kind, e.g. ``"u8"`` or ``"f64"``."""
    try:
        return _SCALAR_LENGTHS[kind]
    except KeyError:
        raise ValueError(f"unknown scalar kind: {kind!r}") from None


def hex_str_len(kind: str) -> int:
    """Maximum length of an unsigned integer written as a hex string."""
    try:
        return _HEX_STR_LENGTHS[kind]
    except KeyError:
        raise ValueError(f"unknown hex string kind: {kind!r}") from None


def hex_array_len(size: int) -> int:
    """Maximum length of a byte array of ``size`` bytes written as a hex string."""
    size = _check_count(size, "size")
    return (2 + size * 4 - 1) * 2


def string_len(capacity: int) -> int:
    """Maximum length of a quoted string holding up to ``capacity`` bytes."""
    return 1 + _check_count(capacity, "capacity") + 1


def optional_len(inner_len: int) -> int:
    """Maximum length of an optional value: that of the value itself."""
    return _check_count(inner_len, "inner length")


def vec_len(item_len: int, capacity: int) -> int:
    """Maximum length of a vector of up to ``capacity`` items."""
    return _check_count(capacity, "capacity") * _check_count(item_len, "item length")