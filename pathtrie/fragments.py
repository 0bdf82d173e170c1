"""Byte-string helpers shared by the matching engine."""

from __future__ import annotations

from pathtrie.errors import InvalidArgumentError

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def as_key(key: str | bytes, *, allow_empty: bool = False) -> bytes:
    """Coerce *key* to the byte string the tree matches on."""
    if isinstance(key, str):
        data = key.encode(_ENCODING, _ERRORS)
    elif isinstance(key, (bytes, bytearray, memoryview)):
        data = bytes(key)
    else:
        raise InvalidArgumentError(f"key must be str or bytes, not {type(key).__name__}")
    if not data and not allow_empty:
        raise InvalidArgumentError("key must not be empty")
    return data


def as_text(data: bytes) -> str:
    return data.decode(_ENCODING, _ERRORS)


def as_delimiter(delimiter: str | bytes | int) -> int:
    """Return the delimiter as a single byte value."""
    if isinstance(delimiter, int) and not isinstance(delimiter, bool):
        if 0 <= delimiter <= 255:
            return delimiter
        raise InvalidArgumentError(f"delimiter byte out of range: {delimiter}")
    if isinstance(delimiter, (str, bytes)):
        data = as_key(delimiter, allow_empty=True)
        if len(data) == 1:
            return data[0]
    raise InvalidArgumentError(f"delimiter must be a single byte, got {delimiter!r}")


def common_prefix_length(a: bytes, b: bytes) -> int:
    """Number of leading bytes *a* and *b* share."""
    limit = min(len(a), len(b))
    i = 0
    while i < limit and a[i] == b[i]:
        i += 1
    return i


def substring(data: bytes, begin: int, length: int) -> bytes:
    """Return ``data[begin:begin + length]``, rejecting out-of-range requests."""
    if not data or begin < 0 or length < 0 or begin + length > len(data):
        raise InvalidArgumentError(
            f"substring({begin}, {length}) out of range for {len(data)}-byte fragment"
        )
    return data[begin:begin + length]
