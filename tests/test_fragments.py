import pytest

from pathtrie.errors import InvalidArgumentError
from pathtrie.fragments import (
    as_delimiter,
    as_key,
    as_text,
    common_prefix_length,
    substring,
)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (b"abc", b"abd", 2),
        (b"abc", b"abc", 3),
        (b"abc", b"ab", 2),
        (b"abc", b"xyz", 0),
        (b"", b"abc", 0),
        (b"abc", b"", 0),
    ],
)
def test_common_prefix_length(a, b, expected):
    assert common_prefix_length(a, b) == expected


def test_substring_extracts_range():
    assert substring(b"usr/bin", 4, 3) == b"bin"
    assert substring(b"usr/bin", 0, 0) == b""


@pytest.mark.parametrize("data, begin, length", [(b"", 0, 0), (b"abc", 2, 5), (b"abc", -1, 1)])
def test_substring_rejects_out_of_range(data, begin, length):
    with pytest.raises(InvalidArgumentError):
        substring(data, begin, length)


def test_as_key_encodes_text_and_keeps_bytes():
    assert as_key("a/é") == "a/é".encode("utf-8")
    assert as_key(b"\xff/a") == b"\xff/a"
    assert as_text(as_key(b"\xff/a")) == "\udcff/a"
    assert as_key(as_text(b"\xff/a")) == b"\xff/a"


@pytest.mark.parametrize("bad", ["", b"", None, 42, ["a"]])
def test_as_key_rejects_invalid(bad):
    with pytest.raises(InvalidArgumentError):
        as_key(bad)


def test_as_key_allows_empty_prefix():
    assert as_key("", allow_empty=True) == b""


def test_as_delimiter():
    assert as_delimiter("/") == ord("/")
    assert as_delimiter(b":") == ord(":")
    assert as_delimiter(46) == ord(".")
    for bad in ("", "ab", 256, True, None):
        with pytest.raises(InvalidArgumentError):
            as_delimiter(bad)
