"""Exception hierarchy for the radix tree and its service."""

from __future__ import annotations


class PatriciaError(Exception):
    """Base class for every error raised by :mod:`pathtrie`."""


class InvalidArgumentError(PatriciaError, ValueError):
    """A key, prefix, delimiter or tree handle was rejected before any mutation."""


class OutOfCapacityError(PatriciaError):
    """An enumeration produced more (or longer) results than its sink accepts."""

    def __init__(self, message: str, *, capacity: int, attempted: int) -> None:
        super().__init__(message)
        self.capacity = capacity
        self.attempted = attempted
