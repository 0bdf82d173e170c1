"""Growable result sequence for prefix enumeration."""

from __future__ import annotations

from typing import Iterable, SupportsIndex

from pathtrie.errors import InvalidArgumentError, OutOfCapacityError


class ResultSink(list):
    """A ``list`` of result strings with optional, explicit capacity limits.

    With no limits the sink simply grows.  When ``max_results`` or
    ``max_result_bytes`` is set, any change that would exceed it raises
    :class:`OutOfCapacityError` and leaves the sink as it was.

    >>> sink = ResultSink(max_results=1)
    >>> sink.append("a/b")
    >>> sink.full
    True
    """

    def __init__(
        self,
        iterable: Iterable[str] = (),
        *,
        max_results: int | None = None,
        max_result_bytes: int | None = None,
    ) -> None:
        for name, limit in (("max_results", max_results), ("max_result_bytes", max_result_bytes)):
            if limit is not None and limit < 0:
                raise InvalidArgumentError(f"{name} must be non-negative, got {limit}")
        super().__init__()
        self.max_results = max_results
        self.max_result_bytes = max_result_bytes
        self.extend(iterable)

    @property
    def full(self) -> bool:
        return self.max_results is not None and len(self) >= self.max_results

    def append(self, result: str) -> None:
        self._check((result,), len(self) + 1)
        super().append(result)

    def extend(self, results: Iterable[str]) -> None:
        for result in results:
            self.append(result)

    def insert(self, index: SupportsIndex, result: str) -> None:
        self._check((result,), len(self) + 1)
        super().insert(index, result)

    def __iadd__(self, results: Iterable[str]) -> ResultSink:
        self.extend(results)
        return self

    def __imul__(self, times: SupportsIndex) -> ResultSink:
        times = max(int(times), 0)
        self._check(list(self) * max(times - 1, 0), len(self) * times)
        return super().__imul__(times)

    def __setitem__(self, index, value) -> None:
        if isinstance(index, slice):
            value = list(value)
            trial = list(self)
            trial[index] = value
            self._check(value, len(trial))
        else:
            self._check((value,), len(self))
        super().__setitem__(index, value)

    def _check(self, results: Iterable[str], total: int) -> None:
        """Raise if holding *total* results, *results* among them, is over capacity."""
        if self.max_results is not None and total > self.max_results:
            raise OutOfCapacityError(
                f"result sink holds at most {self.max_results} results",
                capacity=self.max_results,
                attempted=total,
            )
        if self.max_result_bytes is None:
            return
        for result in results:
            size = len(result.encode("utf-8", "surrogateescape"))
            if size > self.max_result_bytes:
                raise OutOfCapacityError(
                    f"result of {size} bytes exceeds the {self.max_result_bytes}-byte limit",
                    capacity=self.max_result_bytes,
                    attempted=size,
                )
