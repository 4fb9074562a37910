"""Ordered, append-only collection of leaf Results for one validation run."""

from typing import Iterator

from vetter.types import Result


class ResultList:
    """Results in the order their leaves were evaluated.

    Entries are never removed or changed. When an ``||`` recovers from a
    failed left operand, the engine marks the failures recorded inside that
    ``||`` as superseded; they stay in the history but are no longer live.

    Usage:
        results = ResultList()
        results.append(Result(True, payload))
        results.last().success  # True
    """

    def __init__(self) -> None:
        self._results: list[Result] = []
        self._superseded: set[int] = set()

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[Result]:
        return iter(list(self._results))

    def append(self, result: Result) -> None:
        self._results.append(result)

    def last(self) -> Result | None:
        """The newest result, or None if nothing was recorded."""
        return self._results[-1] if self._results else None

    @property
    def passed(self) -> bool:
        """True if nothing was recorded or the newest result succeeded."""
        last = self.last()
        return last is None or last.success

    def supersede(self, start: int, stop: int) -> None:
        """Mark positions ``start`` to ``stop - 1`` as superseded."""
        if not 0 <= start <= stop <= len(self._results):
            raise IndexError(f"invalid span {start}:{stop} for {len(self)} results")
        self._superseded.update(range(start, stop))

    def is_superseded(self, index: int) -> bool:
        return index in self._superseded

    def count_failures(self) -> int:
        """Number of failed results in the history, superseded ones included."""
        return sum(1 for _ in self.iter_failures())

    def iter_failures(self) -> Iterator[Result]:
        """Every failed result in encounter order, superseded ones included."""
        return (r for r in self._results if not r.success)

    def iter_live_failures(self) -> Iterator[Result]:
        """Failed results that no later ``||`` success has superseded."""
        return (
            r
            for i, r in enumerate(self._results)
            if not r.success and not self.is_superseded(i)
        )
