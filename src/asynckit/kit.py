"""Combinator engine bound to a completion delivery policy."""

from __future__ import annotations
from typing import TypeVar, Generic, Sequence, Callable, Any

from ._completion import Deliver
from .parallel import parallel
from .result import ArgumentOperation, Completion, UnitOperation
from .sequential import series, waterfall, whilst

T = TypeVar("T")
U = TypeVar("U")


class AsyncKit(Generic[T, U]):
    """
    Combinators over success type T and failure type U.

    Holds no per-invocation state; every call is independent. Use it to
    deliver all completions on one execution context.

    Example:
        loop = asyncio.get_running_loop()
        kit: AsyncKit[str, Exception] = AsyncKit(deliver=loop.call_soon_threadsafe)
        kit.parallel([fetch_a, fetch_b], on_done)  # on_done runs on the loop
    """

    def __init__(self, deliver: Deliver | None = None):
        """
        Args:
            deliver: Callable receiving a zero-argument thunk that invokes
                     the completion callback. None runs completions on the
                     thread that produced the final report.
        """
        self._deliver = deliver

    @property
    def deliver(self) -> Deliver | None:
        return self._deliver

    def parallel(self, operations: Sequence[UnitOperation[T, U]], completion: Completion[list[T], U]) -> None:
        parallel(operations, completion, deliver=self._deliver)

    def series(self, operations: Sequence[UnitOperation[T, U]], completion: Completion[list[T], U]) -> None:
        series(operations, completion, deliver=self._deliver)

    def whilst(
        self,
        predicate: Callable[[], bool],
        operation: UnitOperation[T, U],
        completion: Completion[list[T], U],
    ) -> None:
        whilst(predicate, operation, completion, deliver=self._deliver)

    def waterfall(
        self,
        operations: Sequence[ArgumentOperation[T, U]],
        completion: Completion[T, U],
        *,
        initial: Any = None,
    ) -> None:
        waterfall(operations, completion, initial=initial, deliver=self._deliver)
