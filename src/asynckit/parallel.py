"""
Parallel fan-out with an index-ordered join.

Every unit operation is started immediately. Reports may arrive from any
thread, so the join state is guarded by a lock.
"""

from __future__ import annotations
from typing import TypeVar, Generic, Sequence, Any
import logging
import threading

from ._completion import Deliver, complete
from .errors import CompletionReusedError
from .result import Completion, Failure, Result, Success, UnitOperation

T = TypeVar("T")
U = TypeVar("U")

log = logging.getLogger(__name__)

_EMPTY: Any = object()


class _Join(Generic[T, U]):
    """
    Join state for one parallel invocation.

    The lock makes the slot write and counter decrement one step, and makes
    the failed check-and-set pick a single winner, so the completion callback
    runs exactly once even if several units fail at the same time.
    """

    def __init__(self, count: int, completion: Completion[list[T], U], deliver: Deliver | None):
        self._slots: list[Any] = [_EMPTY] * count
        self._reported = [False] * count
        self._outstanding = count
        self._failed = False
        self._lock = threading.Lock()
        self._completion = completion
        self._deliver = deliver

    def reporter(self, index: int) -> Completion[T, U]:
        def report(result: Result[T, U]) -> None:
            self._report(index, result)
        return report

    def _report(self, index: int, result: Result[T, U]) -> None:
        with self._lock:
            if self._reported[index]:
                raise CompletionReusedError("parallel", index)
            self._reported[index] = True

            if self._failed:
                log.debug("parallel[%d] reported after failure, discarded", index)
                return

            if isinstance(result, Failure):
                self._failed = True
                outcome: Result[list[T], U] = result
            else:
                self._slots[index] = result.value
                self._outstanding -= 1
                if self._outstanding:
                    return
                outcome = Success(list(self._slots))

        complete("parallel", self._completion, outcome, self._deliver)


def parallel(
    operations: Sequence[UnitOperation[T, U]],
    completion: Completion[list[T], U],
    *,
    deliver: Deliver | None = None,
) -> None:
    """
    Run all unit operations concurrently and join their values.

    The completion receives Success with values in input order, or the first
    Failure observed. Units still running after a failure are not cancelled;
    their reports are discarded.

    Args:
        operations: Unit operations, each invoked exactly once.
        completion: Invoked exactly once with the aggregate result.
        deliver: Optional policy that runs the completion on a chosen context.

    Example:
        parallel([fetch_a, fetch_b], lambda result: print(result))
    """
    operations = list(operations)
    log.debug("parallel starting %d operations", len(operations))
    if not operations:
        complete("parallel", completion, Success([]), deliver)
        return

    join: _Join[T, U] = _Join(len(operations), completion, deliver)
    for index, operation in enumerate(operations):
        operation(join.reporter(index))
