"""
Sequential combinators: series, whilst and waterfall.

Only one unit operation is in flight per invocation. Chains are driven by a
trampoline so that units reporting synchronously do not nest call frames:
a synchronous report hands control back to the running loop, a later report
resumes the loop on the reporting thread.
"""

from __future__ import annotations
from typing import TypeVar, Generic, Sequence, Callable, Any
import logging
import threading

from ._completion import Deliver, complete
from .errors import CompletionReusedError
from .result import (
    ArgumentOperation,
    Completion,
    Failure,
    Result,
    Success,
    UnitOperation,
)

T = TypeVar("T")
U = TypeVar("U")

log = logging.getLogger(__name__)


class _Chain(Generic[T, U]):
    """
    Trampolined continuation chain.

    Subclasses implement ``_next(result)``, which receives the previous
    unit's result (None before the first unit) and either starts one unit
    with ``self._reporter()`` or calls ``self._finish()``.
    """

    name = "chain"

    def __init__(self, completion: Completion[Any, U], deliver: Deliver | None):
        self._completion = completion
        self._deliver = deliver
        self._lock = threading.Lock()
        self._running = False
        self._pending = False
        self._last: Result[T, U] | None = None
        self._steps = 0

    def start(self) -> None:
        self._resume()

    def _resume(self) -> None:
        with self._lock:
            self._pending = True
            if self._running:
                return
            self._running = True
        self._drain()

    def _drain(self) -> None:
        while True:
            with self._lock:
                if not self._pending:
                    self._running = False
                    return
                self._pending = False
                result, self._last = self._last, None
            try:
                self._next(result)
            except BaseException:
                # The unit may have reported before raising.
                with self._lock:
                    self._running = self._pending
                if self._running:
                    self._drain()
                raise

    def _reporter(self) -> Completion[T, U]:
        step = self._steps
        self._steps += 1
        reported = False

        def report(result: Result[T, U]) -> None:
            nonlocal reported
            with self._lock:
                if reported:
                    raise CompletionReusedError(self.name, step)
                reported = True
                self._last = result
            self._resume()

        return report

    def _finish(self, result: Result[Any, U]) -> None:
        complete(self.name, self._completion, result, self._deliver)

    def _next(self, result: Result[T, U] | None) -> None:
        raise NotImplementedError


class _Series(_Chain[T, U]):
    name = "series"

    def __init__(self, operations: Sequence[UnitOperation[T, U]], completion, deliver):
        super().__init__(completion, deliver)
        self._operations = operations
        self._values: list[T] = []
        self._index = 0

    def _next(self, result):
        if isinstance(result, Failure):
            self._finish(result)
            return
        if result is not None:
            self._values.append(result.value)

        if self._index == len(self._operations):
            self._finish(Success(self._values))
            return
        operation = self._operations[self._index]
        self._index += 1
        operation(self._reporter())


class _Whilst(_Chain[T, U]):
    name = "whilst"

    def __init__(self, predicate: Callable[[], bool], operation: UnitOperation[T, U], completion, deliver):
        super().__init__(completion, deliver)
        self._predicate = predicate
        self._operation = operation
        self._values: list[T] = []

    def _next(self, result):
        if isinstance(result, Failure):
            self._finish(result)
            return
        if result is not None:
            self._values.append(result.value)

        if not self._predicate():
            self._finish(Success(self._values))
            return
        self._operation(self._reporter())


class _Waterfall(_Chain[T, U]):
    name = "waterfall"

    def __init__(self, operations: Sequence[ArgumentOperation[T, U]], initial: Any, completion, deliver):
        super().__init__(completion, deliver)
        self._operations = operations
        self._argument = initial
        self._index = 0

    def _next(self, result):
        if isinstance(result, Failure):
            self._finish(result)
            return
        if result is not None:
            self._argument = result.value

        if self._index == len(self._operations):
            self._finish(Success(self._argument))
            return
        operation = self._operations[self._index]
        self._index += 1
        operation(self._argument, self._reporter())


def series(
    operations: Sequence[UnitOperation[T, U]],
    completion: Completion[list[T], U],
    *,
    deliver: Deliver | None = None,
) -> None:
    """
    Run unit operations one after another, collecting values in order.

    Operation i+1 starts only after operation i succeeds. The first failure
    is reported immediately and no further operation is started.
    """
    operations = list(operations)
    log.debug("series starting %d operations", len(operations))
    _Series(operations, completion, deliver).start()


def whilst(
    predicate: Callable[[], bool],
    operation: UnitOperation[T, U],
    completion: Completion[list[T], U],
    *,
    deliver: Deliver | None = None,
) -> None:
    """
    Run ``operation`` repeatedly while ``predicate()`` holds.

    The predicate is evaluated synchronously before every run and may
    inspect or mutate caller state. Values are collected in order; the
    first failure stops the loop.

    Example:
        count = 0

        def bump(done):
            nonlocal count
            count += 1
            done(Success(count))

        whilst(lambda: count < 3, bump, print)  # Success(value=[1, 2, 3])
    """
    log.debug("whilst starting")
    _Whilst(predicate, operation, completion, deliver).start()


def waterfall(
    operations: Sequence[ArgumentOperation[T, U]],
    completion: Completion[T, U],
    *,
    initial: Any = None,
    deliver: Deliver | None = None,
) -> None:
    """
    Run operations in sequence, piping each value into the next operation.

    Each operation is called as ``operation(argument, done)``. The first
    receives ``initial``; the completion receives the last value, or
    ``initial`` when there are no operations.
    """
    operations = list(operations)
    log.debug("waterfall starting %d operations", len(operations))
    _Waterfall(operations, initial, completion, deliver).start()
