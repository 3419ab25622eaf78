"""
asyncio bridge.

Turns coroutine functions into unit operations and lets coroutines await
a combinator's Result.
"""

from __future__ import annotations
from typing import TypeVar, Callable, Awaitable, Any
import asyncio

from .result import Failure, Result, Success

T = TypeVar("T")

# Strong references to tasks started by from_coroutine until they finish.
_tasks: set[asyncio.Task[Any]] = set()


def _outcome(fut: Any) -> Result[Any, BaseException]:
    if fut.cancelled():
        return Failure(asyncio.CancelledError())
    error = fut.exception()
    if error is not None:
        return Failure(error)
    return Success(fut.result())


def from_coroutine(
    func: Callable[..., Awaitable[T]],
    *,
    loop: asyncio.AbstractEventLoop | None = None,
) -> Callable[..., None]:
    """
    Adapt a coroutine function into a unit operation.

    The engine's last positional argument is the completion callback; any
    before it (the waterfall argument) are passed to ``func``. A returned
    value is reported as Success, a raised exception as Failure.

    Args:
        func: Coroutine function to run.
        loop: Loop to submit to from any thread. If None, the coroutine is
              scheduled on the running loop, so the operation must be
              started from that loop's thread.

    Example:
        async def fetch(url: str) -> bytes: ...

        result = await run(parallel, [from_coroutine(partial(fetch, u)) for u in urls])
    """
    def operation(*args: Any) -> None:
        *call_args, done = args
        if loop is None:
            running = asyncio.get_running_loop()
            task = running.create_task(func(*call_args))
            _tasks.add(task)
            task.add_done_callback(_tasks.discard)
            task.add_done_callback(lambda t: done(_outcome(t)))
        else:
            future = asyncio.run_coroutine_threadsafe(func(*call_args), loop)
            future.add_done_callback(lambda f: done(_outcome(f)))

    return operation


def _resolve(future: asyncio.Future[Result[Any, Any]], result: Result[Any, Any]) -> None:
    if not future.done():
        future.set_result(result)


async def run(start: Callable[..., None], *args: Any, **kwargs: Any) -> Result[Any, Any]:
    """
    Invoke ``start`` with a trailing completion callback and await its Result.

    The completion may be invoked from any thread.

    Example:
        result = await run(series, operations)
        result = await run(waterfall, operations, initial="0")
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[Result[Any, Any]] = loop.create_future()

    def completion(result: Result[Any, Any]) -> None:
        loop.call_soon_threadsafe(_resolve, future, result)

    start(*args, completion, **kwargs)
    return await future
