"""
asynckit: Callback-based async control-flow combinators.

Composes unit operations (callables that report one Success or Failure
through a completion callback) into a single aggregate operation with
exactly one completion.

Usage:
    from asynckit import parallel, series, whilst, waterfall, Success

    # Fan out, join values in input order
    parallel([fetch_a, fetch_b], on_done)

    # One after another, stop at the first failure
    series([step_1, step_2], on_done)

    # Pipe each value into the next operation
    waterfall([parse, validate], on_done, initial=raw)

    # Await from asyncio
    result = await aio.run(series, [aio.from_coroutine(job) for job in jobs])
"""

from . import aio
from .errors import AsyncKitError, CompletionReusedError, UnwrapError
from .kit import AsyncKit
from .parallel import parallel
from .result import (
    ArgumentOperation,
    Completion,
    Failure,
    Result,
    Success,
    UnitOperation,
    from_callable,
)
from .sequential import series, whilst, waterfall

__version__ = "0.1.0"
__all__ = [
    # Combinators
    "parallel",
    "series",
    "whilst",
    "waterfall",
    "AsyncKit",
    # Results
    "Result",
    "Success",
    "Failure",
    "Completion",
    "UnitOperation",
    "ArgumentOperation",
    "from_callable",
    # Errors
    "AsyncKitError",
    "CompletionReusedError",
    "UnwrapError",
    # asyncio bridge
    "aio",
]
