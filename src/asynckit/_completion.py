"""Completion delivery shared by the combinators."""

from __future__ import annotations
from typing import Callable
from functools import partial
import logging

from .result import Completion, Result, Success

log = logging.getLogger(__name__)

# Runs a zero-argument thunk on some execution context,
# e.g. ``loop.call_soon_threadsafe`` or ``executor.submit``.
Deliver = Callable[[Callable[[], object]], object]


def complete(
    name: str,
    completion: Completion,
    result: Result,
    deliver: Deliver | None = None,
) -> None:
    """Invoke the completion callback, through the delivery policy if one is set."""
    log.debug("%s completed with %s", name, "success" if isinstance(result, Success) else "failure")
    if deliver is None:
        completion(result)
    else:
        deliver(partial(completion, result))
