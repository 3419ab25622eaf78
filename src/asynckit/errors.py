"""Exception hierarchy for asynckit."""

from __future__ import annotations

from typing import Any


class AsyncKitError(Exception):
    """Base exception for all asynckit errors."""


class CompletionReusedError(AsyncKitError):
    """A unit operation invoked its completion callback more than once."""

    def __init__(self, combinator: str, index: int | None = None):
        where = f"{combinator}" if index is None else f"{combinator}[{index}]"
        super().__init__(f"Completion callback of {where} invoked more than once")
        self.combinator = combinator
        self.index = index


class UnwrapError(AsyncKitError):
    """Raised when unwrapping a Failure whose error is not an exception."""

    def __init__(self, error: Any):
        super().__init__(f"Called unwrap() on Failure({error!r})")
        self.error = error
