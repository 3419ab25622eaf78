"""
Result type shared by all combinators.

A unit operation reports exactly one of two outcomes through its completion
callback: ``Success(value)`` or ``Failure(error)``. The error value is opaque
to the engine and is passed through unchanged.
"""

from __future__ import annotations
from typing import TypeVar, Generic, Callable, Any, NoReturn, Union
from dataclasses import dataclass

from .errors import UnwrapError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A unit operation completed with a value."""
    value: T

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure(Generic[U]):
    """A unit operation failed with an error value."""
    error: U

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """
        Raise the carried error.

        Exceptions are raised as-is; any other error value is wrapped
        in UnwrapError.
        """
        if isinstance(self.error, BaseException):
            raise self.error
        raise UnwrapError(self.error)


Result = Union[Success[T], Failure[U]]

Completion = Callable[[Result[T, U]], None]
UnitOperation = Callable[[Completion[T, U]], None]
ArgumentOperation = Callable[[T, Completion[T, U]], None]


def from_callable(func: Callable[..., T], *args: Any, **kwargs: Any) -> UnitOperation[T, Exception]:
    """
    Adapt a synchronous function into a unit operation.

    The return value is reported as Success, a raised Exception as Failure.

    Example:
        series([from_callable(load, path) for path in paths], on_done)
    """
    def operation(done: Completion[T, Exception]) -> None:
        try:
            value = func(*args, **kwargs)
        except Exception as exc:
            done(Failure(exc))
            return
        done(Success(value))

    return operation
