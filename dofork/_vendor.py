"""
Vendored minimal result types.

``Result`` is the synchronous snapshot of a settled Parallel: ``Ok`` for the
success channel and ``Err`` for the failure channel. Unlike exception-based
result types, ``Err`` carries the failure value as-is, whatever its type.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, NoReturn, TypeVar, cast

from frozendict import frozendict

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)
U = TypeVar("U")

FrozenDict = frozendict


class Result(Generic[T_co]):
    """Sum type representing either a successful value or a failure."""

    __slots__ = ()

    def is_ok(self) -> bool:
        """Return ``True`` when the result is successful."""

        return isinstance(self, Ok)

    def is_err(self) -> bool:
        """Return ``True`` when the result represents a failure."""

        return isinstance(self, Err)

    def ok(self) -> T_co | None:
        """Return the contained value, or ``None`` if this is a failure."""

        if isinstance(self, Ok):
            return self.value
        return None

    def err(self) -> Any:
        """Return the contained failure, or ``None`` if this is a success."""

        if isinstance(self, Err):
            return self.error
        return None

    def unwrap(self) -> T_co:
        """Return the value, or raise the failure.

        Failures that are not exceptions are wrapped in
        :class:`~dofork.errors.ForkFailure`.
        """

        if isinstance(self, Ok):
            return self.value
        error = cast(Err, self).error
        if isinstance(error, BaseException):
            raise error
        from dofork.errors import ForkFailure

        raise ForkFailure(error)

    def unwrap_err(self) -> Any:
        """Return the failure or raise ``RuntimeError`` if this is a success."""

        if isinstance(self, Err):
            return self.error
        raise RuntimeError("Called unwrap_err on Ok value")

    def unwrap_or(self, default: U) -> T_co | U:
        """Return the contained value, or ``default`` if this is a failure."""

        if isinstance(self, Ok):
            return self.value
        return default

    def map(self, f: Callable[[T_co], U]) -> Result[U]:
        """Apply ``f`` to the contained value if this is a success."""

        if isinstance(self, Ok):
            return Ok(f(self.value))
        return cast(Result[U], self)

    def map_err(self, f: Callable[[Any], Any]) -> Result[T_co]:
        """Apply ``f`` to the contained failure if this is a failure."""

        if isinstance(self, Err):
            return Err(f(self.error))
        return self

    def __bool__(self) -> bool:
        return self.is_ok()


@dataclass(frozen=True)
class Ok(Result[T], Generic[T]):
    """Success result."""
    value: T


@dataclass(frozen=True)
class Err(Result[NoReturn]):
    """Failure result."""
    error: Any


__all__ = [
    "Err",
    "FrozenDict",
    "Ok",
    "Result",
]
