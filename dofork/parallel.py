"""
Parallel: a deferred computation that settles once into failure or success.

A ``Parallel[E, T]`` is a capability: fork it with a failure callback and a
success callback and exactly one of them is called, exactly once, with an
``E`` or a ``T``. Building a Parallel never runs anything; only :meth:`fork`
does.

The type is a closed set of frozen variants:

* :class:`Leaf` wraps an external two-callback procedure.
* :class:`Resolved` and :class:`Rejected` are already settled.
* :class:`Sequence` is a root computation plus queued transformation steps,
  executed by the drain loop in :mod:`dofork.drain`.

Example:
    >>> from dofork import succeed
    >>> seen = []
    >>> succeed(20).map(lambda x: x + 1).chain(lambda x: succeed(x * 2)).fork(
    ...     seen.append, seen.append
    ... )
    >>> seen
    [42]
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, NoReturn, TypeVar

from dofork.guard import Callback, Procedure, settle_once
from dofork.utils import DEBUG_FORK, CreationContext, capture_creation_context

if TYPE_CHECKING:
    from dofork._vendor import FrozenDict, Result

E = TypeVar("E")
T = TypeVar("T")
F = TypeVar("F")
U = TypeVar("U")


class Channel(Enum):
    """The two settlement channels of a Parallel."""

    FAILURE = "failure"
    SUCCESS = "success"


class Parallel(Generic[E, T]):
    """Base of every computation variant.

    The methods here are the method-style spelling of the functions in
    :mod:`dofork.operators`; both forms build identical values.
    """

    __slots__ = ()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, value: U) -> Parallel[NoReturn, U]:
        """Return a computation already succeeded with ``value``."""
        return Resolved(value)

    @classmethod
    def reject(cls, error: F) -> Parallel[F, NoReturn]:
        """Return a computation already failed with ``error``."""
        return Rejected(error)

    @classmethod
    def from_callbacks(
        cls,
        procedure: Callable[[Callable[[F], None], Callable[[U], None]], None],
    ) -> Parallel[F, U]:
        """Wrap a raw ``procedure(reject, resolve)`` as a leaf computation."""
        return parallel(procedure)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def fork(self, reject: Callable[[E], None], resolve: Callable[[T], None]) -> None:
        """Run the computation; exactly one callback is invoked exactly once."""
        fork(self, reject, resolve)

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def map(self, f: Callable[[T], U]) -> Parallel[E, U]:
        from dofork.operators import fmap

        return fmap(f, self)

    def chain(self, f: Callable[[T], Parallel[E, U]]) -> Parallel[E, U]:
        from dofork.operators import chain

        return chain(f, self)

    def ap(self, fns: Parallel[E, Callable[[T], U]]) -> Parallel[E, U]:
        """Apply the function ``fns`` succeeds with to this computation's value.

        Both sides are forked before either result is consumed; this side is
        forked first.
        """
        from dofork.operators import ap

        return ap(fns, self)

    def reject_map(self, f: Callable[[E], F]) -> Parallel[F, T]:
        from dofork.operators import reject_map

        return reject_map(f, self)

    def reject_chain(self, f: Callable[[E], Parallel[F, T]]) -> Parallel[F, T]:
        from dofork.operators import reject_chain

        return reject_chain(f, self)

    def __rshift__(self, f: Callable[[T], Parallel[E, U]]) -> Parallel[E, U]:
        return self.chain(f)

    # ------------------------------------------------------------------
    # Combinators
    # ------------------------------------------------------------------

    @staticmethod
    def gather(*parallels: Parallel[E, Any]) -> Parallel[E, tuple[Any, ...]]:
        from dofork.combinators import gather

        return gather(*parallels)

    @staticmethod
    def gather_dict(parallels: Mapping[Any, Parallel[E, Any]]) -> Parallel[E, FrozenDict]:
        from dofork.combinators import gather_dict

        return gather_dict(parallels)

    def settle(self) -> Parallel[NoReturn, Result[T]]:
        from dofork.combinators import settle

        return settle(self)


@dataclass(frozen=True)
class Leaf(Parallel[E, T]):
    """Computation backed by an external ``procedure(reject, resolve)``."""

    procedure: Procedure
    created_at: CreationContext | None = field(default=None, compare=False)

    def __repr__(self) -> str:
        name = getattr(self.procedure, "__qualname__", type(self.procedure).__name__)
        if self.created_at is not None:
            return f"Leaf({name} @ {self.created_at.format()})"
        return f"Leaf({name})"


@dataclass(frozen=True)
class Resolved(Parallel[NoReturn, T]):
    """Computation that succeeds synchronously with ``value``."""

    value: T


@dataclass(frozen=True)
class Rejected(Parallel[E, NoReturn]):
    """Computation that fails synchronously with ``error``."""

    error: E


@dataclass(frozen=True)
class StepPair:
    """One queued transformation; an absent side is skipped on that channel."""

    on_failure: Callable[[Any], Parallel[Any, Any]] | None = None
    on_success: Callable[[Any], Parallel[Any, Any]] | None = None

    def entry(self, channel: Channel) -> Callable[[Any], Parallel[Any, Any]] | None:
        if channel is Channel.SUCCESS:
            return self.on_success
        return self.on_failure


@dataclass(frozen=True)
class Sequence(Parallel[E, T]):
    """A non-sequence ``root`` followed by pending steps, in order."""

    root: Parallel[Any, Any]
    steps: tuple[StepPair, ...]

    def __repr__(self) -> str:
        return f"Sequence({self.root!r}, <{len(self.steps)} steps>)"


def fork(parallel: Parallel[E, T], reject: Callback, resolve: Callback) -> None:
    """Execute ``parallel`` into the two terminal callbacks."""
    match parallel:
        case Resolved(value):
            resolve(value)
        case Rejected(error):
            reject(error)
        case Leaf(procedure):
            settle_once(procedure)(reject, resolve)
        case Sequence(root, steps):
            from dofork.drain import Drain

            Drain(root, steps, reject, resolve).run()
        case _:
            raise TypeError(f"Unknown Parallel variant: {type(parallel).__name__}")


def parallel(
    procedure: Callable[[Callable[[E], None], Callable[[T], None]], None],
) -> Parallel[E, T]:
    """Wrap a raw ``procedure(reject, resolve)`` as a leaf computation."""
    created_at = capture_creation_context(skip_frames=2) if DEBUG_FORK else None
    return Leaf(procedure, created_at)


def succeed(value: T) -> Parallel[NoReturn, T]:
    return Resolved(value)


def fail(error: E) -> Parallel[E, NoReturn]:
    return Rejected(error)


__all__ = [
    "Channel",
    "Leaf",
    "Parallel",
    "Rejected",
    "Resolved",
    "Sequence",
    "StepPair",
    "fail",
    "fork",
    "parallel",
    "succeed",
]
