"""
Composition operators for Parallel.

Every operator is pure: it returns a new Parallel and runs nothing. Steps
are queued on a flat :class:`~dofork.parallel.Sequence` anchored at the
original root, so ``p.map(f).chain(g).map(h)`` is one root plus three steps
rather than three nested sequences.

Already settled computations take fast paths: mapping a ``Resolved`` value
computes immediately, and success-channel operators on a ``Rejected`` value
(or failure-channel operators on a ``Resolved`` value) return it unchanged.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from dofork.parallel import (
    Leaf,
    Parallel,
    Rejected,
    Resolved,
    Sequence,
    StepPair,
)

E = TypeVar("E")
F = TypeVar("F")
T = TypeVar("T")
U = TypeVar("U")

_EMPTY: Any = object()


def create_sequence(current: Parallel[Any, Any], step: StepPair) -> Sequence[Any, Any]:
    """Return ``current`` with ``step`` appended; ``current`` is left untouched."""
    match current:
        case Sequence(root, steps):
            return Sequence(root, steps + (step,))
        case _:
            return Sequence(current, (step,))


def fmap(f: Callable[[T], U], parallel: Parallel[E, T]) -> Parallel[E, U]:
    """Transform the success value with ``f``."""
    match parallel:
        case Resolved(value):
            return Resolved(f(value))
        case Rejected():
            return parallel
        case _:
            return create_sequence(parallel, StepPair(on_success=lambda v: Resolved(f(v))))


def chain(f: Callable[[T], Parallel[E, U]], parallel: Parallel[E, T]) -> Parallel[E, U]:
    """Continue with the computation ``f`` returns for the success value."""
    match parallel:
        case Rejected():
            return parallel
        case _:
            return create_sequence(parallel, StepPair(on_success=f))


def reject_map(f: Callable[[E], F], parallel: Parallel[E, T]) -> Parallel[F, T]:
    """Transform the failure value with ``f``."""
    match parallel:
        case Rejected(error):
            return Rejected(f(error))
        case Resolved():
            return parallel
        case _:
            return create_sequence(parallel, StepPair(on_failure=lambda e: Rejected(f(e))))


def reject_chain(f: Callable[[E], Parallel[F, T]], parallel: Parallel[E, T]) -> Parallel[F, T]:
    """Continue with the computation ``f`` returns for the failure value.

    ``f`` may return a succeeding computation to recover from the failure.
    """
    match parallel:
        case Resolved():
            return parallel
        case _:
            return create_sequence(parallel, StepPair(on_failure=f))


def ap(fns: Parallel[E, Callable[[T], U]], values: Parallel[E, T]) -> Parallel[E, U]:
    """Apply the function from ``fns`` to the value from ``values``.

    Both sides are forked before either result is consumed, ``values``
    first. The result succeeds with ``fn(value)`` once both sides have
    succeeded, and fails with the first failure from either side.
    """
    if isinstance(values, Rejected):
        return values

    def apply(reject: Callable[[E], None], resolve: Callable[[U], None]) -> None:
        fn: Any = _EMPTY
        val: Any = _EMPTY
        rejected = False

        def resolve_if_done() -> None:
            if fn is not _EMPTY and val is not _EMPTY:
                resolve(fn(val))

        def reject_if_first(error: E) -> None:
            nonlocal rejected
            if not rejected:
                rejected = True
                reject(error)

        def on_value(v: T) -> None:
            nonlocal val
            val = v
            resolve_if_done()

        def on_fn(f: Callable[[T], U]) -> None:
            nonlocal fn
            fn = f
            resolve_if_done()

        values.fork(reject_if_first, on_value)
        fns.fork(reject_if_first, on_fn)

    return Leaf(apply)


__all__ = [
    "ap",
    "chain",
    "create_sequence",
    "fmap",
    "reject_chain",
    "reject_map",
]
