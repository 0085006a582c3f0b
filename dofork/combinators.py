"""Combinators built on the Parallel algebra."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, NoReturn, TypeVar

from dofork._vendor import Err, FrozenDict, Ok, Result
from dofork.operators import fmap, reject_chain
from dofork.parallel import Leaf, Parallel, Rejected, Resolved

E = TypeVar("E")
K = TypeVar("K")
T = TypeVar("T")

_EMPTY: Any = object()


def gather(*parallels: Parallel[E, Any]) -> Parallel[E, tuple[Any, ...]]:
    """Run every computation and collect the successes in argument order.

    All computations are forked, in order, before any result is consumed.
    The first failure from any of them settles the result; later failures
    and successes are ignored.

    Example:
        >>> run_sync(gather(succeed(1), succeed(2)))
        Ok(value=(1, 2))
    """
    if not parallels:
        return Resolved(())
    if isinstance(parallels[0], Rejected):
        return parallels[0]

    def collect(reject: Callable[[E], None], resolve: Callable[[tuple[Any, ...]], None]) -> None:
        results: list[Any] = [_EMPTY] * len(parallels)
        remaining = len(parallels)

        def on_success(index: int) -> Callable[[Any], None]:
            def store(value: Any) -> None:
                nonlocal remaining
                if results[index] is not _EMPTY:
                    return
                results[index] = value
                remaining -= 1
                if remaining == 0:
                    resolve(tuple(results))

            return store

        for index, p in enumerate(parallels):
            p.fork(reject, on_success(index))

    return Leaf(collect)


def gather_dict(parallels: Mapping[K, Parallel[E, Any]]) -> Parallel[E, FrozenDict]:
    """Like :func:`gather`, keyed by the mapping's keys."""
    keys = tuple(parallels)
    return fmap(
        lambda values: FrozenDict(zip(keys, values)),
        gather(*(parallels[key] for key in keys)),
    )


def settle(parallel: Parallel[E, T]) -> Parallel[NoReturn, Result[T]]:
    """Move both channels onto the success channel as ``Ok`` / ``Err``."""
    return reject_chain(lambda error: Resolved(Err(error)), fmap(Ok, parallel))


__all__ = [
    "gather",
    "gather_dict",
    "settle",
]
