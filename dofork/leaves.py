"""
Leaf computations backed by asyncio.

Every leaf here looks up the running event loop when it is forked, not when
it is built, so the same value can be forked again on a later loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, NoReturn, TypeVar

from loguru import logger

from dofork.parallel import Parallel, parallel

E = TypeVar("E")
T = TypeVar("T")

log = logger.bind(component="leaves")


def soon(value: T) -> Parallel[NoReturn, T]:
    """Succeed with ``value`` on the next event loop iteration."""

    def schedule(_reject: Callable[[Any], None], resolve: Callable[[T], None]) -> None:
        asyncio.get_running_loop().call_soon(resolve, value)

    return parallel(schedule)


def rejected_soon(error: E) -> Parallel[E, NoReturn]:
    """Fail with ``error`` on the next event loop iteration."""

    def schedule(reject: Callable[[E], None], _resolve: Callable[[Any], None]) -> None:
        asyncio.get_running_loop().call_soon(reject, error)

    return parallel(schedule)


def later(delay: float, value: T) -> Parallel[NoReturn, T]:
    """Succeed with ``value`` after ``delay`` seconds."""

    def schedule(_reject: Callable[[Any], None], resolve: Callable[[T], None]) -> None:
        asyncio.get_running_loop().call_later(delay, resolve, value)

    return parallel(schedule)


def from_awaitable(factory: Callable[[], Awaitable[T]]) -> Parallel[BaseException, T]:
    """Run ``factory()`` as a task each time the computation is forked.

    The task's result goes to the success channel. A raised exception, or the
    ``CancelledError`` of a cancelled task, goes to the failure channel.
    """

    def start(reject: Callable[[BaseException], None], resolve: Callable[[T], None]) -> None:
        task = asyncio.ensure_future(factory())

        def on_done(done: asyncio.Future[T]) -> None:
            if done.cancelled():
                log.debug("Awaitable from {} was cancelled", factory)
                reject(asyncio.CancelledError())
                return
            error = done.exception()
            if error is not None:
                reject(error)
            else:
                resolve(done.result())

        task.add_done_callback(on_done)

    return parallel(start)


def attempt(fn: Callable[..., T], *args: Any, **kwargs: Any) -> Parallel[Exception, T]:
    """Call ``fn`` when forked; a raised ``Exception`` becomes a failure."""

    def call(reject: Callable[[Exception], None], resolve: Callable[[T], None]) -> None:
        try:
            value = fn(*args, **kwargs)
        except Exception as exc:
            log.debug("{} raised {!r}", getattr(fn, "__qualname__", fn), exc)
            reject(exc)
            return
        resolve(value)

    return parallel(call)


__all__ = [
    "attempt",
    "from_awaitable",
    "later",
    "rejected_soon",
    "soon",
]
