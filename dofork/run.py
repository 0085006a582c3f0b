"""
Runners that fork a Parallel and hand back its settlement.

Example:
    >>> from dofork import succeed
    >>> from dofork.leaves import later
    >>> from dofork.run import run_async, run_sync
    >>> run_sync(succeed(1).map(lambda x: x + 1))
    Ok(value=2)

    # Computations that wait on the event loop
    >>> result = await run_async(later(0.1, "done"))
"""

from __future__ import annotations

import asyncio
from typing import Any, TypeVar

from loguru import logger

from dofork._vendor import Err, Ok, Result
from dofork.errors import ForkFailure, UnsettledError
from dofork.parallel import Parallel

T = TypeVar("T")

log = logger.bind(component="run")


def run_sync(parallel: Parallel[Any, T]) -> Result[T]:
    """Fork ``parallel`` and return its settlement.

    Raises:
        UnsettledError: if the computation had not settled when ``fork``
            returned.
    """
    results: list[Result[T]] = []
    parallel.fork(
        lambda error: results.append(Err(error)),
        lambda value: results.append(Ok(value)),
    )
    if not results:
        raise UnsettledError(parallel)
    return results[0]


def to_future(
    parallel: Parallel[Any, T],
    loop: asyncio.AbstractEventLoop | None = None,
) -> asyncio.Future[T]:
    """Fork ``parallel`` into a future on ``loop`` (default: the running loop).

    The future's result is the success value. A failure is set as the
    future's exception; failures that are not exceptions are wrapped in
    :class:`~dofork.errors.ForkFailure`.
    """
    loop = loop if loop is not None else asyncio.get_running_loop()
    future: asyncio.Future[T] = loop.create_future()

    def reject(error: Any) -> None:
        if future.done():
            log.debug("Future already done; dropping failure {!r}", error)
            return
        if isinstance(error, BaseException):
            future.set_exception(error)
        else:
            future.set_exception(ForkFailure(error))

    def resolve(value: T) -> None:
        if future.done():
            log.debug("Future already done; dropping value {!r}", value)
            return
        future.set_result(value)

    parallel.fork(reject, resolve)
    return future


async def run_async(parallel: Parallel[Any, T]) -> Result[T]:
    """Fork ``parallel`` on the running loop and await its settlement."""
    loop = asyncio.get_running_loop()
    future: asyncio.Future[Result[T]] = loop.create_future()

    def settle(result: Result[T]) -> None:
        if not future.done():
            future.set_result(result)

    parallel.fork(lambda error: settle(Err(error)), lambda value: settle(Ok(value)))
    return await future


__all__ = [
    "run_async",
    "run_sync",
    "to_future",
]
