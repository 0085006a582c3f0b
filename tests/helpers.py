"""Assertion helpers and leaf factories shared by the dofork tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from dofork import Channel, Parallel, parallel


class Recorder:
    """Records every call made to the two fork callbacks."""

    def __init__(self) -> None:
        self.calls: list[tuple[Channel, Any]] = []
        self._event: asyncio.Event | None = None

    def reject(self, error: Any) -> None:
        self.calls.append((Channel.FAILURE, error))
        if self._event is not None:
            self._event.set()

    def resolve(self, value: Any) -> None:
        self.calls.append((Channel.SUCCESS, value))
        if self._event is not None:
            self._event.set()

    @property
    def failures(self) -> list[Any]:
        return [value for channel, value in self.calls if channel is Channel.FAILURE]

    @property
    def successes(self) -> list[Any]:
        return [value for channel, value in self.calls if channel is Channel.SUCCESS]

    def fork(self, p: Parallel[Any, Any]) -> Recorder:
        p.fork(self.reject, self.resolve)
        return self

    async def wait(self, extra_ticks: int = 3) -> None:
        """Wait for the first call, then a few more ticks to catch stray calls."""
        if not self.calls:
            self._event = asyncio.Event()
            await self._event.wait()
        for _ in range(extra_ticks):
            await asyncio.sleep(0)


def assert_resolves(expected: Any, p: Parallel[Any, Any]) -> None:
    """Fork ``p`` and require one synchronous success equal to ``expected``."""
    assert isinstance(p, Parallel), "result was not a Parallel instance"
    rec = Recorder().fork(p)
    assert rec.calls == [(Channel.SUCCESS, expected)]


def assert_rejects(expected: Any, p: Parallel[Any, Any]) -> None:
    """Fork ``p`` and require one synchronous failure equal to ``expected``."""
    assert isinstance(p, Parallel), "result was not a Parallel instance"
    rec = Recorder().fork(p)
    assert rec.calls == [(Channel.FAILURE, expected)]


async def assert_resolves_async(expected: Any, p: Parallel[Any, Any]) -> None:
    assert isinstance(p, Parallel), "result was not a Parallel instance"
    rec = Recorder().fork(p)
    await rec.wait()
    assert rec.calls == [(Channel.SUCCESS, expected)]


async def assert_rejects_async(expected: Any, p: Parallel[Any, Any]) -> None:
    assert isinstance(p, Parallel), "result was not a Parallel instance"
    rec = Recorder().fork(p)
    await rec.wait()
    assert rec.calls == [(Channel.FAILURE, expected)]


def next_tick_call(f: Callable[[Any], Any]) -> Callable[[Any], Parallel[Any, Any]]:
    """Return a chain function that succeeds with ``f(value)`` on the next tick."""

    def step(value: Any) -> Parallel[Any, Any]:
        def schedule(_reject: Callable[[Any], None], resolve: Callable[[Any], None]) -> None:
            asyncio.get_running_loop().call_soon(lambda: resolve(f(value)))

        return parallel(schedule)

    return step
