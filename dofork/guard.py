"""Exactly-once settlement for two-callback procedures."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from dofork.utils import DEBUG_FORK

E = TypeVar("E")
T = TypeVar("T")

Callback = Callable[[Any], None]
Procedure = Callable[[Callback, Callback], None]

logger = logging.getLogger(__name__)


class SettlementGuard(Generic[E, T]):
    """One-shot latch shared by the failure and success callbacks of one fork.

    The first call to either :meth:`reject` or :meth:`resolve` is forwarded.
    Every later call to either is dropped without raising.
    """

    __slots__ = ("_reject", "_resolve", "pristine")

    def __init__(self, reject: Callable[[E], None], resolve: Callable[[T], None]) -> None:
        self._reject = reject
        self._resolve = resolve
        self.pristine = True

    def reject(self, error: E) -> None:
        if self.pristine:
            self.pristine = False
            self._reject(error)
        elif DEBUG_FORK:
            logger.debug("Dropped failure after settlement: %r", error)

    def resolve(self, value: T) -> None:
        if self.pristine:
            self.pristine = False
            self._resolve(value)
        elif DEBUG_FORK:
            logger.debug("Dropped success after settlement: %r", value)


def settle_once(procedure: Procedure) -> Procedure:
    """Wrap ``procedure`` so each invocation gets its own settlement latch."""

    def guarded(reject: Callback, resolve: Callback) -> None:
        guard: SettlementGuard[Any, Any] = SettlementGuard(reject, resolve)
        procedure(guard.reject, guard.resolve)

    return guarded


__all__ = [
    "Callback",
    "Procedure",
    "SettlementGuard",
    "settle_once",
]
