"""
Drain loop for Sequence execution.

Forking a :class:`~dofork.parallel.Sequence` creates one :class:`Drain`.
The drain forks the current computation, and while that fork settles before
returning it advances to the next queued step and loops. When a fork
suspends, the drain returns; the pending step's callback re-enters the same
loop when it fires. Stack depth therefore stays constant across both
synchronous and asynchronous steps.

Each Drain owns a cursor into the Sequence's immutable step tuple, so
forking the same Sequence again (or concurrently) starts from the beginning
without observing another execution's progress.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Final

from dofork.errors import StepResultError
from dofork.guard import Callback, SettlementGuard
from dofork.parallel import Channel, Parallel, Rejected, Resolved, StepPair
from dofork.utils import DEBUG_FORK

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settled:
    """Step outcome: the fork settled before it returned."""

    channel: Channel
    value: Any


class _Suspended:
    __slots__ = ()

    def __repr__(self) -> str:
        return "SUSPENDED"


SUSPENDED: Final = _Suspended()
"""Step outcome: the fork returned without settling; a callback will follow."""

StepOutcome = Settled | _Suspended


class PendingStep:
    """Inner callbacks for a single fork of the drain's current computation.

    Settlement that happens during the fork is recorded and picked up by
    :meth:`seal`. Settlement that happens after :meth:`seal` reported
    ``SUSPENDED`` resumes the drain directly.

    Callbacks must arrive on the forking thread or its event loop; the
    handoff between ``_settle`` and ``seal`` takes no lock.
    """

    __slots__ = ("_drain", "outcome", "suspended")

    def __init__(self, drain: Drain) -> None:
        self._drain = drain
        self.outcome: Settled | None = None
        self.suspended = False

    def reject(self, error: Any) -> None:
        self._settle(Channel.FAILURE, error)

    def resolve(self, value: Any) -> None:
        self._settle(Channel.SUCCESS, value)

    def _settle(self, channel: Channel, value: Any) -> None:
        if self.outcome is not None:
            return
        self.outcome = Settled(channel, value)
        if self.suspended:
            self._drain.resume(self.outcome)

    def seal(self) -> StepOutcome:
        """Called once the fork has returned."""
        if self.outcome is not None:
            return self.outcome
        self.suspended = True
        return SUSPENDED


class Drain:
    """One execution of a Sequence."""

    __slots__ = ("current", "steps", "cursor", "_outer")

    def __init__(
        self,
        root: Parallel[Any, Any],
        steps: tuple[StepPair, ...],
        reject: Callback,
        resolve: Callback,
    ) -> None:
        self.current = root
        self.steps = steps
        self.cursor = 0
        self._outer: SettlementGuard[Any, Any] = SettlementGuard(reject, resolve)

    @property
    def exhausted(self) -> bool:
        return self.cursor >= len(self.steps)

    def run(self) -> None:
        """Drain steps until the queue is empty or a step suspends."""
        while not self.exhausted:
            outcome = self.fork_current()
            if outcome is SUSPENDED:
                if DEBUG_FORK:
                    logger.debug(
                        "Drain suspended at step %d/%d on %r",
                        self.cursor,
                        len(self.steps),
                        self.current,
                    )
                return
            self.advance(outcome)
        self.current.fork(self._outer.reject, self._outer.resolve)

    def resume(self, outcome: Settled) -> None:
        """Continue after a suspended step settled."""
        if DEBUG_FORK:
            logger.debug(
                "Drain resumed at step %d/%d with %s",
                self.cursor,
                len(self.steps),
                outcome.channel.value,
            )
        self.advance(outcome)
        self.run()

    def fork_current(self) -> StepOutcome:
        step = PendingStep(self)
        self.current.fork(step.reject, step.resolve)
        return step.seal()

    def advance(self, outcome: Settled) -> None:
        """Move to the next step that handles ``outcome.channel``.

        Steps without an entry for the channel are skipped. If the queue
        runs out first, the value itself becomes the terminal computation.
        """
        steps = self.steps
        while self.cursor < len(steps):
            entry = steps[self.cursor].entry(outcome.channel)
            self.cursor += 1
            if entry is not None:
                following = entry(outcome.value)
                if not isinstance(following, Parallel):
                    raise StepResultError(following)
                self.current = following
                return
        if outcome.channel is Channel.SUCCESS:
            self.current = Resolved(outcome.value)
        else:
            self.current = Rejected(outcome.value)


__all__ = [
    "SUSPENDED",
    "Drain",
    "PendingStep",
    "Settled",
    "StepOutcome",
]
