"""Error types raised by dofork itself.

Failures of a computation are never raised; they travel on the failure
channel. The exceptions here signal misuse of the library.
"""

from __future__ import annotations

from typing import Any


class StepResultError(TypeError):
    """Raised when a ``chain`` or ``reject_chain`` function returns a non-Parallel."""

    def __init__(self, result: Any) -> None:
        self.result = result
        super().__init__(
            f"chain functions must return a Parallel, got {type(result).__name__}: {result!r}\n"
            "Hint: use `map` for plain values, or wrap the value with `succeed(...)`"
        )


class UnsettledError(RuntimeError):
    """Raised by ``run_sync`` when the computation suspended instead of settling.

    Example:
        >>> run_sync(soon(1))  # needs an event loop tick to settle
        Traceback (most recent call last):
        ...
        UnsettledError: ...

    Use ``run_async`` or ``to_future`` for computations that wait on
    timers or I/O.
    """

    def __init__(self, parallel: Any) -> None:
        self.parallel = parallel
        super().__init__(
            f"{parallel!r} did not settle synchronously; use run_async() or to_future()"
        )


class ForkFailure(Exception):
    """Carries a non-exception failure value out of an asyncio future."""

    def __init__(self, error: Any) -> None:
        self.error = error
        super().__init__(error)


__all__ = [
    "ForkFailure",
    "StepResultError",
    "UnsettledError",
]
