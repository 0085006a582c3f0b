"""
dofork - stack-safe deferred computations with a failure and a success channel.

A ``Parallel[E, T]`` describes work that settles exactly once, into a failure
``E`` or a success ``T``. Composition (``map``, ``chain``, ``ap``,
``reject_map``, ``reject_chain``) is pure and never touches the computation it
starts from; ``fork`` runs it. Long chains run in constant stack depth whether
their steps settle immediately or wait on a callback.

Example:
    >>> from dofork import fail, parallel, run_sync, succeed
    >>>
    >>> def read_config(reject, resolve):
    ...     resolve({"retries": 3})
    >>>
    >>> program = (
    ...     parallel(read_config)
    ...     .map(lambda config: config["retries"])
    ...     .chain(lambda n: fail("no retries") if n == 0 else succeed(n))
    ...     .reject_map(str.upper)
    ... )
    >>> run_sync(program)
    Ok(value=3)
"""

from dofork._vendor import Err, FrozenDict, Ok, Result
from dofork.combinators import gather, gather_dict, settle
from dofork.errors import ForkFailure, StepResultError, UnsettledError
from dofork.guard import SettlementGuard, settle_once
from dofork.operators import ap, chain, create_sequence, fmap, reject_chain, reject_map
from dofork.parallel import (
    Channel,
    Leaf,
    Parallel,
    Rejected,
    Resolved,
    Sequence,
    StepPair,
    fail,
    fork,
    parallel,
    succeed,
)
from dofork.run import run_async, run_sync, to_future

__version__ = "0.1.0"

__all__ = [
    "Channel",
    "Err",
    "ForkFailure",
    "FrozenDict",
    "Leaf",
    "Ok",
    "Parallel",
    "Rejected",
    "Resolved",
    "Result",
    "Sequence",
    "SettlementGuard",
    "StepPair",
    "StepResultError",
    "UnsettledError",
    "ap",
    "chain",
    "create_sequence",
    "fail",
    "fmap",
    "fork",
    "gather",
    "gather_dict",
    "parallel",
    "reject_chain",
    "reject_map",
    "run_async",
    "run_sync",
    "settle",
    "settle_once",
    "succeed",
    "to_future",
]
