"""Fetch pipeline built from deferred computations.

This example shows how callback-based sources, pure transformations and
failure recovery compose without running anything until the pipeline is
forked.

Key concepts:
- Wrap callback APIs with ``parallel(procedure)`` or the asyncio leaves
- Fan out with ``gather_dict``; all requests are issued before any result is used
- Recover from failures with ``reject_chain`` instead of try/except
- Run with ``run_async`` (event loop) or ``run_sync`` (no suspension)

Run with: python examples/fetch_pipeline.py
"""

import asyncio
from typing import Any

from dofork import Parallel, fail, gather_dict, parallel, run_async, run_sync, succeed
from dofork.leaves import from_awaitable, later


# ============================================================================
# Step 1: Sources
# ============================================================================

USERS = {1: {"name": "ada", "team": "core"}, 2: {"name": "lin", "team": "infra"}}


def lookup_user(user_id: int) -> Parallel[str, dict[str, Any]]:
    """Callback-style lookup that settles synchronously."""

    def procedure(reject, resolve):
        user = USERS.get(user_id)
        if user is None:
            reject(f"user {user_id} not found")
        else:
            resolve(user)

    return parallel(procedure)


def fetch_quota(team: str) -> Parallel[BaseException, int]:
    async def request() -> int:
        await asyncio.sleep(0.01)
        if team == "infra":
            raise TimeoutError(f"quota service timed out for {team}")
        return 100

    return from_awaitable(request)


# ============================================================================
# Step 2: Composition (nothing runs here)
# ============================================================================


def user_report(user_id: int) -> Parallel[str, dict[str, Any]]:
    user = lookup_user(user_id)
    quota = (
        user.chain(lambda u: fetch_quota(u["team"]))
        .reject_map(str)
        .reject_chain(lambda reason: later(0.01, 0))
    )
    return gather_dict({"user": user, "quota": quota, "source": succeed("directory")})


def main() -> None:
    print("sync:", run_sync(lookup_user(1).map(lambda u: u["name"].upper())))
    print("sync failure:", run_sync(lookup_user(9).chain(lambda u: succeed(u["name"]))))
    print("recovered:", run_sync(lookup_user(9).reject_chain(lambda e: succeed({"name": "guest"}))))
    print("short-circuit:", run_sync(gather_dict({"a": succeed(1), "b": fail("b failed")})))

    async def run_reports() -> None:
        for user_id in (1, 2, 3):
            print(f"report {user_id}:", await run_async(user_report(user_id)))

    asyncio.run(run_reports())


if __name__ == "__main__":
    main()
