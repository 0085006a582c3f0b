"""Regression tests ensuring the public annotations play nicely with beartype."""

from __future__ import annotations

from beartype import beartype

from dofork import Ok, Parallel, run_sync, succeed
from dofork.operators import fmap


def test_parallel_map_is_beartype_decoratable() -> None:
    """Applying ``@beartype`` to ``Parallel.map`` should succeed."""

    decorated_map = beartype(Parallel.map)

    result = decorated_map(succeed(1), lambda x: x + 1)

    assert isinstance(result, Parallel)
    assert run_sync(result) == Ok(2)


def test_operator_functions_are_beartype_decoratable() -> None:
    decorated_fmap = beartype(fmap)

    assert run_sync(decorated_fmap(str, succeed(3))) == Ok("3")


def test_run_sync_is_beartype_decoratable() -> None:
    assert beartype(run_sync)(succeed("x")) == Ok("x")
