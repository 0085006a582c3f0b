"""Applicative combine: both sides issued, first failure wins."""

from __future__ import annotations

import asyncio

import pytest
from helpers import Recorder, assert_rejects, assert_resolves, assert_resolves_async

from dofork import Channel, ap, fail, parallel, succeed
from dofork.leaves import later, soon


def inc(x: int) -> int:
    return x + 1


def test_applies_value_in_a_to_function_in_b() -> None:
    assert_resolves(11, ap(succeed(inc), succeed(10)))


def test_method_form_takes_functions_as_argument() -> None:
    assert_resolves(11, succeed(10).ap(succeed(inc)))


def test_returns_error_in_a_if_a_is_rejected() -> None:
    assert_rejects("error", ap(succeed(inc), fail("error")))


def test_returns_error_in_b_if_b_is_rejected() -> None:
    assert_rejects("error", ap(fail("error"), succeed(1)))


def test_only_rejects_once_with_first_issued_failure(recorder) -> None:
    a = parallel(lambda rej, _res: rej("first"))
    b = parallel(lambda rej, _res: rej("second"))

    recorder.fork(ap(b, a))

    assert recorder.calls == [(Channel.FAILURE, "first")]


def test_none_is_a_valid_operand() -> None:
    assert_resolves("got None", ap(succeed(lambda v: f"got {v}"), succeed(None)))


def test_both_sides_issued_before_either_is_consumed() -> None:
    issued: list[str] = []
    stored: dict[str, object] = {}

    def side(name: str, value: object):
        def procedure(_rej, res):
            issued.append(name)
            stored[name] = res

        return parallel(procedure)

    rec = Recorder().fork(ap(side("fn", inc), side("value", 1)))

    assert issued == ["value", "fn"]
    assert rec.calls == []

    stored["fn"](inc)
    assert rec.calls == []
    stored["value"](1)
    assert rec.calls == [(Channel.SUCCESS, 2)]


def test_failure_after_success_of_other_side_still_fails(recorder) -> None:
    stored: dict[str, object] = {}

    def capture(name: str):
        return parallel(lambda rej, res: stored.update({name: (rej, res)}))

    recorder.fork(ap(capture("fn"), capture("value")))
    stored["fn"][1](inc)
    stored["value"][0]("late failure")
    stored["value"][1](1)

    assert recorder.calls == [(Channel.FAILURE, "late failure")]


def test_can_be_reforked() -> None:
    p = ap(succeed(inc), parallel(lambda _rej, res: res(1)))

    assert_resolves(2, p)
    assert_resolves(2, p)


def test_embedded_in_a_sequence() -> None:
    p = ap(succeed(inc), succeed(1)).map(inc).chain(lambda x: ap(succeed(inc), succeed(x)))

    assert_resolves(4, p)


@pytest.mark.asyncio
async def test_async_sides() -> None:
    await assert_resolves_async(6, ap(soon(inc), later(0.01, 5)))


@pytest.mark.asyncio
async def test_async_failures_settle_once() -> None:
    def fail_later(delay: float, error: str):
        def schedule(rej, _res):
            asyncio.get_running_loop().call_later(delay, rej, error)

        return parallel(schedule)

    rec = Recorder().fork(ap(fail_later(0.02, "slow"), fail_later(0.0, "fast")))
    await rec.wait()
    await asyncio.sleep(0.05)

    assert rec.calls == [(Channel.FAILURE, "fast")]
