"""Tests for the Result type utility methods."""

import pytest

from dofork import Err, ForkFailure, Ok, Result


class TestResultAccessors:
    def test_ok_accessors(self):
        result: Result[int] = Ok(42)

        assert result.is_ok()
        assert not result.is_err()
        assert result.ok() == 42
        assert result.err() is None
        assert bool(result) is True

    def test_err_accessors(self):
        result: Result[int] = Err("boom")

        assert result.is_err()
        assert result.ok() is None
        assert result.err() == "boom"
        assert bool(result) is False


class TestResultUnwrap:
    def test_unwrap_returns_value(self):
        assert Ok(1).unwrap() == 1

    def test_unwrap_raises_exception_failures(self):
        with pytest.raises(ValueError):
            Err(ValueError("bad")).unwrap()

    def test_unwrap_wraps_plain_failures(self):
        with pytest.raises(ForkFailure) as exc_info:
            Err("plain").unwrap()

        assert exc_info.value.error == "plain"

    def test_unwrap_err(self):
        assert Err("e").unwrap_err() == "e"
        with pytest.raises(RuntimeError):
            Ok(1).unwrap_err()

    def test_unwrap_or(self):
        assert Ok(1).unwrap_or(0) == 1
        assert Err("e").unwrap_or(0) == 0


class TestResultMap:
    def test_map_on_ok(self):
        assert Ok(1).map(lambda x: x + 1) == Ok(2)

    def test_map_on_err_is_noop(self):
        assert Err("e").map(lambda x: x + 1) == Err("e")

    def test_map_err(self):
        assert Err("e").map_err(str.upper) == Err("E")
        assert Ok(1).map_err(str.upper) == Ok(1)
