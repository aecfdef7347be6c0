"""Tests for upstall.core.result."""

from __future__ import annotations

import pytest

from upstall.core.result import Err, Ok, Result, is_err, is_ok


def _parse(raw: str) -> Result[int, str]:
    try:
        return Ok(int(raw))
    except ValueError:
        return Err(f"not a number: {raw}")


class TestOk:
    def test_value(self) -> None:
        result = Ok(42)
        assert result.is_ok()
        assert not result.is_err()
        assert result.unwrap() == 42
        assert result.unwrap_or(0) == 42

    def test_map(self) -> None:
        assert Ok(2).map(lambda x: x * 3) == Ok(6)

    def test_map_err_is_noop(self) -> None:
        ok = Ok(1)
        assert ok.map_err(lambda e: f"wrapped {e}") is ok

    def test_repr(self) -> None:
        assert repr(Ok("x")) == "Ok('x')"

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Ok(1).value = 2  # type: ignore[misc]


class TestErr:
    def test_error(self) -> None:
        result = Err("boom")
        assert result.is_err()
        assert not result.is_ok()
        assert result.unwrap_or(7) == 7

    def test_unwrap_raises(self) -> None:
        with pytest.raises(ValueError, match="boom"):
            Err("boom").unwrap()

    def test_map_err(self) -> None:
        assert Err(404).map_err(lambda code: f"HTTP {code}") == Err("HTTP 404")

    def test_map_is_noop(self) -> None:
        err = Err("e")
        assert err.map(lambda v: v) is err


class TestMatching:
    def test_guards(self) -> None:
        assert is_ok(_parse("3"))
        assert is_err(_parse("three"))

    def test_match_statement(self) -> None:
        match _parse("12"):
            case Ok(value=value):
                assert value == 12
            case Err():
                pytest.fail("expected Ok")
