"""Tests for cookimg.core.result module."""

from __future__ import annotations

import pytest

from cookimg.core.result import Err, Ok, Result


def _half(n: int) -> Result[int, str]:
    if n % 2:
        return Err(f"{n} is odd")
    return Ok(n // 2)


class TestOk:
    def test_value(self) -> None:
        assert Ok(3).value == 3
        assert Ok(3).unwrap() == 3

    def test_map(self) -> None:
        assert Ok(" abc123\n").map(str.strip) == Ok("abc123")

    def test_map_err_keeps_value(self) -> None:
        assert Ok(2).map_err(lambda e: f"wrapped {e}") == Ok(2)


class TestErr:
    def test_error(self) -> None:
        assert Err("boom").error == "boom"

    def test_unwrap_raises(self) -> None:
        with pytest.raises(ValueError, match="boom"):
            Err("boom").unwrap()

    def test_map_keeps_error(self) -> None:
        assert Err("boom").map(str.upper) == Err("boom")

    def test_map_err(self) -> None:
        assert Err("boom").map_err(str.upper) == Err("BOOM")


def test_isinstance_narrowing() -> None:
    results = [_half(4), _half(3)]
    assert [r.value for r in results if isinstance(r, Ok)] == [2]
    assert [r.error for r in results if isinstance(r, Err)] == ["3 is odd"]
