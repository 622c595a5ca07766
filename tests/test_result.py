"""Tests for Result pattern implementation."""

from __future__ import annotations

import pytest

from core.result import Failure, Success, failure, success


class TestSuccess:
    """Tests for Success class."""

    def test_is_success_returns_true(self) -> None:
        """Success.is_success() should return True."""
        result = Success({"1": True})

        assert result.is_success() is True
        assert result.is_failure() is False

    def test_unwrap_returns_value(self) -> None:
        """Success.unwrap() should return the contained value."""
        result = Success("GST")

        assert result.unwrap() == "GST"

    def test_unwrap_or_ignores_default(self) -> None:
        """Success.unwrap_or() should return value, ignoring default."""
        result = Success(18.0)

        assert result.unwrap_or(0.0) == 18.0

    def test_map_transforms_value(self) -> None:
        """Success.map() should transform the contained value."""
        result = Success(1000.0)

        mapped = result.map(lambda amount: amount * 15 / 100)

        assert mapped.unwrap() == 150.0


class TestFailure:
    """Tests for Failure class."""

    def test_is_failure_returns_true(self) -> None:
        """Failure.is_failure() should return True."""
        result = Failure("type_conflict")

        assert result.is_failure() is True
        assert result.is_success() is False

    def test_unwrap_raises_value_error(self) -> None:
        """Failure.unwrap() should raise ValueError naming the error."""
        result = Failure("unknown tax 9")

        with pytest.raises(ValueError, match="Cannot unwrap Failure: unknown tax 9"):
            result.unwrap()

    def test_unwrap_or_returns_default(self) -> None:
        """Failure.unwrap_or() should return the default value."""
        result: Failure[str] = Failure("not_found")

        assert result.unwrap_or({}) == {}

    def test_map_returns_self(self) -> None:
        """Failure.map() should return self unchanged."""
        result: Failure[str] = Failure("mixed_selection")

        mapped = result.map(lambda x: str(x))

        assert mapped is result
        assert mapped.error == "mixed_selection"


class TestHelpers:
    """Tests for success() and failure() helpers."""

    def test_success_creates_success(self) -> None:
        """success() should create a Success instance."""
        result = success(42)

        assert isinstance(result, Success)
        assert result.value == 42

    def test_failure_creates_failure(self) -> None:
        """failure() should create a Failure instance."""
        result = failure("error message")

        assert isinstance(result, Failure)
        assert result.error == "error message"
