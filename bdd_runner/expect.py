"""Fluent assertions: ``expect(actual).to_equal(expected)``."""

import math
import re
from collections.abc import Callable, Sized
from dataclasses import dataclass
from typing import Any


class AssertionFailedError(AssertionError):
    """Raised when an expectation does not hold.

    Keeps the expected and actual values so reporters can show them.
    """

    def __init__(
        self, message: str, *, expected: Any = None, actual: Any = None
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


@dataclass(frozen=True)
class Expectation[T]:
    """Assertions about a single actual value."""

    actual: T

    def _check(
        self, passed: bool, message: str, *, expected: Any = None
    ) -> "Expectation[T]":
        if not passed:
            raise AssertionFailedError(message, expected=expected, actual=self.actual)
        return self

    def to_equal(self, expected: Any) -> "Expectation[T]":
        """Assert equality."""
        return self._check(
            self.actual == expected,
            f"Expected {expected!r}, but found {self.actual!r}",
            expected=expected,
        )

    def not_to_equal(self, expected: Any) -> "Expectation[T]":
        """Assert inequality."""
        return self._check(
            self.actual != expected,
            f"Expected value not to equal {expected!r}",
            expected=expected,
        )

    def to_be(self, expected: Any) -> "Expectation[T]":
        """Assert identity."""
        return self._check(
            self.actual is expected,
            f"Expected {expected!r} and {self.actual!r} to be the same object",
            expected=expected,
        )

    def to_be_none(self) -> "Expectation[T]":
        """Assert the value is None."""
        return self._check(
            self.actual is None, f"Expected None, but found {self.actual!r}"
        )

    def not_to_be_none(self) -> "Expectation[T]":
        """Assert the value is not None."""
        return self._check(self.actual is not None, "Expected a value, but found None")

    def to_be_true(self) -> "Expectation[T]":
        """Assert the value is True."""
        return self._check(
            self.actual is True,
            f"Expected True, but found {self.actual!r}",
            expected=True,
        )

    def to_be_false(self) -> "Expectation[T]":
        """Assert the value is False."""
        return self._check(
            self.actual is False,
            f"Expected False, but found {self.actual!r}",
            expected=False,
        )

    def to_satisfy(
        self, predicate: Callable[[T], bool], description: str
    ) -> "Expectation[T]":
        """Assert a predicate holds, described for the failure message."""
        return self._check(
            predicate(self.actual),
            f"Expected {self.actual!r} to {description}, but it did not",
            expected=description,
        )

    def to_be_instance_of(self, expected: type) -> "Expectation[T]":
        """Assert the value is an instance of a type."""
        return self._check(
            isinstance(self.actual, expected),
            f"Expected type {expected.__name__}, "
            f"but found type {type(self.actual).__name__}",
            expected=expected,
        )

    def to_be_greater_than(self, expected: Any) -> "Expectation[T]":
        """Assert actual > expected."""
        return self._check(
            self.actual > expected,  # type: ignore[operator]
            f"Expected {self.actual!r} to be greater than {expected!r}",
            expected=expected,
        )

    def to_be_less_than(self, expected: Any) -> "Expectation[T]":
        """Assert actual < expected."""
        return self._check(
            self.actual < expected,  # type: ignore[operator]
            f"Expected {self.actual!r} to be less than {expected!r}",
            expected=expected,
        )

    def to_be_greater_than_or_equal(self, expected: Any) -> "Expectation[T]":
        """Assert actual >= expected."""
        return self._check(
            self.actual >= expected,  # type: ignore[operator]
            f"Expected {self.actual!r} to be greater than or equal to {expected!r}",
            expected=expected,
        )

    def to_be_less_than_or_equal(self, expected: Any) -> "Expectation[T]":
        """Assert actual <= expected."""
        return self._check(
            self.actual <= expected,  # type: ignore[operator]
            f"Expected {self.actual!r} to be less than or equal to {expected!r}",
            expected=expected,
        )

    def to_be_between(self, low: Any, high: Any) -> "Expectation[T]":
        """Assert low <= actual <= high."""
        return self._check(
            low <= self.actual <= high,
            f"Expected {self.actual!r} to be between {low!r} and {high!r}",
            expected=(low, high),
        )

    def to_be_close_to(self, expected: float, tolerance: float) -> "Expectation[T]":
        """Assert a number is within tolerance of expected."""
        diff = abs(self.actual - expected)  # type: ignore[operator]
        return self._check(
            diff <= tolerance and not math.isnan(diff),
            f"Expected {self.actual!r} to be close to {expected!r} "
            f"(within {tolerance!r}), but difference was {diff!r}",
            expected=expected,
        )

    def to_contain(self, item: Any) -> "Expectation[T]":
        """Assert membership (substring for strings)."""
        return self._check(
            item in self.actual,  # type: ignore[operator]
            f"Expected {self.actual!r} to contain {item!r}",
            expected=item,
        )

    def not_to_contain(self, item: Any) -> "Expectation[T]":
        """Assert non-membership."""
        return self._check(
            item not in self.actual,  # type: ignore[operator]
            f"Expected {self.actual!r} not to contain {item!r}",
            expected=item,
        )

    def to_have_length(self, expected: int) -> "Expectation[T]":
        """Assert len(actual) == expected."""
        length = len(self.actual) if isinstance(self.actual, Sized) else None
        return self._check(
            length == expected,
            f"Expected length {expected}, but found {length}",
            expected=expected,
        )

    def to_be_empty(self) -> "Expectation[T]":
        """Assert the collection or string is empty."""
        return self._check(
            isinstance(self.actual, Sized) and len(self.actual) == 0,
            f"Expected empty, but found {self.actual!r}",
        )

    def not_to_be_empty(self) -> "Expectation[T]":
        """Assert the collection or string has elements."""
        return self._check(
            isinstance(self.actual, Sized) and len(self.actual) > 0,
            "Expected a non-empty value, but it was empty",
        )

    def to_start_with(self, prefix: str) -> "Expectation[T]":
        """Assert a string prefix."""
        return self._check(
            isinstance(self.actual, str) and self.actual.startswith(prefix),
            f"Expected {self.actual!r} to start with {prefix!r}",
            expected=prefix,
        )

    def to_end_with(self, suffix: str) -> "Expectation[T]":
        """Assert a string suffix."""
        return self._check(
            isinstance(self.actual, str) and self.actual.endswith(suffix),
            f"Expected {self.actual!r} to end with {suffix!r}",
            expected=suffix,
        )

    def to_match(self, pattern: str) -> "Expectation[T]":
        """Assert a regular expression matches somewhere in the string."""
        return self._check(
            isinstance(self.actual, str)
            and re.search(pattern, self.actual) is not None,
            f"Expected {self.actual!r} to match pattern {pattern!r}",
            expected=pattern,
        )

    def to_raise(
        self, expected: type[BaseException] = Exception, match: str | None = None
    ) -> BaseException:
        """Call the actual value and assert it raises.

        Args:
            expected: Exception type the call must raise
            match: Substring the exception message must contain

        Returns:
            The raised exception, for further assertions

        """
        if not callable(self.actual):
            raise AssertionFailedError(
                f"Expected a callable, but found {self.actual!r}", actual=self.actual
            )
        try:
            self.actual()
        except expected as exc:
            if match is not None and match not in str(exc):
                raise AssertionFailedError(
                    f"Expected {type(exc).__name__} message to contain {match!r}, "
                    f"but was {str(exc)!r}",
                    expected=match,
                    actual=str(exc),
                ) from exc
            return exc
        except Exception as exc:
            raise AssertionFailedError(
                f"Expected {expected.__name__}, "
                f"but {type(exc).__name__} was raised: {exc}",
                expected=expected,
                actual=exc,
            ) from exc
        raise AssertionFailedError(
            f"Expected {expected.__name__} to be raised, but nothing was raised",
            expected=expected,
        )

    def not_to_raise(self) -> Any:
        """Call the actual value and assert it returns normally.

        Returns:
            Whatever the call returned

        """
        if not callable(self.actual):
            raise AssertionFailedError(
                f"Expected a callable, but found {self.actual!r}", actual=self.actual
            )
        try:
            return self.actual()
        except Exception as exc:
            raise AssertionFailedError(
                f"Expected no exception, but {type(exc).__name__} was raised: {exc}",
                actual=exc,
            ) from exc


def expect[T](actual: T) -> Expectation[T]:
    """Start an expectation about a value."""
    return Expectation(actual)
