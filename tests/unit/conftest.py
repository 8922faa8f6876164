"""Shared helpers for unit tests."""

from collections.abc import Callable

import pytest


class Counter:
    """Callable that counts how many times it was invoked."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


@pytest.fixture
def counter() -> Counter:
    """Create a fresh call counter."""
    return Counter()


@pytest.fixture
def make_counter() -> Callable[[], Counter]:
    """Create call counters on demand."""
    return Counter
