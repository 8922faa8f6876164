"""Tests for RunConfig."""

import logging

import pytest
from pydantic import ValidationError

from bdd_runner.config import RunConfig
from bdd_runner.dsl import describe, fit, it
from bdd_runner.models.tree import Group


def noop() -> None:
    """Do nothing."""


def names(nodes) -> list[str]:
    """Collect example descriptions depth-first."""
    found: list[str] = []
    for node in nodes:
        if isinstance(node, Group):
            found.extend(names(node.children))
        else:
            found.append(node.description)
    return found


@pytest.fixture
def suites() -> list:
    """Build a small forest with tags."""
    return [
        describe(
            "Users",
            it("signs up", noop, tags=["smoke"]),
            it("resets password", noop),
            it("deletes account", noop, tags=["smoke", "slow"]),
        ),
        describe("Billing", it("charges card", noop), tags=["smoke"]),
    ]


def test_defaults_select_everything(suites: list) -> None:
    """Default config keeps the forest as declared."""
    assert RunConfig().prepare(suites) is suites


def test_tags_are_normalized() -> None:
    """Tags are trimmed, lowercased and de-duplicated."""
    assert RunConfig(tags=[" Smoke", "smoke", ""]).tags == ("smoke",)


def test_single_tag_string() -> None:
    """A bare string counts as one tag."""
    assert RunConfig(tags="smoke").tags == ("smoke",)  # type: ignore[arg-type]


def test_is_frozen() -> None:
    """Config cannot be modified after construction."""
    config = RunConfig()

    with pytest.raises(ValidationError):
        config.seed = 1  # type: ignore[misc]


def test_rejects_unknown_options() -> None:
    """Misspelt options fail instead of being ignored."""
    with pytest.raises(ValidationError, match="tagz"):
        RunConfig(tagz=["smoke"])  # type: ignore[call-arg]


def test_filters_by_tag(suites: list) -> None:
    """Keeps examples carrying the tag directly or through their group."""
    prepared = RunConfig(tags=["smoke"]).prepare(suites)

    assert names(prepared) == ["signs up", "deletes account", "charges card"]


def test_combines_tag_and_description_filters(suites: list) -> None:
    """Both filters must hold."""
    prepared = RunConfig(tags=["smoke"], example_filter="ACCOUNT").prepare(suites)

    assert names(prepared) == ["deletes account"]


def test_focus_applies_before_other_filters(suites: list) -> None:
    """Focus restricts the forest before tags are considered."""
    focused = [*suites, describe("Admin", fit("bans user", noop))]

    assert names(RunConfig().prepare(focused)) == ["bans user"]
    assert names(RunConfig(tags=["smoke"]).prepare(focused)) == []


def test_seed_shuffles_deterministically(suites: list) -> None:
    """The same seed yields the same order and keeps every example."""
    first = names(RunConfig(seed=11).prepare(suites))
    second = names(RunConfig(seed=11).prepare(suites))

    assert first == second
    assert sorted(first) == sorted(names(suites))


def test_logs_applied_filters(
    suites: list, caplog: pytest.LogCaptureFixture
) -> None:
    """Logs each filter that is applied."""
    with caplog.at_level(logging.INFO):
        RunConfig(tags=["smoke"], example_filter="card", seed=3).prepare(suites)

    assert "Filtering examples by tags: smoke" in caplog.text
    assert "Filtering examples by description: card" in caplog.text
    assert "Randomizing example order with seed 3" in caplog.text
