"""Builder functions for declaring suites.

Usage::

    suite = describe(
        "Calculator",
        before_each(reset),
        it("adds", lambda: expect(add(1, 2)).to_equal(3)),
        xit("divides by zero", lambda: ...),
        context("with memory", it("recalls", check_recall), tags=["memory"]),
    )

Bodies and hooks may be plain or async callables. describe() folds hook
markers into the group's hooks, so the tree it returns can go straight to
the executor.
"""

import inspect
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any

from bdd_runner.models.metadata import TestMetadata
from bdd_runner.models.result import Pass, TestResult
from bdd_runner.models.tree import (
    AfterAllHook,
    AfterEachHook,
    BeforeAllHook,
    BeforeEachHook,
    Example,
    ExecutableNode,
    FocusedExample,
    FocusedGroup,
    Group,
    GroupHooks,
    Hook,
    TestExecution,
    TestNode,
)

PENDING_REASON = "Test marked as pending with xit"

type Body = Callable[[], Awaitable[Any] | Any]


async def _settle(body: Body) -> None:
    if inspect.isawaitable(outcome := body()):
        await outcome


def _as_hook(body: Body) -> Hook:
    async def hook() -> None:
        await _settle(body)

    return hook


def _as_execution(body: Body) -> TestExecution:
    async def execution() -> TestResult:
        await _settle(body)
        return Pass()

    return execution


async def _never_run() -> TestResult:
    raise AssertionError("pending example body must not be executed")


def fold_hooks(
    children: Iterable[TestNode],
) -> tuple[GroupHooks, Sequence[ExecutableNode]]:
    """Split hook markers from nodes, folding them into GroupHooks in order."""
    hooks = GroupHooks()
    nodes: list[ExecutableNode] = []
    for child in children:
        match child:
            case BeforeAllHook(hook=hook):
                hooks = hooks.add_before_all(hook)
            case BeforeEachHook(hook=hook):
                hooks = hooks.add_before_each(hook)
            case AfterEachHook(hook=hook):
                hooks = hooks.add_after_each(hook)
            case AfterAllHook(hook=hook):
                hooks = hooks.add_after_all(hook)
            case _:
                nodes.append(child)
    return hooks, nodes


def describe(
    description: str, *children: TestNode, tags: Iterable[str] = ()
) -> Group:
    """Create a group; hook markers among the children are folded into it."""
    hooks, nodes = fold_hooks(children)
    return Group(
        description=description,
        hooks=hooks,
        children=nodes,
        metadata=TestMetadata.of_tags(tags),
    )


def context(
    description: str, *children: TestNode, tags: Iterable[str] = ()
) -> Group:
    """Alias for describe()."""
    return describe(description, *children, tags=tags)


def fdescribe(
    description: str, *children: TestNode, tags: Iterable[str] = ()
) -> FocusedGroup:
    """Create a focused group: when any focus exists, only focused nodes run."""
    hooks, nodes = fold_hooks(children)
    return FocusedGroup(
        description=description,
        hooks=hooks,
        children=nodes,
        metadata=TestMetadata.of_tags(tags),
    )


def fcontext(
    description: str, *children: TestNode, tags: Iterable[str] = ()
) -> FocusedGroup:
    """Alias for fdescribe()."""
    return fdescribe(description, *children, tags=tags)


def it(description: str, body: Body, *, tags: Iterable[str] = ()) -> Example:
    """Create an example; it passes when the body returns without raising."""
    return Example(
        description=description,
        execution=_as_execution(body),
        metadata=TestMetadata.of_tags(tags),
    )


def fit(description: str, body: Body, *, tags: Iterable[str] = ()) -> FocusedExample:
    """Create a focused example."""
    return FocusedExample(
        description=description,
        execution=_as_execution(body),
        metadata=TestMetadata.of_tags(tags),
    )


def xit(
    description: str, body: Body | None = None, *, tags: Iterable[str] = ()
) -> Example:
    """Create a pending example; its body is never called."""
    return Example(
        description=description,
        execution=_never_run,
        metadata=TestMetadata.of_tags(tags),
        skip_reason=PENDING_REASON,
    )


def pending(
    description: str, body: Body | None = None, *, tags: Iterable[str] = ()
) -> Example:
    """Alias for xit()."""
    return xit(description, body, tags=tags)


def before_all(body: Body) -> BeforeAllHook:
    """Declare a hook run once before a group's first example."""
    return BeforeAllHook(_as_hook(body))


def before_each(body: Body) -> BeforeEachHook:
    """Declare a hook run before every example of a group."""
    return BeforeEachHook(_as_hook(body))


def after_each(body: Body) -> AfterEachHook:
    """Declare a hook run after every example of a group."""
    return AfterEachHook(_as_hook(body))


def after_all(body: Body) -> AfterAllHook:
    """Declare a hook run once after a group's last example."""
    return AfterAllHook(_as_hook(body))
