"""Declarative test tree: examples, groups, focus variants and hook markers."""

from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, assert_never

from bdd_runner.models.metadata import TestMetadata

if TYPE_CHECKING:
    from bdd_runner.models.result import TestResult

type Hook = Callable[[], Awaitable[None]]
type TestExecution = Callable[[], Awaitable["TestResult"]]


@dataclass(frozen=True, kw_only=True)
class GroupHooks:
    """Setup and teardown actions attached to a group, in declaration order."""

    before_all: Sequence[Hook] = ()
    before_each: Sequence[Hook] = ()
    after_each: Sequence[Hook] = ()
    after_all: Sequence[Hook] = ()

    def add_before_all(self, hook: Hook) -> "GroupHooks":
        """Append a beforeAll hook."""
        return replace(self, before_all=(*self.before_all, hook))

    def add_before_each(self, hook: Hook) -> "GroupHooks":
        """Append a beforeEach hook."""
        return replace(self, before_each=(*self.before_each, hook))

    def add_after_each(self, hook: Hook) -> "GroupHooks":
        """Append an afterEach hook."""
        return replace(self, after_each=(*self.after_each, hook))

    def add_after_all(self, hook: Hook) -> "GroupHooks":
        """Append an afterAll hook."""
        return replace(self, after_all=(*self.after_all, hook))


@dataclass(frozen=True, kw_only=True)
class Example:
    """A single test case.

    When skip_reason is set the example is pending: the engine records it as
    skipped and never invokes the execution or any hook for it.
    """

    description: str
    execution: TestExecution = field(repr=False)
    metadata: TestMetadata = field(default_factory=TestMetadata)
    skip_reason: str | None = None


@dataclass(frozen=True, kw_only=True)
class Group:
    """A named collection of examples and nested groups."""

    description: str
    hooks: GroupHooks = field(default_factory=GroupHooks, repr=False)
    children: Sequence["ExecutableNode"] = ()
    metadata: TestMetadata = field(default_factory=TestMetadata)


@dataclass(frozen=True, kw_only=True)
class FocusedExample(Example):
    """An example that runs exclusively when focus is in effect."""


@dataclass(frozen=True, kw_only=True)
class FocusedGroup(Group):
    """A group whose examples run exclusively when focus is in effect."""


@dataclass(frozen=True)
class BeforeAllHook:
    """Declaration-time marker for a beforeAll hook."""

    hook: Hook


@dataclass(frozen=True)
class BeforeEachHook:
    """Declaration-time marker for a beforeEach hook."""

    hook: Hook


@dataclass(frozen=True)
class AfterEachHook:
    """Declaration-time marker for an afterEach hook."""

    hook: Hook


@dataclass(frozen=True)
class AfterAllHook:
    """Declaration-time marker for an afterAll hook."""

    hook: Hook


type HookMarker = BeforeAllHook | BeforeEachHook | AfterEachHook | AfterAllHook
type ExecutableNode = Example | Group | FocusedExample | FocusedGroup
type TestNode = ExecutableNode | HookMarker

HOOK_MARKER_TYPES = (BeforeAllHook, BeforeEachHook, AfterEachHook, AfterAllHook)


def is_hook_marker(node: object) -> bool:
    """Check whether a node is an unfolded hook marker."""
    return isinstance(node, HOOK_MARKER_TYPES)


def is_focused(node: TestNode) -> bool:
    """Check whether the node itself carries a focus marker."""
    return isinstance(node, FocusedExample | FocusedGroup)


def description(node: TestNode) -> str:
    """Get the description of a node."""
    match node:
        case Example() | Group():
            return node.description
        case BeforeAllHook():
            return "beforeAll hook"
        case BeforeEachHook():
            return "beforeEach hook"
        case AfterEachHook():
            return "afterEach hook"
        case AfterAllHook():
            return "afterAll hook"
        case _:
            assert_never(node)


def metadata(node: TestNode) -> TestMetadata:
    """Get the metadata of a node; hook markers have empty metadata."""
    match node:
        case Example() | Group():
            return node.metadata
        case BeforeAllHook() | BeforeEachHook() | AfterEachHook() | AfterAllHook():
            return TestMetadata()
        case _:
            assert_never(node)


def with_metadata[N: TestNode](node: N, new_metadata: TestMetadata) -> N:
    """Return the node with its metadata replaced; hook markers are unchanged."""
    match node:
        case Example() | Group():
            return replace(node, metadata=new_metadata)
        case BeforeAllHook() | BeforeEachHook() | AfterEachHook() | AfterAllHook():
            return node
        case _:
            assert_never(node)


def unfocus(node: ExecutableNode) -> Example | Group:
    """Convert a focused node into its ordinary counterpart."""
    match node:
        case FocusedExample():
            return Example(
                description=node.description,
                execution=node.execution,
                metadata=node.metadata,
                skip_reason=node.skip_reason,
            )
        case FocusedGroup():
            return Group(
                description=node.description,
                hooks=node.hooks,
                children=node.children,
                metadata=node.metadata,
            )
        case Example() | Group():
            return node
        case _:
            assert_never(node)


def add_tags[N: TestNode](node: N, tags: Iterable[str]) -> N:
    """Add tags to the node metadata."""
    return with_metadata(node, metadata(node).add_tags(tags))


def add_tag[N: TestNode](node: N, tag: str) -> N:
    """Add a single tag to the node metadata."""
    return add_tags(node, [tag])


def contains_tag(node: TestNode, tag: str) -> bool:
    """Check whether the node's own metadata carries the tag."""
    return metadata(node).has_tag(tag)


def contains_any_tag(node: TestNode, tags: Iterable[str]) -> bool:
    """Check whether the node's own metadata carries any of the tags."""
    return metadata(node).has_any_tag(tags)


def set_trait[N: TestNode](node: N, key: str, value: str) -> N:
    """Set a trait in the node metadata."""
    return with_metadata(node, metadata(node).set_trait(key, value))
