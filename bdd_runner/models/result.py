"""Models for test execution results."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Literal, assert_never

from bdd_runner.errors import HookKind
from bdd_runner.models.metadata import TestMetadata


@dataclass(frozen=True)
class Pass:
    """The example passed."""

    @property
    def status(self) -> Literal["pass"]:
        """Status name used by reporters."""
        return "pass"


@dataclass(frozen=True)
class Fail:
    """The example failed, optionally with the captured error."""

    error: BaseException | None = None

    @property
    def status(self) -> Literal["fail"]:
        """Status name used by reporters."""
        return "fail"

    @property
    def message(self) -> str:
        """Human-readable failure message."""
        if self.error is None:
            return "Failed without an error"
        return str(self.error) or type(self.error).__name__


@dataclass(frozen=True)
class Skipped:
    """The example was not executed."""

    reason: str

    @property
    def status(self) -> Literal["skipped"]:
        """Status name used by reporters."""
        return "skipped"


type TestResult = Pass | Fail | Skipped


def is_pass(result: TestResult) -> bool:
    """Check if a result is a pass."""
    return isinstance(result, Pass)


def is_fail(result: TestResult) -> bool:
    """Check if a result is a failure."""
    return isinstance(result, Fail)


def is_skipped(result: TestResult) -> bool:
    """Check if a result is skipped."""
    return isinstance(result, Skipped)


@dataclass(frozen=True, kw_only=True)
class HookFailure:
    """A hook failure that is not attributed to any example.

    Recorded for afterAll hooks, whose failures must not rewrite the results
    of examples that already completed.
    """

    hook: HookKind
    error: BaseException


@dataclass(frozen=True, kw_only=True)
class ExampleResult:
    """Result of executing a single example."""

    description: str
    result: Pass | Fail | Skipped
    duration: float
    metadata: TestMetadata = field(default_factory=TestMetadata)


@dataclass(frozen=True, kw_only=True)
class GroupResult:
    """Result of executing a group, mirroring its children in order."""

    description: str
    children: Sequence["ExampleResult | GroupResult"] = ()
    metadata: TestMetadata = field(default_factory=TestMetadata)
    hook_errors: Sequence[HookFailure] = ()


type TestResultNode = ExampleResult | GroupResult


def collect_results(node: TestResultNode) -> Sequence[TestResult]:
    """Flatten a result tree into its example results, in tree order."""
    match node:
        case ExampleResult():
            return [node.result]
        case GroupResult():
            return [
                result for child in node.children for result in collect_results(child)
            ]
        case _:
            assert_never(node)


def collect_hook_failures(node: TestResultNode) -> Sequence[HookFailure]:
    """Collect every group-level hook failure in a result tree."""
    match node:
        case ExampleResult():
            return []
        case GroupResult():
            return [
                *node.hook_errors,
                *(f for child in node.children for f in collect_hook_failures(child)),
            ]
        case _:
            assert_never(node)


def count_passed(node: TestResultNode) -> int:
    """Count passed examples in a result tree."""
    return sum(1 for result in collect_results(node) if is_pass(result))


def count_failed(node: TestResultNode) -> int:
    """Count failed examples in a result tree."""
    return sum(1 for result in collect_results(node) if is_fail(result))


def count_skipped(node: TestResultNode) -> int:
    """Count skipped examples in a result tree."""
    return sum(1 for result in collect_results(node) if is_skipped(result))


def count_total(node: TestResultNode) -> int:
    """Count all examples in a result tree."""
    return len(collect_results(node))


def iter_examples(
    nodes: Iterable[TestResultNode], path: Sequence[str] = ()
) -> Iterable[tuple[Sequence[str], ExampleResult]]:
    """Yield every example result with its chain of descriptions."""
    for node in nodes:
        match node:
            case ExampleResult():
                yield (*path, node.description), node
            case GroupResult():
                yield from iter_examples(node.children, (*path, node.description))
            case _:
                assert_never(node)
