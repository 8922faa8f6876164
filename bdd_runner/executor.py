"""Execution engine turning a test forest into a result forest."""

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import assert_never

from bdd_runner.errors import (
    AfterAllHookError,
    BeforeAllHookError,
    ContractViolationError,
)
from bdd_runner.hooks import HookChain
from bdd_runner.models.result import (
    ExampleResult,
    Fail,
    GroupResult,
    HookFailure,
    Pass,
    Skipped,
    TestResult,
    TestResultNode,
    collect_hook_failures,
    count_failed,
    count_passed,
    count_skipped,
    count_total,
)
from bdd_runner.models.tree import (
    HOOK_MARKER_TYPES,
    Example,
    ExecutableNode,
    Group,
    TestNode,
    description,
)
from bdd_runner.transforms import count_examples, count_groups

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ExecutionSummary:
    """Aggregate counts of a completed run."""

    total: int
    passed: int
    failed: int
    skipped: int
    hook_errors: int = 0
    duration: float = 0.0

    @classmethod
    def from_results(
        cls, results: Sequence[TestResultNode], duration: float
    ) -> "ExecutionSummary":
        """Tally a result forest."""
        return cls(
            total=sum(count_total(node) for node in results),
            passed=sum(count_passed(node) for node in results),
            failed=sum(count_failed(node) for node in results),
            skipped=sum(count_skipped(node) for node in results),
            hook_errors=sum(len(collect_hook_failures(node)) for node in results),
            duration=duration,
        )

    @property
    def all_passed(self) -> bool:
        """True when nothing failed and nothing was skipped."""
        return self.failed == 0 and self.skipped == 0 and self.hook_errors == 0

    @property
    def any_failed(self) -> bool:
        """True when an example or a group-level hook failed."""
        return self.failed > 0 or self.hook_errors > 0

    @property
    def exit_code(self) -> int:
        """Process exit code for the run (0 = success, 1 = failure)."""
        return 1 if self.any_failed else 0

    def format(self) -> str:
        """One-line human-readable summary."""
        text = (
            f"{self.total} examples, {self.failed} failures, "
            f"{self.skipped} skipped ({self.duration:.2f}s)"
        )
        if self.hook_errors:
            text += f", {self.hook_errors} hook error(s)"
        return text


@dataclass(frozen=True, kw_only=True)
class Executor:
    """Runs test forests sequentially, in declared order.

    Every hook and example body is awaited to completion before the next
    step starts. Test and hook failures are captured into the result tree;
    only a malformed tree raises out of run().
    """

    clock: Callable[[], float] = field(default=time.perf_counter, repr=False)

    async def run(self, nodes: Sequence[TestNode]) -> Sequence[TestResultNode]:
        """Execute a forest and return the congruent result forest.

        Args:
            nodes: Hook-folded test nodes, already filtered if needed

        Returns:
            One result node per input node, in the same order

        Raises:
            ContractViolationError: If the forest contains a hook marker or
                an object that is not a test node

        """
        if not nodes:
            log.info("No examples to run")
            return []

        _require_well_formed(nodes)
        log.info(
            "Running %d example(s) in %d group(s)...",
            count_examples(nodes),
            count_groups(nodes),
        )
        return [await self.run_node(node) for node in nodes]

    async def run_with_summary(
        self, nodes: Sequence[TestNode]
    ) -> tuple[Sequence[TestResultNode], ExecutionSummary]:
        """Execute a forest and tally the outcome."""
        started = self.clock()
        results = await self.run(nodes)
        summary = ExecutionSummary.from_results(results, self.clock() - started)
        log.info("Test execution completed: %s", summary.format())
        return results, summary

    async def run_node(
        self, node: TestNode, chain: HookChain | None = None
    ) -> TestResultNode:
        """Execute one node under the beforeEach/afterEach chain of its parents."""
        chain = chain or HookChain.empty()
        match _require_executable(node):
            case Example() as example:
                return await self._run_example(example, chain)
            case Group() as group:
                return await self._run_group(group, chain)
            case unknown:
                assert_never(unknown)

    async def _run_group(self, group: Group, chain: HookChain) -> GroupResult:
        log.debug("Entering group: %s", group.description)
        child_chain = chain.nest(group.hooks)

        if (setup_error := await self._run_before_all(group)) is None:
            children = [
                await self.run_node(child, child_chain) for child in group.children
            ]
        else:
            children = [
                _fail_unvisited(child, setup_error) for child in group.children
            ]

        hook_errors = await self._run_after_all(group)
        log.debug("Leaving group: %s", group.description)

        return GroupResult(
            description=group.description,
            children=children,
            metadata=group.metadata,
            hook_errors=hook_errors,
        )

    async def _run_before_all(self, group: Group) -> BeforeAllHookError | None:
        """Run beforeAll hooks, stopping at the first failure."""
        for hook in group.hooks.before_all:
            try:
                await hook()
            except Exception as exc:
                log.error(
                    "beforeAll hook failed in '%s'; its examples will not run",
                    group.description,
                    exc_info=exc,
                )
                return BeforeAllHookError(group.description, exc)
        return None

    async def _run_after_all(self, group: Group) -> Sequence[HookFailure]:
        """Run every afterAll hook, collecting failures."""
        failures: list[HookFailure] = []
        for hook in group.hooks.after_all:
            try:
                await hook()
            except Exception as exc:
                log.error(
                    "afterAll hook failed in '%s'", group.description, exc_info=exc
                )
                failures.append(
                    HookFailure(
                        hook="afterAll",
                        error=AfterAllHookError(group.description, exc),
                    )
                )
        return failures

    async def _run_example(self, example: Example, chain: HookChain) -> ExampleResult:
        if example.skip_reason is not None:
            log.debug("Skipped: %s (%s)", example.description, example.skip_reason)
            return ExampleResult(
                description=example.description,
                result=Skipped(example.skip_reason),
                duration=0.0,
                metadata=example.metadata,
            )

        outcome: TestResult | None = None
        error: Exception | None = None
        duration = 0.0

        try:
            for hook in chain.before_each:
                await hook()
        except Exception as exc:
            log.warning(
                "beforeEach hook failed for '%s': %s", example.description, exc
            )
            error = exc
        else:
            started = self.clock()
            try:
                returned = await example.execution()
            except Exception as exc:
                error = exc
            else:
                outcome = _require_result(example, returned)
            finally:
                duration = self.clock() - started

        for hook in chain.after_each:
            try:
                await hook()
            except Exception as exc:
                log.warning(
                    "afterEach hook failed for '%s': %s", example.description, exc
                )
                if error is None and not isinstance(outcome, Fail):
                    error = exc

        result = Fail(error) if error is not None or outcome is None else outcome
        log.debug(
            "Example '%s': %s (%.3fs)", example.description, result.status, duration
        )
        return ExampleResult(
            description=example.description,
            result=result,
            duration=duration,
            metadata=example.metadata,
        )


def _require_executable(node: object) -> ExecutableNode:
    """Reject hook markers and foreign objects before execution."""
    if isinstance(node, HOOK_MARKER_TYPES):
        raise ContractViolationError(
            f"Unfolded {description(node)} reached the executor; hook markers "
            "must be folded into their enclosing group"
        )
    if not isinstance(node, Example | Group):
        raise ContractViolationError(
            f"Malformed test tree: {type(node).__name__} is not a test node"
        )
    return node


def _require_well_formed(nodes: Sequence[object]) -> None:
    """Check a whole forest before any hook or body runs."""
    for node in nodes:
        if isinstance(group := _require_executable(node), Group):
            _require_well_formed(group.children)


def _require_result(example: Example, returned: object) -> TestResult:
    """Check that an execution produced a test result."""
    if not isinstance(returned, Pass | Fail | Skipped):
        raise ContractViolationError(
            f"Execution of '{example.description}' returned {returned!r}, "
            "expected a test result"
        )
    return returned


def _fail_unvisited(node: ExecutableNode, error: BeforeAllHookError) -> TestResultNode:
    """Mirror a subtree whose group setup failed, failing every example."""
    match _require_executable(node):
        case Example() as example:
            return ExampleResult(
                description=example.description,
                result=Fail(error),
                duration=0.0,
                metadata=example.metadata,
            )
        case Group() as group:
            return GroupResult(
                description=group.description,
                children=[_fail_unvisited(child, error) for child in group.children],
                metadata=group.metadata,
            )
        case unknown:
            assert_never(unknown)
