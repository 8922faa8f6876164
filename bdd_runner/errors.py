"""Error taxonomy for suite loading and execution."""

from typing import Literal

type HookKind = Literal["beforeAll", "beforeEach", "afterEach", "afterAll"]


class BddRunnerError(Exception):
    """Base class for all bdd_runner errors."""


class ContractViolationError(BddRunnerError):
    """Raised when the engine receives a tree it cannot legally execute.

    This signals a bug in whatever built the tree (for example an unfolded
    hook marker), not a failing test, and is never captured into results.
    """


class SuiteLoadError(BddRunnerError):
    """Raised when suites cannot be loaded from a module or file."""


class HookError(BddRunnerError):
    """A group-scoped hook failed; the original error is the __cause__."""

    hook: HookKind = "beforeAll"

    def __init__(self, group: str, original: BaseException) -> None:
        self.group = group
        self.original = original
        super().__init__(f"{self.hook} hook failed in '{group}': {original}")
        self.__cause__ = original


class BeforeAllHookError(HookError):
    """A beforeAll hook failed; reported on every example of its group."""

    hook: HookKind = "beforeAll"


class AfterAllHookError(HookError):
    """An afterAll hook failed after its group's examples completed."""

    hook: HookKind = "afterAll"
