"""Resolution of the beforeEach/afterEach chain seen by each example."""

from collections.abc import Sequence
from dataclasses import dataclass

from bdd_runner.models.tree import GroupHooks, Hook


@dataclass(frozen=True, kw_only=True)
class HookChain:
    """Per-example hooks accumulated from every enclosing group.

    before_each runs outermost group first; after_each runs innermost group
    first, each group's own hooks keeping their declaration order.
    """

    before_each: Sequence[Hook] = ()
    after_each: Sequence[Hook] = ()

    @classmethod
    def empty(cls) -> "HookChain":
        """Chain for top-level nodes, outside any group."""
        return cls()

    def nest(self, hooks: GroupHooks) -> "HookChain":
        """Return the chain in effect for the children of a group."""
        return HookChain(
            before_each=(*self.before_each, *hooks.before_each),
            after_each=(*hooks.after_each, *self.after_each),
        )
