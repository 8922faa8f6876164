"""Pure transforms over test forests: focus, tags, description, order."""

import random
from collections.abc import Sequence
from dataclasses import replace
from typing import assert_never

from bdd_runner.models.metadata import normalize_tags
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
    TestNode,
    unfocus,
)


def has_focused(node: TestNode) -> bool:
    """Check if a node or any of its descendants is focused."""
    match node:
        case FocusedExample() | FocusedGroup():
            return True
        case Group():
            return any(has_focused(child) for child in node.children)
        case Example():
            return False
        case BeforeAllHook() | BeforeEachHook() | AfterEachHook() | AfterAllHook():
            return False
        case _:
            assert_never(node)


def filter_focused(nodes: Sequence[TestNode]) -> Sequence[TestNode]:
    """Keep only focused subtrees when anything in the forest is focused.

    Focused nodes are turned into ordinary ones and groups left without any
    surviving descendant are pruned. A focused group keeps its whole subtree
    unless it contains focused descendants of its own, in which case only
    those are kept. A forest without focus is returned as-is.
    """
    if not any(has_focused(node) for node in nodes):
        return nodes
    return _select_focused(nodes)


def _select_focused(nodes: Sequence[TestNode]) -> list[ExecutableNode]:
    selected: list[ExecutableNode] = []
    for node in nodes:
        match node:
            case FocusedExample():
                selected.append(unfocus(node))
            case FocusedGroup():
                if any(has_focused(child) for child in node.children):
                    children = _select_focused(node.children)
                else:
                    children = _unfocus_all(node.children)
                selected.append(replace(unfocus(node), children=children))
            case Group():
                if children := _select_focused(node.children):
                    selected.append(replace(node, children=children))
            case Example():
                pass
            case BeforeAllHook() | BeforeEachHook() | AfterEachHook() | AfterAllHook():
                pass
            case _:
                assert_never(node)
    return selected


def _unfocus_all(nodes: Sequence[ExecutableNode]) -> list[ExecutableNode]:
    unfocused: list[ExecutableNode] = []
    for node in nodes:
        plain = unfocus(node)
        if isinstance(plain, Group):
            plain = replace(plain, children=_unfocus_all(plain.children))
        unfocused.append(plain)
    return unfocused


def filter_by_tags(
    tags: Sequence[str], nodes: Sequence[TestNode]
) -> Sequence[TestNode]:
    """Keep nodes whose inherited tags include every requested tag.

    A node's effective tags are its own tags appended to its ancestors' tags.
    Groups survive when they match or when any child survives; examples only
    when they match. Hook markers never survive.
    """
    wanted = normalize_tags(tags)
    if not wanted:
        return nodes
    return [
        kept
        for node in nodes
        if (kept := _filter_tagged(wanted, (), node)) is not None
    ]


def _filter_tagged(
    wanted: Sequence[str], inherited: Sequence[str], node: TestNode
) -> ExecutableNode | None:
    match node:
        case Example():
            return node if _satisfies(wanted, inherited, node.metadata.tags) else None
        case Group():
            combined = _append_distinct(inherited, node.metadata.tags)
            children = [
                kept
                for child in node.children
                if (kept := _filter_tagged(wanted, combined, child)) is not None
            ]
            if children or _satisfies(wanted, inherited, node.metadata.tags):
                return replace(node, children=children)
            return None
        case BeforeAllHook() | BeforeEachHook() | AfterEachHook() | AfterAllHook():
            return None
        case _:
            assert_never(node)


def _append_distinct(existing: Sequence[str], extra: Sequence[str]) -> list[str]:
    combined = list(existing)
    combined.extend(tag for tag in extra if tag not in existing)
    return combined


def _satisfies(
    wanted: Sequence[str], inherited: Sequence[str], own: Sequence[str]
) -> bool:
    combined = _append_distinct(inherited, own)
    return all(tag in combined for tag in wanted)


def filter_by_description(text: str, nodes: Sequence[TestNode]) -> Sequence[TestNode]:
    """Keep nodes whose description contains the text, case-insensitively.

    A matching group is kept whole; other groups keep only matching
    descendants. Blank text leaves the forest unchanged.
    """
    if not text.strip():
        return nodes
    needle = text.lower()
    return [
        kept
        for node in nodes
        if (kept := _filter_described(needle, node)) is not None
    ]


def _filter_described(needle: str, node: TestNode) -> ExecutableNode | None:
    match node:
        case Example():
            return unfocus(node) if needle in node.description.lower() else None
        case Group():
            if needle in node.description.lower():
                return unfocus(node)
            children = [
                kept
                for child in node.children
                if (kept := _filter_described(needle, child)) is not None
            ]
            return replace(unfocus(node), children=children) if children else None
        case BeforeAllHook() | BeforeEachHook() | AfterEachHook() | AfterAllHook():
            return None
        case _:
            assert_never(node)


def shuffle(seed: int, nodes: Sequence[TestNode]) -> Sequence[TestNode]:
    """Deterministically reorder siblings at every level using the seed."""
    return _shuffle(random.Random(seed), nodes)


def _shuffle(rng: random.Random, nodes: Sequence[TestNode]) -> list[TestNode]:
    shuffled = list(nodes)
    rng.shuffle(shuffled)
    return [
        replace(node, children=_shuffle(rng, node.children))
        if isinstance(node, Group)
        else node
        for node in shuffled
    ]


def count_examples(nodes: Sequence[TestNode]) -> int:
    """Count examples (focused or not) in a forest."""
    return sum(_count_examples(node) for node in nodes)


def _count_examples(node: TestNode) -> int:
    match node:
        case Example():
            return 1
        case Group():
            return count_examples(node.children)
        case BeforeAllHook() | BeforeEachHook() | AfterEachHook() | AfterAllHook():
            return 0
        case _:
            assert_never(node)


def count_groups(nodes: Sequence[TestNode]) -> int:
    """Count groups (focused or not) in a forest."""
    return sum(_count_groups(node) for node in nodes)


def _count_groups(node: TestNode) -> int:
    match node:
        case Example():
            return 0
        case Group():
            return 1 + count_groups(node.children)
        case BeforeAllHook() | BeforeEachHook() | AfterEachHook() | AfterAllHook():
            return 0
        case _:
            assert_never(node)
