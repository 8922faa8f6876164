"""Loading of suites from Python modules and files."""

import hashlib
import importlib
import importlib.util
import logging
import sys
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from types import ModuleType
from typing import Any

from bdd_runner.errors import SuiteLoadError
from bdd_runner.models.tree import Example, ExecutableNode, Group
from bdd_runner.transforms import count_examples, count_groups

log = logging.getLogger(__name__)

SPEC_FILE_PATTERNS = ("*_spec.py", "spec_*.py")


def _is_node(value: Any) -> bool:
    return isinstance(value, Example | Group)


def collect_suites(namespace: Mapping[str, Any]) -> Sequence[ExecutableNode]:
    """Collect public module-level suites, in definition order.

    A suite is a test node, or a list/tuple made only of test nodes. Nodes
    that are also nested inside another collected suite are dropped so they
    run once.
    """
    suites: list[ExecutableNode] = []
    for name, value in namespace.items():
        if name.startswith("_"):
            continue
        if _is_node(value):
            suites.append(value)
        elif isinstance(value, list | tuple) and value and all(map(_is_node, value)):
            suites.extend(value)

    nested = {id(child) for suite in suites for child in _descendants(suite)}
    unique: list[ExecutableNode] = []
    for suite in suites:
        if id(suite) not in nested and all(suite is not s for s in unique):
            unique.append(suite)
    return unique


def _descendants(node: ExecutableNode) -> Iterable[ExecutableNode]:
    if isinstance(node, Group):
        for child in node.children:
            yield child
            yield from _descendants(child)


def load_module_suites(module_name: str) -> Sequence[ExecutableNode]:
    """Import a module by name and collect its suites.

    Raises:
        SuiteLoadError: If the module cannot be imported

    """
    try:
        module = importlib.import_module(module_name)
    except Exception as exc:
        raise SuiteLoadError(f"Cannot import module '{module_name}': {exc}") from exc
    return collect_suites(vars(module))


def spec_module_name(path: Path) -> str:
    """Module name for a spec file, unique per resolved path."""
    digest = hashlib.sha1(str(path.resolve()).encode()).hexdigest()[:12]
    return f"bdd_runner_specs.{path.stem}_{digest}"


def load_file_suites(path: Path) -> Sequence[ExecutableNode]:
    """Import a Python file and collect its suites.

    Raises:
        SuiteLoadError: If the file is missing or fails to import

    """
    if not path.is_file():
        raise SuiteLoadError(f"Spec file not found: {path}")

    module_name = spec_module_name(path)
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise SuiteLoadError(f"Cannot load spec file: {path}")

    module: ModuleType = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        del sys.modules[module_name]
        raise SuiteLoadError(f"Error while importing {path}: {exc}") from exc
    return collect_suites(vars(module))


def find_spec_files(directory: Path) -> Sequence[Path]:
    """Find spec files below a directory, sorted by path."""
    found = {
        path for pattern in SPEC_FILE_PATTERNS for path in directory.rglob(pattern)
    }
    return sorted(found)


def discover(paths: Iterable[Path]) -> Sequence[ExecutableNode]:
    """Load suites from files and directories, in the order given."""
    suites: list[ExecutableNode] = []
    for path in paths:
        files = find_spec_files(path) if path.is_dir() else [path]
        for file in files:
            log.debug("Loading suites from %s", file)
            suites.extend(load_file_suites(file))

    log.info(
        "Found %d example(s) in %d group(s)",
        count_examples(suites),
        count_groups(suites),
    )
    return suites
