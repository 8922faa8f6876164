"""CLI entry point for running behavior-driven suites."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from bdd_runner.config import RunConfig
from bdd_runner.discovery import discover
from bdd_runner.errors import BddRunnerError, SuiteLoadError
from bdd_runner.executor import ExecutionSummary, Executor
from bdd_runner.models.result import (
    Fail,
    Skipped,
    TestResultNode,
    collect_hook_failures,
    iter_examples,
)

STATUS_SYMBOLS = {
    "pass": "✓",
    "fail": "✗",
    "skipped": "-",
}

EXIT_LOAD_ERROR = 2


def log_results_summary(
    log: logging.Logger,
    results: Sequence[TestResultNode],
    summary: ExecutionSummary,
) -> None:
    """Log a formatted summary of example results and hook failures."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for path, example in iter_examples(results):
        symbol = STATUS_SYMBOLS.get(example.result.status, "?")
        log.info("%s %s (%.2fs)", symbol, " > ".join(path), example.duration)
        match example.result:
            case Fail() as failure:
                log.info("  Message: %s", failure.message)
            case Skipped(reason=reason):
                log.info("  Reason: %s", reason)

    for node in results:
        for hook_failure in collect_hook_failures(node):
            log.info("! %s", hook_failure.error)

    log.info(summary.format())


def format_output(
    results: Sequence[TestResultNode], summary: ExecutionSummary
) -> dict[str, Any]:
    """Format results for JSON output."""
    all_results: list[dict[str, Any]] = []
    for path, example in iter_examples(results):
        match example.result:
            case Fail() as failure:
                message: str | None = failure.message
            case Skipped(reason=reason):
                message = reason
            case _:
                message = None
        all_results.append(
            {
                "path": " > ".join(path),
                "status": example.result.status,
                "duration": example.duration,
                "message": message,
            }
        )

    return {
        "total": summary.total,
        "passed": summary.passed,
        "failed": summary.failed,
        "skipped": summary.skipped,
        "hook_errors": summary.hook_errors,
        "duration": summary.duration,
        "results": all_results,
    }


async def run(paths: Sequence[Path], config: RunConfig) -> int:
    """Discover, filter and execute suites; return the exit code."""
    log = logging.getLogger("bdd_runner")

    try:
        suites = discover(paths)
    except SuiteLoadError as exc:
        log.error("%s", exc)
        return EXIT_LOAD_ERROR

    prepared = config.prepare(suites)
    if not prepared:
        log.info("No examples match the selection")
        print(json.dumps({"total": 0, "results": []}))
        return 0

    results, summary = await Executor().run_with_summary(prepared)

    log_results_summary(log, results, summary)
    print(json.dumps(format_output(results, summary), indent=2))

    return summary.exit_code


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Run behavior-driven test suites")
    parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Spec files, or directories searched for *_spec.py / spec_*.py",
    )
    parser.add_argument(
        "--tag",
        "-t",
        action="append",
        default=[],
        dest="tags",
        help="Run only examples carrying this tag (repeatable; all must match)",
    )
    parser.add_argument(
        "--filter",
        "-f",
        dest="example_filter",
        default=None,
        help="Run only examples whose description contains this text",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Randomize example order with this seed",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config = RunConfig(
        tags=args.tags, example_filter=args.example_filter, seed=args.seed
    )
    try:
        exit_code = asyncio.run(run(paths=args.paths, config=config))
    except BddRunnerError as exc:
        logging.getLogger("bdd_runner").critical("Fatal error: %s", exc, exc_info=exc)
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
