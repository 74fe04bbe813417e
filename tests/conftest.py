"""Pytest configuration, shared fixtures & custom summary hook.

Also ensures the project root is on sys.path for imports.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'import taskanneal.*' works
_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from taskanneal.models import ProblemInstance  # noqa: E402
from taskanneal.settings import AnnealSettings  # noqa: E402


@pytest.fixture
def three_tasks() -> ProblemInstance:
    """Deadlines 10/20/30, durations 5, profits 10."""
    return ProblemInstance.from_lists([10, 20, 30], [5, 5, 5], [10.0, 10.0, 10.0])


@pytest.fixture
def fast_settings() -> AnnealSettings:
    return AnnealSettings(
        max_rejections=4,
        epoch_size_factor=0.5,
        alpha=0.9,
        streams=3,
        max_workers=1,
    )


def pytest_terminal_summary(
    terminalreporter: pytest.TerminalReporter,
    exitstatus: int,
    config: pytest.Config,
) -> None:  # noqa: D401
    """Append a compact custom summary at the end of test session."""
    stats = terminalreporter.stats
    collected = terminalreporter._numcollected  # type: ignore[attr-defined]
    passed = len(stats.get("passed", []))
    failed = len(stats.get("failed", []))
    errors = len(stats.get("error", []))
    skipped = len(stats.get("skipped", []))

    terminalreporter.section("Custom summary", sep="=")
    terminalreporter.write_line(
        f"Collected: {collected} | Passed: {passed} | Failed: {failed} | "
        f"Errors: {errors} | Skipped: {skipped}"
    )
    if failed:
        terminalreporter.write_line("Failed tests:")
        for rep in stats["failed"]:
            terminalreporter.write_line(f"  - {rep.nodeid}")
