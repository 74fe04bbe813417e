"""Tests for instance and schedule file handling.

Each test writes a small file under pytest's ``tmp_path`` and asserts either a
successful parse or the correct exception.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from taskanneal.errors import InstanceError
from taskanneal.generator import generate_instance
from taskanneal.models import ProblemInstance
from taskanneal.parser import (
    format_candidate,
    load_instance,
    read_candidate,
    validate_instance,
    write_candidate,
    write_instance,
)


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "instance.in"
    path.write_text(content, encoding="utf-8")
    return path


def test_parse_simple_instance(tmp_path: Path) -> None:
    path = _write(tmp_path, "3\n1 10 5 10\n2 20 5 10.5\n3 30 5 99.999\n")
    inst = load_instance(path)
    assert inst.size == 3
    assert [t.deadline for t in inst.tasks] == [10, 20, 30]
    assert [t.duration for t in inst.tasks] == [5, 5, 5]
    assert inst.tasks[2].profit == pytest.approx(99.999)
    assert inst.horizon == 1440


def test_written_instance_loads_back(tmp_path: Path) -> None:
    inst = generate_instance(25, 3)
    path = tmp_path / "gen.in"
    write_instance(inst, path)
    assert load_instance(path) == inst


@pytest.mark.parametrize(
    "content",
    [
        "",  # empty file
        "x\n",  # invalid task count
        "2\n1 10 5 10\n",  # declares 2 tasks, provides 1
        "2\n1 10 5 10\n3 10 5 10\n",  # task lines not numbered 1..n
        "1\n1 10 five 10\n",  # non-numeric duration
        "1\n1 0 5 10\n",  # deadline below 1
        "1\n1 1441 5 10\n",  # deadline past the horizon
        "1\n1 10 61 10\n",  # duration above 60
        "1\n1 10 5 0\n",  # profit not positive
        "1\n1 10 5 100\n",  # profit not below 100
    ],
)
def test_parse_errors(tmp_path: Path, content: str) -> None:
    with pytest.raises(InstanceError):
        load_instance(_write(tmp_path, content))


def test_validation_can_be_skipped(tmp_path: Path) -> None:
    inst = load_instance(_write(tmp_path, "1\n1 10 61 10\n"), validate=False)
    assert inst.tasks[0].duration == 61


def test_missing_file_is_instance_error(tmp_path: Path) -> None:
    with pytest.raises(InstanceError):
        load_instance(tmp_path / "nope.in")


def test_size_presets() -> None:
    assert validate_instance(generate_instance(80, 0), preset=100) == []
    assert validate_instance(generate_instance(75, 0), preset=100)
    assert validate_instance(generate_instance(120, 0), preset=150) == []
    assert validate_instance(generate_instance(120, 0), preset=200)
    assert validate_instance(generate_instance(10, 0), preset=7) == ["unknown preset 7"]


def test_schedule_file_is_one_indexed(tmp_path: Path) -> None:
    path = tmp_path / "x.out"
    write_candidate([2, 0, 1], path)
    assert path.read_text().split() == ["3", "1", "2"]
    assert read_candidate(path) == [2, 0, 1]
    assert format_candidate([2, 0, 1]) == "3 1 2"


def test_empty_schedule_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.out"
    write_candidate([], path)
    assert read_candidate(path) == []


def test_generator_is_seeded_and_in_range() -> None:
    a = generate_instance(150, 12)
    assert a == generate_instance(150, 12)
    assert a != generate_instance(150, 13)
    assert validate_instance(a) == []
    assert max(t.deadline for t in a.tasks) <= 1440
    assert generate_instance(0) == ProblemInstance(tasks=())
