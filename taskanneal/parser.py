"""Reading and writing instance and schedule files.

Instance file (1-indexed tasks)::

    n
    1 deadline duration profit
    2 deadline duration profit
    ...

Schedule file: one 1-indexed task number per line.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Sequence

from taskanneal.errors import InstanceError
from taskanneal.models import HORIZON, ProblemInstance, Task

logger = logging.getLogger("taskanneal.parser")

DEADLINE_MIN, DEADLINE_MAX = 1, HORIZON
DURATION_MIN, DURATION_MAX = 1, 60
PROFIT_MIN_EXCLUSIVE, PROFIT_MAX_EXCLUSIVE = 0.0, 100.0

# size preset -> admissible task count
PRESETS = {
    100: (76, 100),
    150: (101, 150),
    200: (151, 200),
}


def validate_task(task: Task) -> str | None:
    """Return a description of the first violated range, or None."""
    if not (DEADLINE_MIN <= task.deadline <= DEADLINE_MAX):
        return f"deadline {task.deadline} outside [{DEADLINE_MIN}, {DEADLINE_MAX}]"
    if not (DURATION_MIN <= task.duration <= DURATION_MAX):
        return f"duration {task.duration} outside [{DURATION_MIN}, {DURATION_MAX}]"
    if not (PROFIT_MIN_EXCLUSIVE < task.profit < PROFIT_MAX_EXCLUSIVE):
        return (
            f"profit {task.profit} outside ({PROFIT_MIN_EXCLUSIVE}, {PROFIT_MAX_EXCLUSIVE})"
        )
    return None


def validate_instance(instance: ProblemInstance, preset: int | None = None) -> List[str]:
    """Collect all range violations of an instance.

    Args:
        instance: Instance to check.
        preset: Optional size preset (100, 150 or 200) constraining n.

    Returns:
        List of human readable problems; empty when the instance is valid.
    """
    problems: List[str] = []
    if preset is not None:
        if preset not in PRESETS:
            problems.append(f"unknown preset {preset}")
        else:
            lo, hi = PRESETS[preset]
            if not (lo <= instance.size <= hi):
                problems.append(f"task count {instance.size} outside [{lo}, {hi}] for preset {preset}")
    for idx, task in enumerate(instance.tasks):
        msg = validate_task(task)
        if msg is not None:
            problems.append(f"task {idx + 1}: {msg}")
    return problems


def parse_instance_text(text: str) -> ProblemInstance:
    tokens = text.split()
    if not tokens:
        raise InstanceError("empty instance file")
    try:
        n = int(tokens[0])
    except ValueError as e:
        raise InstanceError(f"invalid task count: {tokens[0]!r}") from e
    if n < 0:
        raise InstanceError(f"negative task count: {n}")
    body = tokens[1:]
    if len(body) < 4 * n:
        raise InstanceError(f"expected {n} task lines, got {len(body) // 4}")
    tasks: List[Task] = []
    for i in range(n):
        number, deadline, duration, profit = body[4 * i : 4 * i + 4]
        try:
            fields = (int(number), int(deadline), int(duration), float(profit))
        except ValueError as e:
            raise InstanceError(f"malformed task line {i + 1}: {e}") from e
        if fields[0] != i + 1:
            raise InstanceError(f"task line {i + 1} is numbered {number}")
        tasks.append(Task(*fields[1:]))
    return ProblemInstance(tasks=tuple(tasks))


def load_instance(
    file_path: str | Path, preset: int | None = None, validate: bool = True
) -> ProblemInstance:
    """Read an instance file.

    Raises:
        InstanceError: If the file is missing, malformed, or (with
            ``validate``) violates the value ranges or size preset.
    """
    path = Path(file_path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InstanceError(f"cannot read instance {path}: {e}") from e
    instance = parse_instance_text(text)
    if validate:
        problems = validate_instance(instance, preset)
        if problems:
            raise InstanceError(f"{path.name}: " + "; ".join(problems))
    logger.debug("Loaded %s with %d tasks", path, instance.size)
    return instance


def write_instance(instance: ProblemInstance, file_path: str | Path) -> None:
    lines = [str(instance.size)]
    for i, task in enumerate(instance.tasks, start=1):
        lines.append(f"{i} {task.deadline} {task.duration} {task.profit}")
    Path(file_path).write_text("\n".join(lines) + "\n", encoding="utf-8")


def read_candidate(file_path: str | Path) -> List[int]:
    """Read a 1-indexed schedule file into a 0-indexed candidate."""
    text = Path(file_path).read_text(encoding="utf-8")
    return [int(tok) - 1 for tok in text.split()]


def write_candidate(candidate: Iterable[int], file_path: str | Path) -> None:
    Path(file_path).write_text("".join(f"{idx + 1}\n" for idx in candidate), encoding="utf-8")


def format_candidate(candidate: Sequence[int]) -> str:
    return " ".join(str(idx + 1) for idx in candidate)
