"""Scoring model for candidate schedules.

A candidate is processed left to right starting at minute 0. Each task adds
its duration to the elapsed time; the first task that would finish past the
horizon ends the simulation, so only the fitting prefix is ever scored.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from taskanneal.errors import CandidateError
from taskanneal.models import ProblemInstance


@dataclass(frozen=True)
class ScheduledTask:
    """Timing of one task inside the fitting prefix of a candidate."""

    position: int
    task: int
    start: int
    end: int
    lateness: int
    contribution: float


def evaluate(instance: ProblemInstance, candidate: Sequence[int]) -> float:
    tasks = instance.tasks
    horizon = instance.horizon
    decay = instance.decay_rate
    profit = 0.0
    elapsed = 0
    for idx in candidate:
        task = tasks[idx]
        elapsed += task.duration
        if elapsed > horizon:
            return profit
        lateness = elapsed - task.deadline
        if lateness > 0:
            profit += task.profit * math.exp(-decay * lateness)
        else:
            profit += task.profit
    return profit


def check_candidate(instance: ProblemInstance, candidate: Sequence[int]) -> None:
    """Raise CandidateError when an index does not reference a task."""
    n = instance.size
    for pos, idx in enumerate(candidate):
        if not (0 <= idx < n):
            raise CandidateError(f"task index out of range at position {pos}: {idx}")


def fitting_length(instance: ProblemInstance, candidate: Sequence[int]) -> int:
    """Number of leading tasks that finish within the horizon."""
    durations = instance.durations
    elapsed = 0
    for pos, idx in enumerate(candidate):
        elapsed += durations[idx]
        if elapsed > instance.horizon:
            return pos
    return len(candidate)


def trim(instance: ProblemInstance, candidate: Sequence[int]) -> list[int]:
    """Return the prefix of ``candidate`` that fits within the horizon.

    ``evaluate(instance, trim(instance, c)) == evaluate(instance, c)`` holds
    for every valid candidate.

    Raises:
        CandidateError: If the candidate contains an out-of-range index.
    """
    check_candidate(instance, candidate)
    return list(candidate[: fitting_length(instance, candidate)])


def is_valid_for(instance: ProblemInstance, candidate: Sequence[int]) -> bool:
    """True when every index is valid and the whole candidate fits."""
    n = instance.size
    if any(not (0 <= idx < n) for idx in candidate):
        return False
    return fitting_length(instance, candidate) == len(candidate)


def schedule_rows(instance: ProblemInstance, candidate: Sequence[int]) -> list[ScheduledTask]:
    """Expand the fitting prefix into per-task timing rows.

    Used by charts and run logs; contributions sum to ``evaluate``.
    """
    rows: list[ScheduledTask] = []
    elapsed = 0
    for pos, idx in enumerate(candidate):
        task = instance.tasks[idx]
        start = elapsed
        elapsed += task.duration
        if elapsed > instance.horizon:
            break
        lateness = elapsed - task.deadline
        if lateness > 0:
            contribution = task.profit * math.exp(-instance.decay_rate * lateness)
        else:
            contribution = task.profit
        rows.append(ScheduledTask(pos, idx, start, elapsed, lateness, contribution))
    return rows
