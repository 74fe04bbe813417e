"""Core data structures for deadline-sensitive task selection.

This module defines:
    Task            -- immutable (deadline, duration, profit) record.
    ProblemInstance -- immutable container with all tasks for one instance.
    TakenSet        -- mutable scratch flags owned by a greedy solver run.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from taskanneal.errors import InstanceError

HORIZON = 1440  # minutes in the scheduling day
DECAY_RATE = 0.017  # lateness decay per minute

Candidate = list[int]


@dataclass(frozen=True)
class Task:
    """Single task of an instance.

    Attributes:
        deadline: Minutes from horizon start by which the task should finish.
        duration: Processing time in minutes.
        profit: Profit collected when finishing on time.
    """

    deadline: int
    duration: int
    profit: float


@dataclass(frozen=True)
class ProblemInstance:
    """Immutable representation of one problem instance.

    Attributes:
        tasks: Tasks indexed 0..n-1 (indices never change).
        horizon: Global scheduling horizon in minutes.
        decay_rate: Exponential lateness decay constant per minute.
    """

    tasks: tuple[Task, ...]
    horizon: int = HORIZON
    decay_rate: float = DECAY_RATE
    durations: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tasks", tuple(self.tasks))
        object.__setattr__(self, "durations", tuple(t.duration for t in self.tasks))

    @classmethod
    def from_lists(
        cls,
        deadlines: list[int],
        durations: list[int],
        profits: list[float],
        horizon: int = HORIZON,
    ) -> "ProblemInstance":
        if not (len(deadlines) == len(durations) == len(profits)):
            raise InstanceError("deadlines, durations and profits differ in length")
        tasks = tuple(
            Task(int(d), int(p), float(v)) for d, p, v in zip(deadlines, durations, profits)
        )
        return cls(tasks=tasks, horizon=horizon)

    def __len__(self) -> int:
        return len(self.tasks)

    @property
    def size(self) -> int:
        return len(self.tasks)

    def check(self) -> None:
        """Re-check value sanity before a search starts.

        Raises:
            InstanceError: If the horizon or decay is not usable, or a task has
                a non-positive or non-finite field, or is longer than the horizon.
        """
        if self.horizon <= 0:
            raise InstanceError(f"horizon must be positive, got {self.horizon}")
        if not (math.isfinite(self.decay_rate) and self.decay_rate >= 0):
            raise InstanceError(
                f"decay_rate must be finite and non-negative, got {self.decay_rate}"
            )
        for idx, task in enumerate(self.tasks):
            values = (task.deadline, task.duration, task.profit)
            # NaN fails every comparison, so test finiteness explicitly
            if not all(math.isfinite(v) and v > 0 for v in values):
                raise InstanceError(f"task {idx} has non-positive or non-finite fields: {task}")
            if task.duration > self.horizon:
                raise InstanceError(
                    f"task {idx} lasts {task.duration} minutes, past the horizon {self.horizon}"
                )


class TakenSet:
    """Per-run "already scheduled" flags used by the greedy baselines."""

    __slots__ = ("_flags",)

    def __init__(self, size: int) -> None:
        self._flags = bytearray(size)

    def __contains__(self, idx: int) -> bool:
        return bool(self._flags[idx])

    def __len__(self) -> int:
        return sum(self._flags)

    def add(self, idx: int) -> None:
        self._flags[idx] = 1

    def discard(self, idx: int) -> None:
        self._flags[idx] = 0

    def clear(self) -> None:
        self._flags[:] = bytes(len(self._flags))

    def untaken(self) -> list[int]:
        return [i for i, flag in enumerate(self._flags) if not flag]
