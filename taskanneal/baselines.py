"""Deterministic baseline schedules used as comparison points.

None of these seed the annealing search. The greedy constructions keep their
"already scheduled" flags in a solver-owned ``TakenSet`` so the instance stays
immutable.
"""

from __future__ import annotations

import itertools
import logging
import math
from typing import Callable, Dict, List, Tuple

from taskanneal.evaluation import evaluate
from taskanneal.models import ProblemInstance, TakenSet

logger = logging.getLogger("taskanneal.baselines")

EXHAUSTIVE_MAX_TASKS = 9


def by_deadline(instance: ProblemInstance) -> List[int]:
    return sorted(range(instance.size), key=lambda i: instance.tasks[i].deadline)


def by_duration(instance: ProblemInstance) -> List[int]:
    return sorted(range(instance.size), key=lambda i: instance.tasks[i].duration)


def by_profit(instance: ProblemInstance) -> List[int]:
    return sorted(range(instance.size), key=lambda i: -instance.tasks[i].profit)


def by_profit_rate(instance: ProblemInstance) -> List[int]:
    """Descending profit per minute, deadlines ignored."""
    tasks = instance.tasks
    return sorted(range(instance.size), key=lambda i: -tasks[i].profit / tasks[i].duration)


def _least_overdue_index(instance: ProblemInstance, taken: TakenSet, time: int) -> int:
    tasks = instance.tasks
    remaining = taken.untaken()
    best_idx, best_count = -1, -1
    for i in remaining:
        finish = time + tasks[i].duration
        count = sum(1 for j in remaining if j != i and finish > tasks[j].deadline)
        if best_count == -1 or count < best_count:
            best_idx, best_count = i, count
    return best_idx


def least_overdue(instance: ProblemInstance) -> List[int]:
    """Repeatedly schedule the task that makes the fewest other tasks overdue."""
    taken = TakenSet(instance.size)
    sequence: List[int] = []
    time = 0
    for _ in range(instance.size):
        idx = _least_overdue_index(instance, taken, time)
        sequence.append(idx)
        taken.add(idx)
        time += instance.tasks[idx].duration
    return sequence


def _most_profitable_index(instance: ProblemInstance, taken: TakenSet, time: int) -> int:
    best_idx, best_profit = -1, -math.inf
    for i in taken.untaken():
        task = instance.tasks[i]
        overtime = time + task.duration - task.deadline
        if overtime > 0:
            profit = task.profit * math.exp(-instance.decay_rate * overtime)
        else:
            profit = task.profit
        if profit > best_profit:
            best_idx, best_profit = i, profit
    return best_idx


def most_profitable(instance: ProblemInstance) -> List[int]:
    """Repeatedly schedule the task with the highest decayed profit right now."""
    taken = TakenSet(instance.size)
    sequence: List[int] = []
    time = 0
    for _ in range(instance.size):
        idx = _most_profitable_index(instance, taken, time)
        sequence.append(idx)
        taken.add(idx)
        time += instance.tasks[idx].duration
    return sequence


def exhaustive(instance: ProblemInstance) -> List[int]:
    """Best ordering by full enumeration; only for tiny instances.

    Raises:
        ValueError: If the instance has more than ``EXHAUSTIVE_MAX_TASKS`` tasks.
    """
    n = instance.size
    if n > EXHAUSTIVE_MAX_TASKS:
        raise ValueError(f"exhaustive search limited to {EXHAUSTIVE_MAX_TASKS} tasks, got {n}")
    best = list(range(n))
    best_score = evaluate(instance, best)
    for perm in itertools.permutations(range(n)):
        score = evaluate(instance, perm)
        if score > best_score:
            best, best_score = list(perm), score
    return best


BASELINES: Dict[str, Callable[[ProblemInstance], List[int]]] = {
    "deadline": by_deadline,
    "duration": by_duration,
    "least_overdue": least_overdue,
    "most_profitable": most_profitable,
    "profit": by_profit,
    "profit_rate": by_profit_rate,
}


def best_baseline(instance: ProblemInstance) -> Tuple[str, List[int], float]:
    """Run every greedy baseline and return ``(name, candidate, score)`` of the best.

    Ties keep the first baseline in ``BASELINES`` order.
    """
    best_name, best_candidate, best_score = "", [], 0.0
    for name, build in BASELINES.items():
        candidate = build(instance)
        score = evaluate(instance, candidate)
        logger.debug("baseline %-15s score=%.4f", name, score)
        if not best_name or score > best_score:
            best_name, best_candidate, best_score = name, candidate, score
    return best_name, best_candidate, best_score
