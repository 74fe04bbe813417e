"""Swap neighbourhood used by the annealing streams and the calibrator."""

import random
from typing import List, Tuple

from taskanneal.evaluation import evaluate
from taskanneal.models import ProblemInstance


def swap_tasks(candidate: List[int], i: int, j: int) -> None:
    """Exchange the tasks at positions i and j in place."""
    candidate[i], candidate[j] = candidate[j], candidate[i]


def pick_positions(n: int, rng: random.Random) -> Tuple[int, int]:
    """Draw two distinct positions uniformly from range(n)."""
    i = rng.randrange(n)
    j = rng.randrange(n)
    while j == i:
        j = rng.randrange(n)
    return i, j


def perturb(
    instance: ProblemInstance, candidate: List[int], rng: random.Random
) -> Tuple[float, int, int]:
    """Swap two random positions of ``candidate`` in place.

    Returns the score after the swap together with both positions, so the
    caller can undo the move with ``swap_tasks(candidate, i, j)``.
    """
    i, j = pick_positions(len(candidate), rng)
    swap_tasks(candidate, i, j)
    return evaluate(instance, candidate), i, j
