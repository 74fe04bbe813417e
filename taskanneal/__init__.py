"""Deadline-aware task selection by parallel simulated annealing.

Exports the shared data types, the scoring model and the solver entry points.
"""

from taskanneal.algorithms.parallel import SolveResult, solve, solve_detailed  # noqa: F401
from taskanneal.evaluation import evaluate, is_valid_for, trim  # noqa: F401
from taskanneal.models import ProblemInstance, Task  # noqa: F401
from taskanneal.settings import AnnealSettings  # noqa: F401

__all__ = [
    "AnnealSettings",
    "ProblemInstance",
    "SolveResult",
    "Task",
    "evaluate",
    "is_valid_for",
    "solve",
    "solve_detailed",
    "trim",
]
