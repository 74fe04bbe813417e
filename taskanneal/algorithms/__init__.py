"""Search algorithms for deadline-sensitive task selection.

Contains:
- Temperature calibration
- Simulated Annealing (single stream)
- Parallel orchestrator over independent streams
"""

from taskanneal.algorithms.calibration import calibrate_temperature
from taskanneal.algorithms.parallel import SolveResult, select_best, solve, solve_detailed
from taskanneal.algorithms.sa import StreamResult, run_stream, simulated_annealing

__all__ = [
    "calibrate_temperature",
    "simulated_annealing",
    "run_stream",
    "StreamResult",
    "SolveResult",
    "select_best",
    "solve",
    "solve_detailed",
]
