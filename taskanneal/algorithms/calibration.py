"""Starting temperature estimation for simulated annealing.

The landscape is sampled with reversible swaps around the seed candidate. The
mean profit drop of the profit-decreasing samples, ``d``, defines the starting
temperature ``T0 = d / ln(1 / p0)``, so that a typical downhill move is accepted
with probability ``exp(-d / T0) = p0`` under the Metropolis rule.
"""

from __future__ import annotations

import logging
import math
import random
from typing import List

from taskanneal.errors import ConfigurationError, DegenerateLandscapeError
from taskanneal.evaluation import evaluate
from taskanneal.models import ProblemInstance
from taskanneal.neighbors import perturb, swap_tasks

logger = logging.getLogger("taskanneal.calibration")

INIT_TEMP_SAMPLE_SIZE_FACTOR = 2.0


def calibrate_temperature(
    instance: ProblemInstance,
    candidate: List[int],
    target_accept_rate: float,
    rng: random.Random,
    sample_size_factor: float = INIT_TEMP_SAMPLE_SIZE_FACTOR,
) -> float:
    """Estimate the starting temperature for ``target_accept_rate``.

    Args:
        instance: Problem instance (read only).
        candidate: Seed candidate. Every sampled swap is reverted, so the list
            is left exactly as it was passed in.
        target_accept_rate: Desired initial acceptance probability of a
            profit-decreasing move, in (0, 1).
        rng: Random stream of the calling annealing stream.
        sample_size_factor: Number of samples is ``factor * n * n`` (at least one).

    Returns:
        Initial temperature (strictly positive).

    Raises:
        ConfigurationError: If ``target_accept_rate`` is outside (0, 1).
        DegenerateLandscapeError: If no sampled swap decreased the profit, or
            the candidate is too short to be perturbed.
    """
    if not (0.0 < target_accept_rate < 1.0):
        raise ConfigurationError(
            f"target_accept_rate must be in (0, 1), got {target_accept_rate}"
        )
    n = len(candidate)
    if n < 2:
        raise DegenerateLandscapeError(f"cannot sample swaps on {n} task(s)")
    samples = max(1, int(sample_size_factor * n * n))
    current_score = evaluate(instance, candidate)
    drops = 0
    total_drop = 0.0
    for _ in range(samples):
        new_score, i, j = perturb(instance, candidate, rng)
        if new_score < current_score:
            drops += 1
            total_drop += current_score - new_score
        swap_tasks(candidate, i, j)
    if drops == 0:
        raise DegenerateLandscapeError(
            f"no profit-decreasing move among {samples} samples; "
            "starting temperature is undefined"
        )
    temperature = total_drop / drops / math.log(1.0 / target_accept_rate)
    logger.debug(
        "calibrated T0=%.6f from %d/%d downhill samples (mean drop %.6f)",
        temperature,
        drops,
        samples,
        total_drop / drops,
    )
    return temperature
