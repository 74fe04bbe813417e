"""Parallel search orchestrator.

Runs ``settings.streams`` independent annealing streams, stream ``k`` seeded
with ``seed + k``. Streams share only the immutable instance. Results are
collected in stream order after all workers finish, then reduced to the
single best candidate.
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import List, Sequence

from taskanneal.algorithms.sa import StreamResult, run_stream
from taskanneal.models import ProblemInstance
from taskanneal.settings import AnnealSettings

logger = logging.getLogger("taskanneal.parallel")


@dataclass
class SolveResult:
    """Winning candidate plus the per-stream outcomes it was chosen from."""

    candidate: List[int]
    score: float
    winner: int | None
    streams: List[StreamResult] = field(default_factory=list)
    elapsed_s: float = 0.0


def select_best(results: Sequence[StreamResult]) -> StreamResult | None:
    """Highest score wins; ties go to the earliest stream in ``results``."""
    best = None
    for result in results:
        if best is None or result.score > best.score:
            best = result
    return best


def _pool_size(settings: AnnealSettings) -> int:
    if settings.max_workers is not None:
        return min(settings.max_workers, settings.streams)
    return min(settings.streams, os.cpu_count() or 1)


def _run_stream_args(args: tuple[ProblemInstance, AnnealSettings, int, int]) -> StreamResult:
    instance, settings, seed, stream_index = args
    return run_stream(instance, settings, seed, stream_index)


def solve_detailed(
    instance: ProblemInstance,
    seed: int = 0,
    settings: AnnealSettings | None = None,
) -> SolveResult:
    """Run all streams to completion and reduce them to one winner.

    Raises:
        ConfigurationError: Invalid settings, raised before any stream starts.
        InstanceError: Instance fails the sanity re-check.
        DegenerateLandscapeError: Propagated from any stream's calibration.
    """
    settings = (settings or AnnealSettings()).validate()
    instance.check()
    if instance.size == 0:
        logger.info("Empty instance, returning empty schedule")
        return SolveResult(candidate=[], score=0.0, winner=None)

    work = [(instance, settings, seed + k, k) for k in range(settings.streams)]
    workers = _pool_size(settings)
    logger.info(
        "Solving n=%d with %d streams on %d worker(s), base seed %d",
        instance.size,
        settings.streams,
        workers,
        seed,
    )
    t0 = time.perf_counter()
    if workers <= 1:
        results = [_run_stream_args(item) for item in work]
    else:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            # map keeps submission order and re-raises worker failures here
            results = list(executor.map(_run_stream_args, work))
    elapsed = time.perf_counter() - t0

    best = select_best(results)
    logger.info(
        "Best stream #%d score=%.4f (%.2fs); per-stream: %s",
        best.stream_index,
        best.score,
        elapsed,
        ", ".join(f"{r.score:.3f}" for r in results),
    )
    return SolveResult(
        candidate=list(best.candidate),
        score=best.score,
        winner=best.stream_index,
        streams=results,
        elapsed_s=elapsed,
    )


def solve(
    instance: ProblemInstance,
    seed: int = 0,
    settings: AnnealSettings | None = None,
) -> List[int]:
    """Best untrimmed candidate found by the parallel annealing streams."""
    return solve_detailed(instance, seed, settings).candidate
