"""Simulated annealing stream for deadline-sensitive task selection.

One stream owns its candidate, its random generator and its temperature. It
moves through three phases:

    Initializing -- random permutation of all tasks, calibrated temperature.
    Cooling      -- epochs of swap moves under the Metropolis rule, followed
                    by geometric cooling and a no-gain streak update.
    Frozen       -- the streak reached ``max_rejections``; the stream either
                    restarts from scratch or reports its best candidate.
"""

from __future__ import annotations

import logging
import math
import os
import random
from dataclasses import asdict, dataclass, field
from typing import Any, List

from taskanneal.algorithms.base import SearchState, log_epoch, open_trace_file
from taskanneal.algorithms.calibration import calibrate_temperature
from taskanneal.evaluation import evaluate
from taskanneal.models import ProblemInstance
from taskanneal.neighbors import perturb, swap_tasks
from taskanneal.settings import AnnealSettings

logger = logging.getLogger("taskanneal.sa")

PROFIT_GAIN_THRESHOLD = 1e-3  # epoch gains below this count as no gain


@dataclass
class StreamResult:
    """Outcome of one annealing stream."""

    stream_index: int
    seed: int
    candidate: List[int]
    score: float
    epochs: int = 0
    restarts: int = 0
    initial_temperatures: List[float] = field(default_factory=list)
    epoch_scores: List[float] = field(default_factory=list)
    best_scores: List[float] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def acceptance_probability(current_score: float, new_score: float, temperature: float) -> float:
    """Metropolis acceptance with energy = -profit.

    Moves that do not lose profit are always accepted; a loss of ``d`` is
    accepted with probability ``exp(-d / temperature)``.
    """
    if new_score >= current_score:
        return 1.0
    if temperature <= 0.0:
        return 0.0
    return math.exp((new_score - current_score) / temperature)


def random_candidate(n: int, rng: random.Random) -> List[int]:
    """Uniformly random permutation of all task indices."""
    candidate = list(range(n))
    rng.shuffle(candidate)
    return candidate


def epoch_size(n: int, epoch_size_factor: float) -> int:
    return max(1, int(epoch_size_factor * n * n))


def _cool(
    instance: ProblemInstance,
    state: SearchState,
    rng: random.Random,
    settings: AnnealSettings,
    trace_file: Any,
    restart: int,
    name: str,
) -> None:
    """Run epochs until the no-gain streak freezes the stream."""
    length = epoch_size(instance.size, settings.epoch_size_factor)
    current = state.current
    last_epoch_score = state.current_score
    state.rejection_streak = 0
    while state.rejection_streak < settings.max_rejections:
        for _ in range(length):
            new_score, i, j = perturb(instance, current, rng)
            accept_p = acceptance_probability(state.current_score, new_score, state.temperature)
            if accept_p < rng.random():
                swap_tasks(current, i, j)
            else:
                state.current_score = new_score
                state.update_best()

        state.temperature *= settings.alpha
        if state.current_score - last_epoch_score < PROFIT_GAIN_THRESHOLD:
            state.rejection_streak += 1
        else:
            state.rejection_streak = 0
        last_epoch_score = state.current_score

        state.record_epoch()
        log_epoch(trace_file, state, restart)
        if state.epoch % settings.epoch_log_period == 0:
            logger.debug(
                "[%s] epoch %d T=%.6f current=%.4f best=%.4f streak=%d",
                name,
                state.epoch,
                state.temperature,
                state.current_score,
                state.best_score,
                state.rejection_streak,
            )
        state.epoch += 1


def simulated_annealing(
    instance: ProblemInstance,
    rng: random.Random,
    settings: AnnealSettings | None = None,
    name: str = "sa",
    trace_path: str | None = None,
) -> tuple[List[int], float, SearchState, List[float]]:
    """Run one annealing stream to freeze, restarting ``max_restarts`` times.

    Parameters:
        instance: problem instance, never mutated
        rng: random generator owned exclusively by this stream
        settings: annealing settings (defaults when None)
        name: label used in log lines
        trace_path: optional CSV path for per-epoch trace rows

    Returns:
        (best_candidate, best_score, final_state, initial_temperatures)

    Raises:
        DegenerateLandscapeError: if calibration sees no downhill move.
    """
    settings = (settings or AnnealSettings()).validate()
    n = instance.size
    if n < 2:
        # a single ordering exists, nothing to search
        only = list(range(n))
        score = evaluate(instance, only)
        state = SearchState(current=only, current_score=score, best=only.copy(), best_score=score)
        return only, score, state, []

    temperatures: List[float] = []
    state: SearchState | None = None
    with open_trace_file(trace_path, name) as trace_file:
        for restart in range(settings.max_restarts + 1):
            # Initializing: fresh candidate and fresh calibration on every restart
            current = random_candidate(n, rng)
            current_score = evaluate(instance, current)
            if state is None:
                state = SearchState(
                    current=current,
                    current_score=current_score,
                    best=current.copy(),
                    best_score=current_score,
                )
            else:
                state.current = current
                state.current_score = current_score
                state.update_best()
            state.temperature = calibrate_temperature(
                instance,
                current,
                settings.init_accept_rate,
                rng,
                sample_size_factor=settings.sample_size_factor,
            )
            temperatures.append(state.temperature)
            logger.info(
                "[%s] restart %d/%d start=%.4f T0=%.6f epoch_size=%d",
                name,
                restart,
                settings.max_restarts,
                current_score,
                state.temperature,
                epoch_size(n, settings.epoch_size_factor),
            )

            _cool(instance, state, rng, settings, trace_file, restart, name)

            logger.info(
                "[%s] frozen after %d epochs current=%.4f best=%.4f",
                name,
                state.epoch,
                state.current_score,
                state.best_score,
            )

    return state.best, state.best_score, state, temperatures


def run_stream(
    instance: ProblemInstance,
    settings: AnnealSettings,
    seed: int,
    stream_index: int = 0,
) -> StreamResult:
    """Build the stream's own generator from ``seed`` and anneal.

    Module level so it can be shipped to worker processes.
    """
    rng = random.Random(seed)
    name = f"sa#{stream_index}"
    trace_path = None
    if settings.trace_dir:
        os.makedirs(settings.trace_dir, exist_ok=True)
        trace_path = os.path.join(
            settings.trace_dir, f"trace_stream{stream_index:02d}_seed{seed}.csv"
        )
    best, best_score, state, temperatures = simulated_annealing(
        instance, rng, settings, name=name, trace_path=trace_path
    )
    return StreamResult(
        stream_index=stream_index,
        seed=seed,
        candidate=best,
        score=best_score,
        epochs=state.epoch,
        restarts=max(0, len(temperatures) - 1),
        initial_temperatures=temperatures,
        epoch_scores=state.epoch_scores,
        best_scores=state.best_scores,
    )
