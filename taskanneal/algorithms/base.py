"""Common structures and helper functions for the annealing streams."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, List

logger = logging.getLogger("taskanneal.algorithms")


@dataclass
class SearchState:
    """Mutable state owned by a single annealing stream."""

    current: List[int]
    current_score: float
    best: List[int]
    best_score: float
    temperature: float = 0.0
    epoch: int = 0
    rejection_streak: int = 0
    epoch_scores: List[float] = field(default_factory=list)
    best_scores: List[float] = field(default_factory=list)

    def update_best(self) -> bool:
        """Copy the current candidate into best. Returns True if improved."""
        if self.current_score > self.best_score:
            self.best_score = self.current_score
            self.best = self.current.copy()
            return True
        return False

    def record_epoch(self) -> None:
        self.epoch_scores.append(self.current_score)
        self.best_scores.append(self.best_score)


@contextmanager
def open_trace_file(path: str | None, stream_name: str) -> Iterator[Any]:
    """Context manager for the per-stream epoch trace CSV."""
    trace_file = None
    if path:
        try:
            trace_file = open(path, "w", encoding="utf-8")
            trace_file.write("restart,epoch,temperature,current,best,rejection_streak\n")
        except OSError as e:
            logger.warning("[%s] Failed to open trace file %s: %s", stream_name, path, e)
            trace_file = None
    try:
        yield trace_file
    finally:
        if trace_file:
            trace_file.close()


def log_epoch(trace_file: Any, state: SearchState, restart: int) -> None:
    """Write one epoch row to the trace file."""
    if trace_file:
        trace_file.write(
            f"{restart},{state.epoch},{state.temperature:.6f},{state.current_score:.6f},"
            f"{state.best_score:.6f},{state.rejection_streak}\n"
        )
