"""Hyper-parameter bundle for the annealing optimizer.

Keeping all knobs in a single dataclass makes it straightforward to pass the
configuration from YAML into the orchestrator and to persist it alongside
experiment results.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping

from taskanneal.errors import ConfigurationError

logger = logging.getLogger("taskanneal.settings")

NUM_STREAMS = 8


@dataclass(frozen=True)
class AnnealSettings:
    """Settings recognized by ``solve``.

    Attributes:
        max_restarts: Fresh restarts after each freeze. Restarting degrades
            quality in practice, so it stays off by default.
        alpha: Temperature decay factor applied after each epoch, in (0, 1).
        max_rejections: Consecutive no-gain epochs before the stream freezes.
        epoch_size_factor: Epoch length is ``epoch_size_factor * n * n``.
        init_accept_rate: Target acceptance probability of a typical
            profit-decreasing move at the starting temperature, in (0, 1).
        streams: Number of independent annealing streams.
        max_workers: Process pool size; ``None`` sizes the pool to the stream
            count, ``1`` runs all streams sequentially in-process.
        sample_size_factor: Calibration sample is ``sample_size_factor * n * n``.
        epoch_log_period: Emit a debug progress line every this many epochs.
        trace_dir: Directory for per-stream epoch trace CSV files.
    """

    max_restarts: int = 0
    alpha: float = 0.99
    max_rejections: int = 50
    epoch_size_factor: float = 1.0
    init_accept_rate: float = 0.8
    streams: int = NUM_STREAMS
    max_workers: int | None = None
    sample_size_factor: float = 2.0
    epoch_log_period: int = 1
    trace_dir: str | None = None

    def validate(self) -> "AnnealSettings":
        if not (0.0 < self.alpha < 1.0):
            raise ConfigurationError(f"alpha must be in (0, 1), got {self.alpha}")
        if not (0.0 < self.init_accept_rate < 1.0):
            raise ConfigurationError(
                f"init_accept_rate must be in (0, 1), got {self.init_accept_rate}"
            )
        if self.epoch_size_factor <= 0:
            raise ConfigurationError(
                f"epoch_size_factor must be positive, got {self.epoch_size_factor}"
            )
        if self.sample_size_factor <= 0:
            raise ConfigurationError(
                f"sample_size_factor must be positive, got {self.sample_size_factor}"
            )
        if self.max_rejections < 1:
            raise ConfigurationError(
                f"max_rejections must be at least 1, got {self.max_rejections}"
            )
        if self.max_restarts < 0:
            raise ConfigurationError(f"max_restarts must be >= 0, got {self.max_restarts}")
        if self.streams < 1:
            raise ConfigurationError(f"streams must be at least 1, got {self.streams}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.epoch_log_period < 1:
            raise ConfigurationError(
                f"epoch_log_period must be >= 1, got {self.epoch_log_period}"
            )
        return self

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any] | None) -> "AnnealSettings":
        """Build settings from a config section, ignoring unknown keys."""
        if not cfg:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(cfg) - known)
        if unknown:
            logger.warning("Ignoring unknown annealing settings: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in cfg.items() if k in known})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
