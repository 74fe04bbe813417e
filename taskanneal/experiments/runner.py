from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from taskanneal.algorithms.parallel import solve_detailed
from taskanneal.baselines import best_baseline
from taskanneal.evaluation import evaluate, trim
from taskanneal.parser import load_instance, read_candidate, write_candidate
from taskanneal.settings import AnnealSettings

logger = logging.getLogger("taskanneal.experiments")

INPUT_SUFFIX = ".in"
OUTPUT_SUFFIX = ".out"
LOG_SUFFIX = ".json"


@dataclass(frozen=True)
class RunConfig:
    """Single batch entry: one instance file solved with one seed."""

    instance_file: str
    output_file: str
    log_file: str
    seed: int = 0
    preset: int | None = None


@dataclass
class RunResult:
    config: RunConfig
    score: float | None = None
    winner: int | None = None
    stream_scores: List[float] = field(default_factory=list)
    schedule: List[int] = field(default_factory=list)
    elapsed_s: float = 0.0
    skipped: bool = False
    error: str | None = None

    def to_dict(self):
        d = asdict(self)
        d["config"] = asdict(self.config)
        return d


class ExperimentRunner:
    """Solve every instance of a directory and persist outputs and logs.

    Existing log files mark instances as done, so an interrupted batch can be
    resumed by running it again. Old outputs are never deleted.
    """

    def __init__(
        self,
        input_dir: str | Path,
        output_dir: str | Path,
        log_dir: str | Path,
        settings: AnnealSettings | None = None,
        seed: int = 0,
        preset: int | None = None,
    ):
        self.input_dir = Path(input_dir)
        self.output_dir = Path(output_dir)
        self.log_dir = Path(log_dir)
        self.settings = (settings or AnnealSettings()).validate()
        self.seed = seed
        self.preset = preset
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def plan(self) -> List[RunConfig]:
        configs: List[RunConfig] = []
        for path in sorted(self.input_dir.glob(f"*{INPUT_SUFFIX}")):
            configs.append(
                RunConfig(
                    instance_file=str(path),
                    output_file=str(self.output_dir / f"{path.stem}{OUTPUT_SUFFIX}"),
                    log_file=str(self.log_dir / f"{path.stem}{LOG_SUFFIX}"),
                    seed=self.seed,
                    preset=self.preset,
                )
            )
        return configs

    def run(self, configs: Optional[Sequence[RunConfig]] = None) -> List[RunResult]:
        if configs is None:
            configs = self.plan()
        results: List[RunResult] = []
        for idx, cfg in enumerate(configs, start=1):
            if Path(cfg.log_file).exists():
                logger.info("(%d/%d) Skipping %s, log exists", idx, len(configs), cfg.instance_file)
                results.append(RunResult(config=cfg, skipped=True))
                continue
            logger.info("(%d/%d) Solving %s", idx, len(configs), cfg.instance_file)
            try:
                result = self._run_single(cfg)
            except Exception as e:
                logger.exception("Failed to solve %s", cfg.instance_file)
                results.append(RunResult(config=cfg, error=f"{type(e).__name__}: {e}"))
                continue
            results.append(result)
        return results

    def _run_single(self, cfg: RunConfig) -> RunResult:
        instance = load_instance(cfg.instance_file, preset=cfg.preset)
        started = datetime.now()
        t0 = time.perf_counter()
        solved = solve_detailed(instance, cfg.seed, self.settings)
        elapsed = time.perf_counter() - t0
        result = RunResult(
            config=cfg,
            score=solved.score,
            winner=solved.winner,
            stream_scores=[s.score for s in solved.streams],
            schedule=solved.candidate,
            elapsed_s=elapsed,
        )
        payload = result.to_dict()
        payload.update(
            {
                "settings": self.settings.to_dict(),
                "start_time": started.isoformat(timespec="seconds"),
                "stop_time": datetime.now().isoformat(timespec="seconds"),
            }
        )
        with open(cfg.log_file, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        write_candidate(trim(instance, solved.candidate), cfg.output_file)
        logger.info("Saved %s (profit %.4f)", cfg.output_file, solved.score)
        return result

    def fix(self, configs: Optional[Sequence[RunConfig]] = None) -> List[str]:
        """Overwrite outputs that the best greedy baseline beats.

        Returns the instance files whose output was replaced.
        """
        if configs is None:
            configs = self.plan()
        replaced: List[str] = []
        for cfg in configs:
            out_path = Path(cfg.output_file)
            if not out_path.exists():
                continue
            try:
                instance = load_instance(cfg.instance_file, preset=cfg.preset)
                sa_score = evaluate(instance, trim(instance, read_candidate(out_path)))
                name, candidate, baseline_score = best_baseline(instance)
            except Exception:
                logger.exception("Failed to check %s against the baselines", cfg.instance_file)
                continue
            if baseline_score <= sa_score:
                continue
            logger.info(
                "Baseline %s beats annealing on %s: %.4f > %.4f",
                name,
                Path(cfg.instance_file).name,
                baseline_score,
                sa_score,
            )
            fix_log = Path(cfg.log_file).with_suffix(".fix" + LOG_SUFFIX)
            with open(fix_log, "w", encoding="utf-8") as f:
                json.dump(
                    {
                        "baseline": name,
                        "score": baseline_score,
                        "replaced_score": sa_score,
                        "schedule": candidate,
                    },
                    f,
                    indent=2,
                )
            write_candidate(trim(instance, candidate), out_path)
            replaced.append(cfg.instance_file)
        return replaced
