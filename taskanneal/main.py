import argparse
import json
import logging
import os
from datetime import datetime
from typing import Any, Dict

import yaml

from taskanneal.algorithms.parallel import solve_detailed
from taskanneal.baselines import best_baseline
from taskanneal.evaluation import evaluate, trim
from taskanneal.experiments.runner import ExperimentRunner
from taskanneal.generator import generate_instance
from taskanneal.parser import format_candidate, load_instance, write_candidate
from taskanneal.settings import AnnealSettings
from taskanneal.visualization import next_unique_path, plot_epoch_progress_multi, plot_schedule

logger = logging.getLogger("taskanneal")


def load_config(config_file: str) -> Dict[str, Any]:
    """Load configuration from a YAML (or JSON) file."""
    if not os.path.isfile(config_file):
        raise FileNotFoundError(f"Config file not found: {config_file}")
    with open(config_file, "r", encoding="utf-8") as f:
        text = f.read()
    if config_file.endswith((".yml", ".yaml")):
        return yaml.safe_load(text) or {}
    return json.loads(text)


def run_single(cfg: Dict[str, Any], settings: AnnealSettings) -> float:
    seed = int(cfg.get("seed", 0))
    gen_cfg = cfg.get("generator") or {}
    if gen_cfg.get("enabled"):
        n = int(gen_cfg["n"])
        gen_seed = int(gen_cfg.get("seed", 0))
        instance = generate_instance(n, gen_seed)
        data_name = f"generated_n{n}_seed{gen_seed}"
    else:
        instance_path = cfg.get("instance")
        if not instance_path:
            raise ValueError("Missing 'instance' key in config")
        instance = load_instance(instance_path, preset=cfg.get("preset"))
        data_name = os.path.splitext(os.path.basename(instance_path))[0]
    logger.info("Instance: %s tasks=%d", data_name, instance.size)

    result = solve_detailed(instance, seed, settings)
    schedule = trim(instance, result.candidate)
    logger.info("Annealing profit=%.4f scheduled=%d/%d", result.score, len(schedule), instance.size)
    logger.info("Schedule (1-indexed): %s", format_candidate(schedule))

    name, _baseline, baseline_score = best_baseline(instance)
    logger.info("Best baseline %s profit=%.4f", name, baseline_score)

    charts_dir = (cfg.get("charts") or {}).get("dir", "charts")
    os.makedirs(charts_dir, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_path = next_unique_path(os.path.join(charts_dir, f"{data_name}.out"))
    write_candidate(schedule, out_path)
    logger.info("Saved schedule to %s", out_path)
    plot_schedule(
        instance,
        schedule,
        next_unique_path(os.path.join(charts_dir, f"schedule_{data_name}_{stamp}.png")),
    )
    if result.streams:
        plot_epoch_progress_multi(
            {f"stream {s.stream_index}": s.best_scores for s in result.streams},
            next_unique_path(os.path.join(charts_dir, f"progress_{data_name}_{stamp}.png")),
        )
    return evaluate(instance, schedule)


def run_experiment(exp_cfg: Dict[str, Any], settings: AnnealSettings, seed: int) -> None:
    runner = ExperimentRunner(
        input_dir=exp_cfg.get("input_dir", "inputs"),
        output_dir=exp_cfg.get("output_dir", "outputs"),
        log_dir=exp_cfg.get("log_dir", "outputs/log"),
        settings=settings,
        seed=seed,
        preset=exp_cfg.get("preset"),
    )
    results = runner.run()
    failed = [r for r in results if r.error]
    logger.info(
        "Experiment batch done: %d solved, %d skipped, %d failed",
        sum(1 for r in results if r.score is not None),
        sum(1 for r in results if r.skipped),
        len(failed),
    )
    if exp_cfg.get("fix", True):
        replaced = runner.fix()
        logger.info("Baseline fix pass replaced %d output(s)", len(replaced))


def main(cfg: Dict[str, Any]) -> None:
    settings = AnnealSettings.from_mapping(cfg.get("sa")).validate()
    exp_cfg = cfg.get("experiment") or {}
    if exp_cfg.get("enabled"):
        run_experiment(exp_cfg, settings, int(cfg.get("seed", 0)))
    else:
        run_single(cfg, settings)


def cli() -> None:
    parser = argparse.ArgumentParser(description="Deadline-aware task selection by simulated annealing")
    parser.add_argument("--config", required=True, help="Path to YAML/JSON config file")
    args = parser.parse_args()

    cfg = load_config(args.config)
    log_level = cfg.get("log_level", "INFO")
    logging.basicConfig(
        level=getattr(logging, str(log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    main(cfg)


if __name__ == "__main__":
    cli()
