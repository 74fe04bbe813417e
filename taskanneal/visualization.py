import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402

from taskanneal.evaluation import evaluate, schedule_rows  # noqa: E402
from taskanneal.models import ProblemInstance  # noqa: E402

logger = logging.getLogger("taskanneal.visualization")


def _ensure_dir(path: str):
    if path:
        os.makedirs(path, exist_ok=True)


def next_unique_path(path: str | Path) -> str:
    """If the file exists, append _1, _2 ... until a free name is found."""
    p = Path(path)
    if not p.exists():
        return str(p)
    counter = 1
    while True:
        candidate = p.parent / f"{p.stem}_{counter}{p.suffix}"
        if not candidate.exists():
            return str(candidate)
        counter += 1


def plot_schedule(
    instance: ProblemInstance,
    candidate: Sequence[int],
    save_path: str,
    title: Optional[str] = None,
    show_labels: Optional[bool] = None,
) -> str:
    """Draw the fitting prefix of a candidate on the time axis and save it.

    On-time tasks are green, late tasks orange with alpha scaled by the
    fraction of profit kept. The horizon is marked with a red dashed line.
    """
    rows = schedule_rows(instance, candidate)
    score = evaluate(instance, candidate)
    fig, ax = plt.subplots(figsize=(14, 3.2), constrained_layout=True)
    for row in rows:
        task = instance.tasks[row.task]
        late = row.lateness > 0
        kept = row.contribution / task.profit
        ax.barh(
            0,
            row.end - row.start,
            left=row.start,
            height=0.6,
            color="#ff9f1c" if late else "#2ec4b6",
            alpha=0.35 + 0.6 * kept if late else 0.9,
            edgecolor="black",
            linewidth=0.5,
        )
        ax.plot([task.deadline, task.deadline], [0.32, 0.42], color="black", linewidth=0.6)
    if show_labels is None:
        # auto policy: only label when tasks are few
        show_labels = len(rows) <= 40
    if show_labels:
        for row in rows:
            ax.text(
                (row.start + row.end) / 2,
                0,
                str(row.task + 1),
                ha="center",
                va="center",
                fontsize=7,
            )
    ax.axvline(x=instance.horizon, color="red", linestyle="--", linewidth=1.2)
    ax.set_xlim(0, instance.horizon * 1.02)
    ax.set_yticks([])
    ax.set_xlabel("Time [min]", fontsize=11)
    ax.set_title(
        title or f"Schedule - {len(rows)} tasks, profit = {score:.3f}",
        fontsize=13,
        fontweight="bold",
    )
    ax.grid(True, alpha=0.25, axis="x", linestyle="--", linewidth=0.7)
    _ensure_dir(os.path.dirname(save_path))
    fig.savefig(save_path, dpi=150)
    plt.close(fig)
    logger.info("Schedule chart saved as: %s", save_path)
    return save_path


def plot_epoch_progress_multi(
    histories: Dict[str, List[float]],
    save_path: str,
    ylabel: str = "Best profit",
) -> str:
    """Plot one per-epoch profit curve per stream on a shared axis."""
    fig, ax = plt.subplots(figsize=(10, 6), constrained_layout=True)
    for key, values in histories.items():
        if not values:
            continue
        ax.plot(range(len(values)), values, label=key, linewidth=1.6)
        ax.annotate(
            f"{values[-1]:.2f}",
            xy=(len(values) - 1, values[-1]),
            xytext=(6, -10),
            textcoords="offset points",
            fontsize=8,
            bbox=dict(boxstyle="round,pad=0.2", facecolor="white", alpha=0.55),
        )
    ax.set_xlabel("Epoch", fontsize=12)
    ax.set_ylabel(ylabel, fontsize=12)
    ax.set_title("Annealing convergence per stream", fontsize=14, fontweight="bold")
    ax.grid(True, alpha=0.25, linestyle="--", linewidth=0.7)
    if histories:
        ax.legend(
            loc="center left",
            bbox_to_anchor=(1.02, 0.5),
            frameon=False,
            fontsize=9,
            borderaxespad=0.0,
        )
    _ensure_dir(os.path.dirname(save_path))
    fig.savefig(save_path, dpi=150)
    plt.close(fig)
    logger.info("Convergence plot saved as: %s", save_path)
    return save_path
