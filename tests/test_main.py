from pathlib import Path

import yaml

from taskanneal.generator import generate_instance
from taskanneal.main import load_config, main
from taskanneal.visualization import next_unique_path, plot_epoch_progress_multi, plot_schedule


def test_single_run_from_generator_config(tmp_path: Path) -> None:
    cfg = {
        "seed": 1,
        "generator": {"enabled": True, "n": 10, "seed": 2},
        "sa": {"max_rejections": 3, "epoch_size_factor": 0.5, "alpha": 0.9, "streams": 2, "max_workers": 1},
        "charts": {"dir": str(tmp_path / "charts")},
    }
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    main(load_config(str(cfg_path)))
    charts = tmp_path / "charts"
    assert list(charts.glob("generated_n10_seed2*.out"))
    assert list(charts.glob("schedule_*.png"))
    assert list(charts.glob("progress_*.png"))


def test_charts_render(tmp_path: Path) -> None:
    inst = generate_instance(50, 0)
    out = plot_schedule(inst, list(range(inst.size)), str(tmp_path / "s.png"))
    assert Path(out).exists()
    out = plot_epoch_progress_multi({"stream 0": [1.0, 2.0, 2.5], "stream 1": []}, str(tmp_path / "p.png"))
    assert Path(out).exists()


def test_next_unique_path(tmp_path: Path) -> None:
    p = tmp_path / "a.png"
    assert next_unique_path(p) == str(p)
    p.write_bytes(b"")
    assert next_unique_path(p) == str(tmp_path / "a_1.png")
