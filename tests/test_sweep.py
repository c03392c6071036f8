import json
import os

import pytest

from errors import InvalidConfiguration
from sweep import load_trace, main, run_sweep
from visualize import plot_hit_miss_rate, plot_miss_rate_sweep


def make_config(tmp_path, trace):
    cfg = {
        "trace": trace,
        "sweep": {"cache_sizes": [256, 1024], "block_size": 64, "associativities": [0, 1, 2]},
        "output": {"results_dir": str(tmp_path / "results")},
    }
    path = tmp_path / "config.json"
    path.write_text(json.dumps(cfg))
    return cfg, str(path)


def test_run_sweep_rows(tmp_path, trace_file):
    cfg, _ = make_config(tmp_path, {"path": trace_file([0, 64, 0, 64])})
    rows = run_sweep(cfg)
    assert len(rows) == 6
    assert {r["associativity"] for r in rows} == {0, 1, 2}
    assert all(r["miss_rate"] == 50.0 for r in rows)


def test_generated_trace_saved(tmp_path):
    out = str(tmp_path / "gen.txt")
    addrs = load_trace({"generate": {"access_pattern": "random", "num_requests": 50,
                                     "working_set_kb": 2, "random_seed": 1, "save_to": out}})
    assert len(addrs) == 50
    assert os.path.exists(out)


def test_trace_section_required():
    with pytest.raises(InvalidConfiguration):
        load_trace({})


def test_main_writes_results_and_plot(tmp_path):
    _, path = make_config(tmp_path, {"generate": {"num_requests": 200, "working_set_kb": 4,
                                                  "random_seed": 3}})
    assert main(["--config", path]) == 0
    with open(tmp_path / "results" / "sweep.json") as f:
        assert len(json.load(f)) == 6
    assert os.path.exists(tmp_path / "results" / "miss_rate_vs_size.png")


def test_main_bad_config(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "missing.json")]) == 1
    assert "cachesim-sweep" in capsys.readouterr().err


def test_plots(tmp_path):
    rows = [
        {"cache_size": 256, "associativity": 1, "miss_rate": 60.0},
        {"cache_size": 512, "associativity": 1, "miss_rate": 40.0},
    ]
    assert os.path.exists(plot_miss_rate_sweep(rows, str(tmp_path / "a" / "sweep.png")))
    assert os.path.exists(plot_hit_miss_rate(25.0, str(tmp_path / "b" / "pie.png")))


def test_main_unwritable_results_dir(tmp_path, trace_file, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    cfg = {
        "trace": {"path": trace_file([0, 64])},
        "sweep": {"cache_sizes": [256], "associativities": [1]},
        "output": {"results_dir": str(blocker / "results")},
    }
    path = tmp_path / "config.json"
    path.write_text(json.dumps(cfg))
    assert main(["--config", str(path)]) == 1
    assert "Error in writing file" in capsys.readouterr().err


def test_main_negative_request_count(tmp_path):
    _, path = make_config(tmp_path, {"generate": {"num_requests": -5}})
    assert main(["--config", path]) == 1
