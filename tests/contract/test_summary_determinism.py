from pathlib import Path

from sigmanet.training import pipelines


def test_summary_outputs_are_deterministic(tmp_path):
    config = {
        "data": {"name": "and", "options": {}},
        "model": {"hidden_layers": [3], "learning_rate": 0.3, "momentum": 0.1, "seed": 55},
        "train": {
            "iterations": 40,
            "error_threshold": 0.0,
            "log_period": 5,
            "run_dir": str(tmp_path / "run_a"),
        },
    }

    first = pipelines.run_pipeline(config)
    summary_a = Path(first.summary_path).read_bytes()
    metrics_a = Path(first.metrics_path).read_bytes()
    network_a = Path(first.network_path).read_bytes()

    config["train"]["run_dir"] = str(tmp_path / "run_b")
    second = pipelines.run_pipeline(config)

    assert Path(second.metrics_path).read_bytes() == metrics_a
    assert Path(second.summary_path).read_bytes() == summary_a
    assert Path(second.network_path).read_bytes() == network_a
    assert first.iterations == second.iterations == 40
