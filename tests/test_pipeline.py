import json

import pytest

from sigmanet import NeuralNetwork
from sigmanet.core.serializer import load_network
from sigmanet.training import pipelines


def _config(tmp_path, **train):
    config = pipelines.load_preset("and-gate")
    config["train"].update({"iterations": 60, "run_dir": str(tmp_path / "run"), **train})
    return config


def test_presets_are_copies():
    presets = pipelines.presets()
    assert {"and-gate", "xor", "colors"} <= set(presets)
    presets["xor"]["model"]["seed"] = 123
    assert pipelines.load_preset("xor")["model"]["seed"] != 123
    with pytest.raises(KeyError):
        pipelines.load_preset("missing")


def test_pipeline_writes_artifacts(tmp_path, capsys):
    result = pipelines.run_pipeline(_config(tmp_path, log_period=20))
    run_dir = tmp_path / "run"
    for name in ("metrics.jsonl", "metrics.csv", "network.json", "evaluation.json", "manifest.json", "summary.json"):
        assert (run_dir / name).exists(), name
    assert not (run_dir / "error.png").exists()
    assert "=== SigmaNet run ===" in capsys.readouterr().out

    epochs = [json.loads(line)["epoch"] for line in (run_dir / "metrics.jsonl").read_text().splitlines()]
    assert epochs == [0, 20, 40]

    manifest = json.loads((run_dir / "manifest.json").read_text())
    assert manifest["topology"] == [2, 3, 1]
    assert manifest["dataset"] == {"type": "fixture", "name": "and"}
    assert manifest["result"] == {"error": result.error, "iterations": result.iterations}

    evaluation = json.loads((run_dir / "evaluation.json").read_text())
    assert evaluation["total"] == 4

    net = NeuralNetwork.from_json(load_network(result.network_path))
    assert net.sizes == [2, 3, 1]


def test_pipeline_with_plots(tmp_path):
    pipelines.run_pipeline(_config(tmp_path, enable_plots=True, log_period=10))
    assert (tmp_path / "run" / "error.png").exists()


def test_pipeline_keyed_dataset(tmp_path):
    config = pipelines.load_preset("colors")
    config["train"].update({"iterations": 20, "run_dir": str(tmp_path / "colors")})
    result = pipelines.run_pipeline(config)
    document = load_network(result.network_path)
    assert document["inputLookup"] is True
    assert list(document["layers"][-1]) == ["black", "white"]


def test_unknown_model_option(tmp_path):
    config = _config(tmp_path)
    config["model"]["dropout"] = 0.5
    with pytest.raises(KeyError):
        pipelines.run_pipeline(config)


def test_read_config_file_and_merge(tmp_path):
    yaml_path = tmp_path / "override.yaml"
    yaml_path.write_text("train:\n  iterations: 5\nmodel:\n  seed: 9\n")
    override = pipelines.read_config_file(yaml_path)
    merged = pipelines.merge_config(dict(pipelines.load_preset("xor")), override)
    assert merged["train"]["iterations"] == 5
    assert merged["train"]["error_threshold"] == 0.005
    assert merged["model"]["seed"] == 9

    json_path = tmp_path / "override.json"
    json_path.write_text(json.dumps({"train": {"log_period": 1}}))
    assert pipelines.read_config_file(json_path) == {"train": {"log_period": 1}}

    toml_path = tmp_path / "override.toml"
    toml_path.write_text("[train]\n")
    with pytest.raises(ValueError):
        pipelines.read_config_file(toml_path)
