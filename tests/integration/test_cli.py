import json
from pathlib import Path

import pytest

from cli.main import main


def _last_json(capsys):
    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    return json.loads(lines[-1])


def test_cli_train_preset(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(["train", "--preset", "and-gate", "--iterations", "30"])
    payload = _last_json(capsys)
    run_dir = Path("runs/and-gate")
    assert (run_dir / "metrics.jsonl").exists()
    assert (run_dir / "manifest.json").exists()
    assert payload["iterations"] == 30
    assert payload["network"] == str(run_dir / "network.json")


def test_cli_train_test_and_run(tmp_path, capsys):
    run_dir = tmp_path / "xor"
    dump = tmp_path / "resolved.json"
    main(
        [
            "train",
            "--preset",
            "xor",
            "--iterations",
            "20",
            "--hidden",
            "4",
            "--seed",
            "5",
            "--run-dir",
            str(run_dir),
            "--dump-config",
            str(dump),
        ]
    )
    network = _last_json(capsys)["network"]
    resolved = json.loads(dump.read_text())
    assert resolved["model"]["hidden_layers"] == [4]
    assert resolved["model"]["seed"] == 5

    main(["test", network, "--dataset", "xor"])
    stats = _last_json(capsys)
    assert stats["total"] == 4
    assert "accuracy" in stats

    main(["run", network, "[1, 0]"])
    output = _last_json(capsys)
    assert len(output) == 1
    assert 0.0 < output[0] < 1.0


def test_cli_config_override_and_data_file(tmp_path, capsys):
    data = tmp_path / "gates.csv"
    data.write_text("a,b,target\n0,0,0\n0,1,1\n1,0,1\n1,1,1\n")
    override = tmp_path / "override.yaml"
    override.write_text(f"train:\n  iterations: 4\n  run_dir: {tmp_path / 'csv-run'}\n")

    main(["train", "--config", str(override), "--data-file", str(data)])
    payload = _last_json(capsys)
    assert payload["iterations"] == 4

    manifest = json.loads(Path(payload["manifest"]).read_text())
    assert manifest["dataset"]["format"] == "csv"
    assert manifest["config"]["data"]["name"] == "file"


def test_cli_keyed_run(tmp_path, capsys):
    main(["train", "--preset", "colors", "--iterations", "10", "--run-dir", str(tmp_path / "colors")])
    network = _last_json(capsys)["network"]
    main(["run", network, json.dumps({"r": 0.5, "g": 0.1})])
    assert set(_last_json(capsys)) == {"black", "white"}


def test_cli_presets_listing(capsys):
    main(["presets"])
    out = capsys.readouterr().out
    assert "preset  and-gate" in out
    assert "dataset colors" in out


def test_cli_test_requires_dataset(tmp_path, capsys):
    main(["train", "--preset", "and-gate", "--iterations", "1", "--run-dir", str(tmp_path / "r")])
    network = _last_json(capsys)["network"]
    with pytest.raises(SystemExit):
        main(["test", network])
