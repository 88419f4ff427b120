import csv
import json
from pathlib import Path

from sigmanet.reporting.artifacts import json_ready, write_evaluation, write_manifest
from sigmanet.reporting.metrics import CsvSink, JsonlSink
from sigmanet.reporting.plots import PlotAdapter
from sigmanet.reporting.summary import summarize_errors, write_summary


def test_jsonl_and_csv_sinks(tmp_path):
    jsonl = JsonlSink(tmp_path / "metrics.jsonl", split="train", seed=3, sha="abc")
    table = CsvSink(tmp_path / "metrics.csv")
    for epoch, error in [(0, 0.4), (10, 0.1)]:
        jsonl.on_epoch(epoch, {"error": error})
        table(epoch, {"error": error, "note": "ignored"})

    lines = [json.loads(line) for line in jsonl.path.read_text().splitlines()]
    assert lines[1] == {"epoch": 10, "split": "train", "seed": 3, "sha": "abc", "error": 0.1}

    with table.path.open() as handle:
        rows = list(csv.DictReader(handle))
    assert [row["epoch"] for row in rows] == ["0", "10"]
    assert "note" not in rows[0]


def test_sinks_truncate_previous_runs(tmp_path):
    path = tmp_path / "metrics.jsonl"
    path.write_text('{"epoch": 99}\n')
    JsonlSink(path, sha="abc")
    assert path.read_text() == ""


def test_plot_adapter_headless(tmp_path):
    adapter = PlotAdapter(tmp_path, enable_plots=True, error_threshold=0.01)
    adapter.on_epoch(0, {"error": 0.5})
    adapter.on_epoch(10, {"error": 0.05})
    assert adapter.close() == tmp_path / "error.png"
    assert (tmp_path / "error.png").exists()


def test_plot_adapter_disabled(tmp_path):
    adapter = PlotAdapter(tmp_path / "off")
    adapter.on_epoch(0, {"error": 0.5})
    assert adapter.close() is None
    assert not (tmp_path / "off").exists()


def test_summarize_errors():
    records = [{"epoch": 0, "error": 0.5}, {"epoch": 10, "error": 0.004}, {"epoch": 20, "error": 0.002}]
    summary = summarize_errors(records, error_threshold=0.005)
    assert summary["records"] == 3
    assert summary["min"] == 0.002
    assert summary["last_epoch"] == 20
    assert summary["first_epoch_below_threshold"] == 10
    assert summarize_errors([]) == {"version": 1, "records": 0}


def test_write_summary_and_manifest(tmp_path):
    metrics = tmp_path / "metrics.jsonl"
    metrics.write_text(json.dumps({"epoch": 0, "error": 0.2}) + "\n")
    summary = json.loads(Path(write_summary(metrics, tmp_path / "summary.json")).read_text())
    assert summary["last"] == 0.2

    manifest_path = write_manifest(
        tmp_path / "manifest.json",
        config={"data": {"name": "and"}},
        dataset_provenance={"type": "fixture"},
        sizes=[2, 3, 1],
        result={"error": 0.1, "iterations": 5},
    )
    manifest = json.loads(Path(manifest_path).read_text())
    assert manifest["topology"] == [2, 3, 1]
    assert manifest["result"]["iterations"] == 5
    assert "git_sha" in manifest


def test_evaluation_artifact_writes_null_for_undefined_rates(tmp_path):
    stats = {"error": 0.25, "precision": float("nan"), "recall": 0.0, "misclassifications": [{"input": [1.0, 0.0]}]}
    path = write_evaluation(tmp_path / "evaluation.json", stats)
    text = Path(path).read_text()
    assert "NaN" not in text
    payload = json.loads(text)
    assert payload["precision"] is None
    assert payload["recall"] == 0.0
    assert payload["misclassifications"] == [{"input": [1.0, 0.0]}]
    assert json_ready((1.0, float("nan"))) == [1.0, None]


def test_sinks_are_callable_observers(tmp_path):
    sink = JsonlSink(tmp_path / "metrics.jsonl", sha="abc")
    sink(3, {"error": 0.5})
    assert json.loads(sink.path.read_text())["epoch"] == 3
