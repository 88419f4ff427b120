"""Config driven training runs with on-disk artifacts."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Sequence

from ..core.serializer import save_network
from ..data import registry
from ..models import NeuralNetwork
from ..reporting.artifacts import write_evaluation, write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary

_PRESETS: Dict[str, Mapping[str, object]] = {
    "and-gate": {
        "data": {"name": "and", "options": {}},
        "model": {"hidden_layers": [3], "learning_rate": 0.3, "momentum": 0.1, "seed": 7},
        "train": {
            "iterations": 20000,
            "error_threshold": 0.005,
            "log_period": 100,
            "run_dir": "runs/and-gate",
            "enable_plots": False,
        },
    },
    "xor": {
        "data": {"name": "xor", "options": {}},
        "model": {"hidden_layers": [3], "learning_rate": 0.6, "momentum": 0.1, "seed": 1},
        "train": {
            "iterations": 20000,
            "error_threshold": 0.005,
            "log_period": 100,
            "run_dir": "runs/xor",
            "enable_plots": False,
        },
    },
    "colors": {
        "data": {"name": "colors", "options": {}},
        "model": {"learning_rate": 0.3, "momentum": 0.1, "seed": 3},
        "train": {
            "iterations": 20000,
            "error_threshold": 0.005,
            "log_period": 100,
            "run_dir": "runs/colors",
            "enable_plots": False,
        },
    },
}

_MODEL_KEYS = {"hidden_layers", "learning_rate", "momentum", "binary_threshold", "seed"}
_TRAIN_KEYS = {"iterations", "error_threshold", "learning_rate", "log", "log_period"}


@dataclass(frozen=True)
class RunResult:
    """Paths and figures produced by :func:`run_pipeline`."""

    error: float
    iterations: int
    network_path: str
    metrics_path: str
    manifest_path: str
    summary_path: str = ""


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Mapping[str, object]:
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def read_config_file(path: str | Path) -> Mapping[str, object]:
    path = Path(path)
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        import yaml

        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")
    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def merge_config(base: dict, override: Mapping[str, object]) -> dict:
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            base[key] = merge_config(dict(base[key]), value)
        else:
            base[key] = value
    return base


def build_network(model_cfg: Mapping[str, object], callbacks: Sequence[object] = ()) -> NeuralNetwork:
    unknown = sorted(set(model_cfg) - _MODEL_KEYS)
    if unknown:
        raise KeyError(f"Unknown model options: {', '.join(unknown)}")
    return NeuralNetwork(callbacks=list(callbacks), **model_cfg)  # type: ignore[arg-type]


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Train on the configured dataset and write run artifacts."""

    data_cfg = dict(config["data"])
    model_cfg = dict(config.get("model", {}))
    train_cfg = dict(config.get("train", {}))

    dataset = registry.get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options", {})))
    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    seed = model_cfg.get("seed")
    error_threshold = float(train_cfg.get("error_threshold", 0.005))
    train_jsonl = JsonlSink(run_dir / "metrics.jsonl", split="train", seed=seed)
    train_csv = CsvSink(run_dir / "metrics.csv", split="train")
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)), error_threshold=error_threshold)

    net = build_network(model_cfg, callbacks=[train_jsonl, train_csv, plots])
    options = {key: train_cfg[key] for key in _TRAIN_KEYS if key in train_cfg}
    result = net.train(dataset.examples, options)
    plots.close()

    _print_run_summary(
        dataset_name=dataset.name,
        examples=len(dataset),
        sizes=net.sizes,
        param_count=net.network.parameter_count(),
        error=result.error,
        iterations=result.iterations,
    )

    network_path = save_network(net.to_json(), run_dir / "network.json")
    stats = net.test(dataset.examples)
    write_evaluation(run_dir / "evaluation.json", stats.as_dict())

    manifest = write_manifest(
        run_dir / "manifest.json",
        config=json.loads(json.dumps(config)),
        dataset_provenance=dataset.provenance,
        sizes=net.sizes,
        result=result.as_dict(),
    )
    summary_path = write_summary(train_jsonl.path, run_dir / "summary.json", error_threshold=error_threshold)

    return RunResult(
        error=result.error,
        iterations=result.iterations,
        network_path=network_path,
        metrics_path=str(train_jsonl.path),
        manifest_path=manifest,
        summary_path=summary_path,
    )


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _print_run_summary(
    *,
    dataset_name: str,
    examples: int,
    sizes: Sequence[int],
    param_count: int,
    error: float,
    iterations: int,
) -> None:
    print("=== SigmaNet run ===")
    print(f"Dataset       : {dataset_name} ({examples} examples)")
    print(f"Topology      : {list(sizes)}")
    print(f"Parameters    : {param_count}")
    print(f"Iterations    : {iterations}")
    print(f"Final error   : {error:.6f}")
    print("====================")


__all__ = ["RunResult", "load_preset", "merge_config", "presets", "read_config_file", "run_pipeline"]
