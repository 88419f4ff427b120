"""Command line entry point for SigmaNet."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from sigmanet.core.serializer import load_network
from sigmanet.data import registry
from sigmanet.models import NeuralNetwork
from sigmanet.reporting.artifacts import json_ready
from sigmanet.training import pipelines


def _format_result(result) -> str:
    payload = {
        "error": result.error,
        "iterations": result.iterations,
        "network": result.network_path,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
    }
    if getattr(result, "summary_path", ""):
        payload["summary"] = result.summary_path
    return json.dumps(payload, sort_keys=True)


def _dataset_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--dataset", help="Registered dataset name (see `presets`)")
    parser.add_argument("--data-file", type=Path, help="JSON, JSONL or CSV dataset file")
    parser.add_argument(
        "--target-cols",
        default="target",
        help="Comma separated target columns for CSV files",
    )
    parser.add_argument(
        "--keyed",
        action="store_true",
        help="Use CSV column names as lookup keys instead of positions",
    )


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    commands = parser.add_subparsers(dest="command", required=True)

    train = commands.add_parser("train", help="Train a network and write run artifacts")
    train.add_argument(
        "--preset",
        choices=sorted(pipelines.presets().keys()),
        default="and-gate",
        help="Preset configuration to execute",
    )
    train.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    _dataset_args(train)
    train.add_argument("--hidden", type=int, nargs="+", help="Hidden layer sizes")
    train.add_argument("--iterations", type=int, help="Maximum number of epochs")
    train.add_argument("--error-threshold", type=float, help="Stop once the epoch error reaches this")
    train.add_argument("--learning-rate", type=float, help="Learning rate")
    train.add_argument("--seed", type=int, help="Seed for weight initialisation")
    train.add_argument("--run-dir", type=Path, help="Directory for run artifacts")
    train.add_argument("--enable-plots", action="store_true", help="Write an error curve plot")
    train.add_argument("--log", action="store_true", help="Print training progress")
    train.add_argument("--dump-config", type=Path, help="Dump the resolved config to a JSON file")

    test = commands.add_parser("test", help="Evaluate a saved network on a dataset")
    test.add_argument("network", type=Path, help="Network JSON written by `train`")
    _dataset_args(test)

    run = commands.add_parser("run", help="Run a saved network on one input record")
    run.add_argument("network", type=Path, help="Network JSON written by `train`")
    run.add_argument("input", help="Input record as JSON, e.g. '[0, 1]' or '{\"r\": 1}'")

    commands.add_parser("presets", help="List available presets and datasets")
    return parser.parse_args(argv)


def _data_cfg(args: argparse.Namespace) -> dict | None:
    if args.data_file:
        return {
            "name": "file",
            "options": {
                "path": str(args.data_file),
                "target_cols": args.target_cols,
                "keyed": bool(args.keyed),
            },
        }
    if args.dataset:
        return {"name": args.dataset, "options": {}}
    return None


def _resolve_config(args: argparse.Namespace) -> dict:
    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = pipelines.read_config_file(args.config)
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = pipelines.merge_config(config, override)

    data_cfg = _data_cfg(args)
    if data_cfg is not None:
        config["data"] = data_cfg

    model_cfg = config.setdefault("model", {})
    if args.hidden:
        model_cfg["hidden_layers"] = list(args.hidden)
    if args.seed is not None:
        model_cfg["seed"] = int(args.seed)

    train_cfg = config.setdefault("train", {})
    if args.iterations is not None:
        train_cfg["iterations"] = int(args.iterations)
    if args.error_threshold is not None:
        train_cfg["error_threshold"] = float(args.error_threshold)
    if args.learning_rate is not None:
        train_cfg["learning_rate"] = float(args.learning_rate)
    if args.run_dir is not None:
        train_cfg["run_dir"] = str(args.run_dir)
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    if args.log:
        train_cfg["log"] = True
    return config


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.command == "presets":
        for name in sorted(pipelines.presets().keys()):
            print(f"preset  {name}")
        for name in registry.available_datasets():
            print(f"dataset {name}")
        return

    if args.command == "train":
        config = _resolve_config(args)
        if args.dump_config:
            args.dump_config.parent.mkdir(parents=True, exist_ok=True)
            args.dump_config.write_text(json.dumps(config, indent=2))
        print(_format_result(pipelines.run_pipeline(config)))
        return

    net = NeuralNetwork.from_json(load_network(args.network))

    if args.command == "test":
        data_cfg = _data_cfg(args)
        if data_cfg is None:
            raise SystemExit("test requires --dataset or --data-file")
        dataset = registry.get_dataset(data_cfg["name"], **data_cfg["options"])
        print(json.dumps(json_ready(net.test(dataset.examples).as_dict()), sort_keys=True))
        return

    output = net.run(json.loads(args.input))
    if hasattr(output, "tolist"):
        output = output.tolist()
    print(json.dumps(output, sort_keys=True))


if __name__ == "__main__":
    main()
