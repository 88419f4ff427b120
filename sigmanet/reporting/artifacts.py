"""Run artifact helpers."""

from __future__ import annotations

import json
import math
import platform
import time
from pathlib import Path
from typing import Mapping, Sequence

from .metrics import git_sha


def json_ready(value):
    """Replace nan floats with None so the result is strict JSON."""

    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, Mapping):
        return {key: json_ready(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_ready(item) for item in value]
    return value


def write_evaluation(path: str | Path, stats: Mapping[str, object]) -> str:
    """Write evaluation statistics; undefined rates become ``null``."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(json_ready(stats), indent=2, allow_nan=False))
    return str(path)


def write_manifest(
    path: str | Path,
    *,
    config: Mapping[str, object],
    dataset_provenance: Mapping[str, object],
    sizes: Sequence[int],
    result: Mapping[str, float],
) -> str:
    """Write a manifest JSON file describing a finished training run."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    manifest = {
        "git_sha": git_sha(),
        "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": config,
        "dataset": dict(dataset_provenance),
        "topology": [int(size) for size in sizes],
        "result": dict(result),
        "environment": {"python": platform.python_version()},
    }
    path.write_text(json.dumps(manifest, indent=2))
    return str(path)


__all__ = ["json_ready", "write_evaluation", "write_manifest"]
