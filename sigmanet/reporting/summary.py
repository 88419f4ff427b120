"""Deterministic run summaries built from JSONL progress records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Mapping

import numpy as np


def _read_records(path: Path) -> List[Mapping[str, object]]:
    records: List[Mapping[str, object]] = []
    if path.exists():
        for line in path.read_text().splitlines():
            line = line.strip()
            if line:
                records.append(json.loads(line))
    return records


def summarize_errors(records: List[Mapping[str, object]], error_threshold: float | None = None) -> Mapping[str, object]:
    epochs = [int(r["epoch"]) for r in records if "error" in r]
    errors = np.asarray([float(r["error"]) for r in records if "error" in r], dtype=np.float64)
    summary: dict = {"version": 1, "records": len(errors)}
    if errors.size == 0:
        return summary
    summary.update(
        {
            "first": float(errors[0]),
            "last": float(errors[-1]),
            "min": float(np.min(errors)),
            "max": float(np.max(errors)),
            "last_epoch": epochs[-1],
        }
    )
    if error_threshold is not None:
        below = np.nonzero(errors <= error_threshold)[0]
        summary["first_epoch_below_threshold"] = epochs[int(below[0])] if below.size else None
    return summary


def write_summary(
    metrics_jsonl: str | Path,
    out_summary_json: str | Path,
    *,
    error_threshold: float | None = None,
) -> str:
    """Write a deterministic summary for ``metrics_jsonl``."""

    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    summary = summarize_errors(_read_records(Path(metrics_jsonl)), error_threshold)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["summarize_errors", "write_summary"]
