"""File based dataset loaders (JSON, JSONL and numeric CSV)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Sequence

import pandas as pd

from ..core.types import DatasetError, Example
from .encoding import as_example
from .registry import DatasetSpec, register_dataset


def read_json_examples(path: Path) -> List[Example]:
    payload = json.loads(path.read_text())
    if isinstance(payload, dict):
        payload = payload.get("data", [payload])
    return [as_example(item) for item in payload]


def read_jsonl_examples(path: Path) -> List[Example]:
    examples = []
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line:
            continue
        examples.append(as_example(json.loads(line)))
    return examples


def read_csv_examples(path: Path, target_cols: Sequence[str], keyed: bool = False) -> List[Example]:
    """Split CSV columns into inputs and targets.

    With ``keyed`` the examples use column names as lookup keys instead of
    positional vectors.
    """

    df = pd.read_csv(path)
    missing = [col for col in target_cols if col not in df.columns]
    if missing:
        raise KeyError(f"Target columns {missing} not found in CSV")
    targets = df[list(target_cols)].astype(float)
    inputs = df.drop(columns=list(target_cols)).astype(float)
    if keyed:
        return [
            Example(input=x, output=y)
            for x, y in zip(inputs.to_dict(orient="records"), targets.to_dict(orient="records"))
        ]
    return [
        Example(input=x.tolist(), output=y.tolist())
        for x, y in zip(inputs.to_numpy(), targets.to_numpy())
    ]


@register_dataset("file")
def load_file(
    *,
    path: str | Path,
    target_cols: Sequence[str] | str = ("target",),
    keyed: bool = False,
    **_: object,
) -> DatasetSpec:
    """Load examples from ``path`` based on its suffix."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".json":
        examples = read_json_examples(path)
    elif suffix == ".jsonl":
        examples = read_jsonl_examples(path)
    elif suffix == ".csv":
        if isinstance(target_cols, str):
            target_cols = [col.strip() for col in target_cols.split(",") if col.strip()]
        examples = read_csv_examples(path, target_cols, keyed=keyed)
    else:
        raise DatasetError(f"Unsupported dataset file type: {path.suffix}")
    provenance = {"type": "file", "path": str(path), "format": suffix.lstrip(".")}
    return DatasetSpec(name=path.stem, examples=examples, provenance=provenance)


__all__ = ["load_file", "read_csv_examples", "read_json_examples", "read_jsonl_examples"]
