"""Training progress sinks.

Sinks are registered as trainer observers and receive ``on_epoch(epoch,
metrics)`` on every reported epoch. Non-numeric metric values are skipped.
"""

from __future__ import annotations

import csv
import json
import subprocess
from pathlib import Path
from typing import Dict, Mapping, Sequence


def git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except (OSError, subprocess.CalledProcessError):  # pragma: no cover - git may be unavailable
        return "unknown"


class _EpochSink:
    """Truncates ``path`` on creation and builds one record per epoch.

    Subclasses define ``on_epoch``.
    """

    def __init__(self, path: str | Path, split: str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.split = split

    def record(self, epoch: int, metrics: Mapping[str, object]) -> Dict[str, object]:
        row: Dict[str, object] = {"epoch": int(epoch), "split": self.split}
        for key, value in metrics.items():
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                row[key] = float(value)
        return row

    def __call__(self, epoch: int, metrics: Mapping[str, object]) -> None:
        self.on_epoch(epoch, metrics)


class JsonlSink(_EpochSink):
    """Append one JSON line per reported epoch, tagged with seed and git sha."""

    def __init__(
        self,
        path: str | Path,
        *,
        split: str = "train",
        seed: int | None = None,
        sha: str | None = None,
    ) -> None:
        super().__init__(path, split)
        self.seed = seed
        self.sha = sha or git_sha()

    def on_epoch(self, epoch: int, metrics: Mapping[str, object]) -> None:
        row = self.record(epoch, metrics)
        row.update({"seed": self.seed, "sha": self.sha})
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(row) + "\n")


class CsvSink(_EpochSink):
    """Write reported epochs to CSV.

    The header is fixed by the first row written; metrics that appear only
    later are dropped so every row shares one schema.
    """

    def __init__(self, path: str | Path, *, split: str = "train") -> None:
        super().__init__(path, split)
        self.fieldnames: Sequence[str] | None = None

    def on_epoch(self, epoch: int, metrics: Mapping[str, object]) -> None:
        row = self.record(epoch, metrics)
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            if self.fieldnames is None:
                self.fieldnames = list(row)
                writer = csv.DictWriter(handle, fieldnames=self.fieldnames, extrasaction="ignore")
                writer.writeheader()
            else:
                writer = csv.DictWriter(handle, fieldnames=self.fieldnames, extrasaction="ignore")
            writer.writerow(row)


__all__ = ["CsvSink", "JsonlSink", "git_sha"]
