"""Core typing contracts and error types for SigmaNet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence, Union

import numpy as np

Array = np.ndarray

Record = Union[Sequence[float], Mapping[str, float], Array]


class SigmaNetError(Exception):
    """Base class for every error raised by SigmaNet."""


class TopologyError(SigmaNetError, ValueError):
    """Raised when layer sizes cannot describe a feed-forward network."""


class ShapeError(SigmaNetError, ValueError):
    """Raised when a vector width disagrees with the current topology."""


class DatasetError(SigmaNetError, ValueError):
    """Raised for empty or inconsistently shaped datasets."""


class NetworkNotTrained(SigmaNetError, RuntimeError):
    """Raised when using a network that was never initialised or loaded."""


@dataclass(frozen=True)
class Example:
    """A single training example."""

    input: Record
    output: Record


@dataclass(frozen=True)
class TrainResult:
    """Summary returned by :meth:`sigmanet.training.trainer.Trainer.train`."""

    error: float
    iterations: int

    def as_dict(self) -> Dict[str, float]:
        return {"error": float(self.error), "iterations": int(self.iterations)}


@dataclass(frozen=True)
class Misclassification:
    """An evaluated example whose predicted class differs from its label."""

    input: Record
    output: Record
    actual: int
    expected: float


@dataclass(frozen=True)
class BinaryStats:
    """Confusion counts for single-output networks."""

    true_pos: int
    true_neg: int
    false_pos: int
    false_neg: int
    total: int
    precision: float
    recall: float
    accuracy: float


@dataclass
class EvaluationStats:
    """Result of :func:`sigmanet.training.metrics.evaluate`."""

    error: float
    misclassifications: List[Misclassification] = field(default_factory=list)
    binary: BinaryStats | None = None

    def as_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "error": float(self.error),
            "misclassifications": [
                {
                    "input": _plain(item.input),
                    "output": _plain(item.output),
                    "actual": item.actual,
                    "expected": item.expected,
                }
                for item in self.misclassifications
            ],
        }
        if self.binary is not None:
            payload.update(
                {
                    "true_pos": self.binary.true_pos,
                    "true_neg": self.binary.true_neg,
                    "false_pos": self.binary.false_pos,
                    "false_neg": self.binary.false_neg,
                    "total": self.binary.total,
                    "precision": self.binary.precision,
                    "recall": self.binary.recall,
                    "accuracy": self.binary.accuracy,
                }
            )
        return payload


def _plain(record: Record):
    if isinstance(record, np.ndarray):
        return record.tolist()
    if isinstance(record, Mapping):
        return {str(k): float(v) for k, v in record.items()}
    return [float(v) for v in record]


__all__ = [
    "Array",
    "BinaryStats",
    "DatasetError",
    "EvaluationStats",
    "Example",
    "Misclassification",
    "NetworkNotTrained",
    "Record",
    "ShapeError",
    "SigmaNetError",
    "TopologyError",
    "TrainResult",
]
