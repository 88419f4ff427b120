"""Symbolic key lookup tables.

A :class:`Lookup` maps feature or label names onto dense vector positions so
that keyed records such as ``{"red": 1, "blue": 0.5}`` can flow through the
numeric core. Tables are immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Mapping, Tuple

import numpy as np

from .types import Array


@dataclass(frozen=True)
class Lookup:
    """Ordered, immutable ``key -> index`` table."""

    keys: Tuple[str, ...]
    index: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(set(self.keys)) != len(self.keys):
            raise ValueError("Lookup keys must be unique")
        object.__setattr__(self, "index", {key: i for i, key in enumerate(self.keys)})

    @classmethod
    def build(cls, records: Iterable[Mapping[str, float]]) -> "Lookup":
        """Assign indices to keys in first-seen order across ``records``."""

        seen: Dict[str, None] = {}
        for record in records:
            for key in record:
                seen.setdefault(key, None)
        return cls(tuple(seen))

    @classmethod
    def from_keys(cls, keys: Iterable[str]) -> "Lookup":
        return cls(tuple(keys))

    def __len__(self) -> int:
        return len(self.keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys)

    def __contains__(self, key: object) -> bool:
        return key in self.index

    def __getitem__(self, key: str) -> int:
        return self.index[key]

    def to_vector(self, record: Mapping[str, float]) -> Array:
        """Dense vector for ``record``; missing keys are 0, unknown keys dropped."""

        vector = np.zeros(len(self.keys), dtype=np.float64)
        for key, value in record.items():
            position = self.index.get(key)
            if position is not None:
                vector[position] = value
        return vector

    def to_record(self, vector: Iterable[float]) -> Dict[str, float]:
        values = np.asarray(vector, dtype=np.float64)
        return {key: float(values[i]) for i, key in enumerate(self.keys)}


def build_lookup(records: Iterable[Mapping[str, float]]) -> Lookup:
    return Lookup.build(records)


def to_vector(lookup: Lookup, record: Mapping[str, float]) -> Array:
    return lookup.to_vector(record)


def to_record(lookup: Lookup, vector: Iterable[float]) -> Dict[str, float]:
    return lookup.to_record(vector)


__all__ = ["Lookup", "build_lookup", "to_record", "to_vector"]
