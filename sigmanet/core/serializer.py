"""Portable, human-readable network documents.

A document looks like::

    {
      "layers": [
        {"x": {}, "y": {}},
        {"0": {"bias": -0.98, "weights": {"x": 0.83, "y": 1.24}},
         "1": {"bias": 3.48, "weights": {"x": 1.78, "y": -2.67}}},
        {"f": {"bias": 0.27, "weights": {"0": 1.31, "1": 2.00}}}
      ],
      "inputLookup": true,
      "outputLookup": true
    }

Unit identifiers on a keyed boundary layer are lookup keys in index order,
everywhere else they are the decimal unit index.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .lookup import Lookup
from .network import FeedForwardNetwork, propagate, validate_sizes
from .types import Array, DatasetError, NetworkNotTrained, ShapeError, TopologyError

Document = Dict[str, object]


def _unit_ids(size: int, lookup: Lookup | None) -> List[str]:
    if lookup is not None:
        return list(lookup.keys)
    return [str(i) for i in range(size)]


def export_network(
    network: FeedForwardNetwork,
    input_lookup: Lookup | None = None,
    output_lookup: Lookup | None = None,
) -> Document:
    """Render ``network`` as a JSON-compatible document."""

    if not network.initialized:
        raise NetworkNotTrained("Cannot export a network without parameters")

    last = network.output_layer
    layers: List[Dict[str, Dict[str, object]]] = []
    for layer, size in enumerate(network.sizes):
        if layer == 0:
            ids = _unit_ids(size, input_lookup)
        elif layer == last:
            ids = _unit_ids(size, output_lookup)
        else:
            ids = _unit_ids(size, None)

        units: Dict[str, Dict[str, object]] = {}
        for j, node in enumerate(ids):
            if layer == 0:
                units[node] = {}
                continue
            row = network.weights[layer][j]
            units[node] = {
                "bias": float(network.biases[layer][j]),
                "weights": {prev: float(row[k]) for k, prev in enumerate(layers[layer - 1])},
            }
        layers.append(units)

    return {
        "layers": layers,
        "inputLookup": input_lookup is not None,
        "outputLookup": output_lookup is not None,
    }


def _boundary_lookup(layer: Mapping[str, object], flag: object) -> Lookup | None:
    # Older documents lack the flags; a keyed layer never has a unit "0" then.
    keyed = bool(flag) if flag is not None else "0" not in layer
    return Lookup.from_keys(layer.keys()) if keyed else None


def _parse_document(
    document: Mapping[str, object],
) -> Tuple[List[Array], List[Array], Lookup | None, Lookup | None]:
    layers = document.get("layers")
    if not isinstance(layers, Sequence) or len(layers) < 2:
        raise TopologyError("A network document needs at least two layers")
    validate_sizes([len(layer) for layer in layers])

    input_lookup = _boundary_lookup(layers[0], document.get("inputLookup"))
    output_lookup = _boundary_lookup(layers[-1], document.get("outputLookup"))

    weights: List[Array] = []
    biases: List[Array] = []
    for layer_idx in range(1, len(layers)):
        prev_ids = list(layers[layer_idx - 1].keys())
        units = layers[layer_idx]
        W = np.zeros((len(units), len(prev_ids)), dtype=np.float64)
        b = np.zeros(len(units), dtype=np.float64)
        for j, unit in enumerate(units.values()):
            b[j] = float(unit["bias"])
            incoming = unit["weights"]
            if len(incoming) != len(prev_ids):
                raise TopologyError(
                    f"Layer {layer_idx} unit {j} has {len(incoming)} weights, expected {len(prev_ids)}"
                )
            W[j] = [float(incoming[prev]) for prev in prev_ids]
        weights.append(W)
        biases.append(b)
    return weights, biases, input_lookup, output_lookup


def import_network(
    document: Mapping[str, object], *, momentum: float = 0.1, seed: int | None = None
) -> Tuple[FeedForwardNetwork, Lookup | None, Lookup | None]:
    """Rebuild a network and its lookup tables from ``document``."""

    weights, biases, input_lookup, output_lookup = _parse_document(document)
    network = FeedForwardNetwork(momentum=momentum, seed=seed)
    network.load_parameters(weights, biases)
    return network, input_lookup, output_lookup


@dataclass(frozen=True)
class CompiledNetwork:
    """Inference-only artifact holding exported layer data.

    Evaluation goes through the same propagation routine as training, so the
    output matches the source network exactly. It keeps no reference to the
    network it was compiled from.
    """

    weights: Tuple[Optional[Array], ...]
    biases: Tuple[Optional[Array], ...]
    input_lookup: Lookup | None = None
    output_lookup: Lookup | None = None

    @classmethod
    def from_document(cls, document: Mapping[str, object]) -> "CompiledNetwork":
        weights, biases, input_lookup, output_lookup = _parse_document(document)
        for W, b in zip(weights, biases):
            W.setflags(write=False)
            b.setflags(write=False)
        return cls(
            weights=(None, *weights),
            biases=(None, *biases),
            input_lookup=input_lookup,
            output_lookup=output_lookup,
        )

    @property
    def sizes(self) -> List[int]:
        return [self.weights[1].shape[1]] + [W.shape[0] for W in self.weights[1:]]

    def __call__(self, record: Union[Sequence[float], Mapping[str, float]]):
        if isinstance(record, Mapping):
            if self.input_lookup is None:
                raise DatasetError("Keyed record given to a network without an input lookup")
            inputs = self.input_lookup.to_vector(record)
        else:
            inputs = np.asarray(record, dtype=np.float64)
        if inputs.shape != (self.sizes[0],):
            raise ShapeError(f"Expected input of width {self.sizes[0]}, got shape {inputs.shape}")
        output = propagate(self.weights, self.biases, inputs)[-1]
        if self.output_lookup is not None:
            return self.output_lookup.to_record(output)
        return output


def compile_network(document: Mapping[str, object]) -> CompiledNetwork:
    return CompiledNetwork.from_document(document)


def save_network(document: Mapping[str, object], path: str | Path) -> str:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document, indent=2))
    return str(path)


def load_network(path: str | Path) -> Document:
    document = json.loads(Path(path).read_text())
    if not isinstance(document, Mapping):
        raise TypeError(f"{path} must decode to a mapping")
    return dict(document)


__all__ = [
    "CompiledNetwork",
    "Document",
    "compile_network",
    "export_network",
    "import_network",
    "load_network",
    "save_network",
]
