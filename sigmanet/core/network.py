"""Sigmoid feed-forward network: parameter store, forward and backward passes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence

import numpy as np

from .activations import mse, sigmoid, sigmoid_deriv
from .types import Array, NetworkNotTrained, ShapeError, TopologyError

INIT_RANGE = 0.2


def propagate(weights: Sequence[Optional[Array]], biases: Sequence[Optional[Array]], inputs: Array) -> List[Array]:
    """Return the activation of every layer for ``inputs``.

    ``weights[l]`` has shape ``(sizes[l], sizes[l-1])``; slot 0 is unused.
    Shared by the training network and compiled inference artifacts so both
    produce identical floating point results.
    """

    outputs = [inputs]
    x = inputs
    for layer in range(1, len(weights)):
        x = sigmoid(biases[layer] + weights[layer] @ x)
        outputs.append(x)
    return outputs


def validate_sizes(sizes: Sequence[int]) -> List[int]:
    sizes = [int(size) for size in sizes]
    if len(sizes) < 2:
        raise TopologyError(f"A network needs at least two layers, got sizes={sizes}")
    if any(size <= 0 for size in sizes):
        raise TopologyError(f"Layer sizes must be positive, got sizes={sizes}")
    return sizes


@dataclass
class FeedForwardNetwork:
    """Layered sigmoid network trained by backpropagation with momentum.

    Parameters and training scratch buffers are stored per layer so that list
    index ``l`` always addresses layer ``l``; slots that do not exist for the
    input layer hold ``None``.
    """

    momentum: float = 0.1
    seed: int | None = None
    sizes: List[int] = field(default_factory=list)
    weights: List[Optional[Array]] = field(default_factory=list, repr=False)
    biases: List[Optional[Array]] = field(default_factory=list, repr=False)
    outputs: List[Array] = field(default_factory=list, repr=False)
    deltas: List[Array] = field(default_factory=list, repr=False)
    errors: List[Array] = field(default_factory=list, repr=False)
    changes: List[Optional[Array]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self._rng = np.random.default_rng(self.seed)

    @property
    def output_layer(self) -> int:
        return len(self.sizes) - 1

    @property
    def initialized(self) -> bool:
        return bool(self.sizes) and len(self.weights) == len(self.sizes)

    def initialize(self, sizes: Sequence[int], keep_parameters: bool = False) -> None:
        """Size all buffers for ``sizes`` and randomise parameters unless kept."""

        sizes = validate_sizes(sizes)
        if keep_parameters and not self._parameters_match(sizes):
            raise TopologyError(
                f"Cannot keep parameters: stored topology {self.sizes} differs from {sizes}"
            )
        self.sizes = sizes

        if not keep_parameters:
            self.weights = [None]
            self.biases = [None]
            for prev_size, size in zip(sizes[:-1], sizes[1:]):
                self.weights.append(self._randos((size, prev_size)))
                self.biases.append(self._randos((size,)))

        self.outputs = [np.zeros(size) for size in sizes]
        self.deltas = [np.zeros(size) for size in sizes]
        self.errors = [np.zeros(size) for size in sizes]
        self.changes = [None] + [np.zeros_like(W) for W in self.weights[1:]]

    def load_parameters(self, weights: Sequence[Array], biases: Sequence[Array]) -> None:
        """Replace every parameter, deriving the topology from the matrices."""

        if len(weights) != len(biases) or not weights:
            raise TopologyError("weights and biases must describe the same non-empty layers")
        sizes = [int(np.asarray(weights[0]).shape[1])]
        sizes.extend(int(np.asarray(W).shape[0]) for W in weights)
        sizes = validate_sizes(sizes)
        self.weights = [None] + [np.array(W, dtype=np.float64) for W in weights]
        self.biases = [None] + [np.array(b, dtype=np.float64) for b in biases]
        if not self._parameters_match(sizes):
            raise TopologyError(f"Inconsistent parameter shapes for sizes={sizes}")
        self.initialize(sizes, keep_parameters=True)

    def forward(self, inputs: Array) -> Array:
        """Propagate ``inputs`` through every layer and return the output vector."""

        if not self.initialized:
            raise NetworkNotTrained("Network has no parameters; train or load it first")
        inputs = np.asarray(inputs, dtype=np.float64)
        if inputs.shape != (self.sizes[0],):
            raise ShapeError(f"Expected input of width {self.sizes[0]}, got shape {inputs.shape}")
        self.outputs = propagate(self.weights, self.biases, inputs)
        return self.outputs[-1]

    def backpropagate(self, target: Array, learning_rate: float) -> float:
        """Compute deltas for the last forward pass and apply the weight update.

        Returns the mean squared error of the output layer.
        """

        target = np.asarray(target, dtype=np.float64)
        last = self.output_layer
        if target.shape != (self.sizes[last],):
            raise ShapeError(f"Expected target of width {self.sizes[last]}, got shape {target.shape}")
        self._calculate_deltas(target)
        self._adjust_weights(learning_rate)
        return mse(self.errors[last])

    def train_pattern(self, inputs: Array, target: Array, learning_rate: float) -> float:
        self.forward(inputs)
        return self.backpropagate(target, learning_rate)

    def state_dict(self) -> Mapping[str, Array]:
        state = {}
        for layer in range(1, len(self.weights)):
            state[f"W{layer}"] = self.weights[layer].copy()
            state[f"b{layer}"] = self.biases[layer].copy()
        return state

    def parameter_count(self) -> int:
        return int(sum(W.size + b.size for W, b in zip(self.weights[1:], self.biases[1:])))

    # ------------------------------------------------------------------
    # Internal helpers

    def _calculate_deltas(self, target: Array) -> None:
        last = self.output_layer
        for layer in range(last, -1, -1):
            output = self.outputs[layer]
            if layer == last:
                error = target - output
            else:
                error = self.weights[layer + 1].T @ self.deltas[layer + 1]
            self.errors[layer] = error
            self.deltas[layer] = error * sigmoid_deriv(output)

    def _adjust_weights(self, learning_rate: float) -> None:
        for layer in range(1, self.output_layer + 1):
            incoming = self.outputs[layer - 1]
            delta = self.deltas[layer]
            change = learning_rate * np.outer(delta, incoming) + self.momentum * self.changes[layer]
            self.changes[layer] = change
            self.weights[layer] += change
            self.biases[layer] += learning_rate * delta

    def _randos(self, shape) -> Array:
        return self._rng.uniform(-INIT_RANGE, INIT_RANGE, size=shape)

    def _parameters_match(self, sizes: Sequence[int]) -> bool:
        if len(self.weights) != len(sizes) or len(self.biases) != len(sizes):
            return False
        for layer in range(1, len(sizes)):
            W, b = self.weights[layer], self.biases[layer]
            if W is None or b is None:
                return False
            if W.shape != (sizes[layer], sizes[layer - 1]) or b.shape != (sizes[layer],):
                return False
        return True


__all__ = ["FeedForwardNetwork", "propagate", "validate_sizes"]
