"""Epoch loop for sigmoid networks trained by backpropagation."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Callable, List, Mapping, Sequence

from ..core.network import FeedForwardNetwork
from ..core.types import DatasetError, TrainResult
from ..data.encoding import DatasetEncoder, EncodedExample

DEFAULT_LEARNING_RATE = 0.3


@dataclass
class TrainOptions:
    """Options accepted by :meth:`Trainer.train`."""

    iterations: int = 20000
    error_threshold: float = 0.005
    learning_rate: float | None = None
    log: bool | Callable[[str], None] = False
    log_period: int = 10
    callback: Callable[[Mapping[str, float]], None] | None = None
    callback_period: int = 10
    keep_parameters: bool = False

    @classmethod
    def from_mapping(cls, options: Mapping[str, object] | None) -> "TrainOptions":
        options = dict(options or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise KeyError(f"Unknown training options: {', '.join(unknown)}")
        return cls(**options)  # type: ignore[arg-type]


def hidden_sizes(input_size: int, hidden_layers: Sequence[int] | None) -> List[int]:
    if hidden_layers is not None:
        return [int(size) for size in hidden_layers]
    return [max(3, input_size // 2)]


class Trainer:
    """Drive forward and backward passes over a dataset until convergence."""

    def __init__(
        self,
        network: FeedForwardNetwork,
        encoder: DatasetEncoder | None = None,
        *,
        hidden_layers: Sequence[int] | None = None,
        learning_rate: float = DEFAULT_LEARNING_RATE,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.network = network
        self.encoder = encoder or DatasetEncoder()
        self.hidden_layers = list(hidden_layers) if hidden_layers is not None else None
        self.learning_rate = learning_rate
        self.callbacks = list(callbacks or [])

    def topology(self, examples: Sequence[EncodedExample]) -> List[int]:
        input_size = int(examples[0].input.shape[0])
        output_size = int(examples[0].output.shape[0])
        return [input_size, *hidden_sizes(input_size, self.hidden_layers), output_size]

    def prepare(self, data: object, keep_parameters: bool = False) -> List[EncodedExample]:
        """Encode ``data`` and size the network for it."""

        examples = self.encoder.encode(data)
        if not examples:
            raise DatasetError("Dataset is empty")
        self.network.initialize(self.topology(examples), keep_parameters=keep_parameters)
        return examples

    def train(self, data: object, options: TrainOptions | Mapping[str, object] | None = None) -> TrainResult:
        if not isinstance(options, TrainOptions):
            options = TrainOptions.from_mapping(options)
        learning_rate = options.learning_rate or self.learning_rate or DEFAULT_LEARNING_RATE
        examples = self.prepare(data, keep_parameters=options.keep_parameters)

        error = 1.0
        epoch = 0
        # 1.0 is returned only when no epoch ran.
        while epoch < options.iterations:
            error = self.run_epoch(examples, learning_rate)
            self.report_epoch(epoch, error, options)
            epoch += 1
            if error <= options.error_threshold:
                break

        return TrainResult(error=error, iterations=epoch)

    def run_epoch(self, examples: Sequence[EncodedExample], learning_rate: float) -> float:
        """One pass over ``examples``; returns the mean example error."""

        total = 0.0
        for example in examples:
            total += self.network.train_pattern(example.input, example.output, learning_rate)
        return total / len(examples)

    def report_epoch(self, epoch: int, error: float, options: TrainOptions) -> None:
        if epoch % max(1, options.log_period) == 0:
            if options.log:
                message = f"iterations: {epoch}, training error: {error}"
                if callable(options.log):
                    options.log(message)
                else:
                    print(message)
            self._emit_epoch(epoch, {"error": error})
        if options.callback is not None and epoch % max(1, options.callback_period) == 0:
            options.callback({"error": error, "iterations": epoch})

    # ------------------------------------------------------------------
    # Internal helpers

    def _emit_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["DEFAULT_LEARNING_RATE", "TrainOptions", "Trainer", "hidden_sizes"]
