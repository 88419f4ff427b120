"""High level network object tying the engine, lookups and serializer together."""

from __future__ import annotations

from typing import Mapping, Sequence

from .core.network import FeedForwardNetwork
from .core.serializer import CompiledNetwork, Document, compile_network, export_network, import_network
from .core.types import EvaluationStats, NetworkNotTrained, Record, TrainResult
from .data.encoding import DatasetEncoder
from .training.metrics import DEFAULT_BINARY_THRESHOLD, evaluate
from .training.stream import TrainStream
from .training.trainer import DEFAULT_LEARNING_RATE, TrainOptions, Trainer


class NeuralNetwork:
    """Feed-forward sigmoid network with a record-oriented interface.

    Inputs and outputs may be numeric vectors or keyed mappings. Keyed
    records are translated through lookup tables built from the first keyed
    dataset the network sees.
    """

    def __init__(
        self,
        *,
        learning_rate: float = DEFAULT_LEARNING_RATE,
        momentum: float = 0.1,
        hidden_layers: Sequence[int] | None = None,
        binary_threshold: float = DEFAULT_BINARY_THRESHOLD,
        seed: int | None = None,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.learning_rate = learning_rate
        self.binary_threshold = binary_threshold
        self.network = FeedForwardNetwork(momentum=momentum, seed=seed)
        self.encoder = DatasetEncoder()
        self.trainer = Trainer(
            self.network,
            self.encoder,
            hidden_layers=hidden_layers,
            learning_rate=learning_rate,
            callbacks=callbacks,
        )

    def __repr__(self) -> str:
        return f"<NeuralNetwork sizes={self.network.sizes}>"

    @property
    def sizes(self):
        return list(self.network.sizes)

    @property
    def input_lookup(self):
        return self.encoder.input_lookup

    @property
    def output_lookup(self):
        return self.encoder.output_lookup

    def run(self, record: Record):
        """Predict the output for one input record."""

        self._require_parameters()
        output = self.network.forward(self.encoder.encode_input(record))
        return self.encoder.decode_output(output.copy())

    def train(self, data: object, options: TrainOptions | Mapping[str, object] | None = None, **kwargs) -> TrainResult:
        if options is None:
            options = kwargs
        elif kwargs:
            raise TypeError("Pass training options either as a mapping or as keywords, not both")
        return self.trainer.train(data, options)

    def test(self, data: object) -> EvaluationStats:
        self._require_parameters()
        return evaluate(
            self.network,
            data,
            encoder=self.encoder,
            binary_threshold=self.binary_threshold,
        )

    def to_json(self) -> Document:
        self._require_parameters()
        return export_network(self.network, self.encoder.input_lookup, self.encoder.output_lookup)

    @classmethod
    def from_json(cls, document: Mapping[str, object], **kwargs) -> "NeuralNetwork":
        net = cls(**kwargs)
        net.load_json(document)
        return net

    def load_json(self, document: Mapping[str, object]) -> "NeuralNetwork":
        """Replace parameters and lookups with those stored in ``document``."""

        network, input_lookup, output_lookup = import_network(
            document, momentum=self.network.momentum, seed=self.network.seed
        )
        self.network.load_parameters(network.weights[1:], network.biases[1:])
        self.encoder.input_lookup = input_lookup
        self.encoder.output_lookup = output_lookup
        return self

    def to_function(self) -> CompiledNetwork:
        return compile_network(self.to_json())

    def create_train_stream(self, **options) -> TrainStream:
        return TrainStream(self.trainer, **options)

    def _require_parameters(self) -> None:
        if not self.network.initialized:
            raise NetworkNotTrained("Network has not been trained or loaded")


__all__ = ["NeuralNetwork"]
