"""SigmaNet public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.lookup import Lookup, build_lookup, to_record, to_vector
from .core.network import FeedForwardNetwork
from .core.serializer import CompiledNetwork, compile_network, export_network, import_network
from .models import NeuralNetwork
from .training.metrics import evaluate
from .training.pipelines import load_preset, presets, run_pipeline
from .training.stream import TrainStream
from .training.trainer import TrainOptions, Trainer

__all__ = [
    "CompiledNetwork",
    "FeedForwardNetwork",
    "Lookup",
    "NeuralNetwork",
    "TrainOptions",
    "TrainStream",
    "Trainer",
    "activations",
    "build_lookup",
    "compile_network",
    "evaluate",
    "export_network",
    "import_network",
    "load_preset",
    "presets",
    "run_pipeline",
    "to_record",
    "to_vector",
    "types",
]
