"""Dataset registry, loaders and encoding helpers."""

# Ensure built-in loaders register themselves when the package is imported.
from . import loaders as _loaders  # noqa: F401
from .encoding import DatasetEncoder, EncodedExample, normalize_dataset
from .registry import DatasetSpec, available_datasets, get_dataset, register_dataset

__all__ = [
    "DatasetEncoder",
    "DatasetSpec",
    "EncodedExample",
    "available_datasets",
    "get_dataset",
    "normalize_dataset",
    "register_dataset",
]
