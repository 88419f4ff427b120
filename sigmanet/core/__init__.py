"""Core numerical primitives for SigmaNet."""

from . import activations, lookup, network, serializer, types

__all__ = ["activations", "lookup", "network", "serializer", "types"]
