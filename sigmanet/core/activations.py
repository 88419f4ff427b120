"""Activation utilities for SigmaNet."""

from __future__ import annotations

import numpy as np

from .types import Array


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid ``1 / (1 + e^-x)``."""

    return 1.0 / (1.0 + np.exp(-x))


def sigmoid_deriv(activation: Array) -> Array:
    """Derivative of the sigmoid expressed through its output."""

    return activation * (1.0 - activation)


def mse(errors: Array) -> float:
    """Mean squared error of an error vector."""

    errors = np.asarray(errors, dtype=np.float64)
    return float(np.mean(np.square(errors)))
