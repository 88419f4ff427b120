"""Evaluation statistics for trained networks."""

from __future__ import annotations

import math
from typing import Iterable, List

import numpy as np

from ..core.activations import mse
from ..core.network import FeedForwardNetwork
from ..core.types import BinaryStats, EvaluationStats, Misclassification
from ..data.encoding import DatasetEncoder

DEFAULT_BINARY_THRESHOLD = 0.5


def _ratio(numerator: int, denominator: int) -> float:
    # 0/0 is undefined; callers expect nan rather than an exception.
    return numerator / denominator if denominator else math.nan


def binary_stats(actual: Iterable[int], expected: Iterable[float]) -> BinaryStats:
    """Confusion counts and derived rates for 0/1 predictions."""

    true_pos = true_neg = false_pos = false_neg = total = 0
    for a, e in zip(actual, expected):
        total += 1
        if a == 0 and e == 0:
            true_neg += 1
        elif a == 1 and e == 1:
            true_pos += 1
        elif a == 0 and e == 1:
            false_neg += 1
        elif a == 1 and e == 0:
            false_pos += 1
    return BinaryStats(
        true_pos=true_pos,
        true_neg=true_neg,
        false_pos=false_pos,
        false_neg=false_neg,
        total=total,
        precision=_ratio(true_pos, true_pos + false_pos),
        recall=_ratio(true_pos, true_pos + false_neg),
        accuracy=_ratio(true_pos + true_neg, total),
    )


def evaluate(
    network: FeedForwardNetwork,
    data: object,
    *,
    encoder: DatasetEncoder | None = None,
    binary_threshold: float = DEFAULT_BINARY_THRESHOLD,
) -> EvaluationStats:
    """Run ``data`` through ``network`` and collect error statistics."""

    encoder = encoder or DatasetEncoder()
    examples = encoder.encode(data)
    is_binary = examples[0].output.shape[0] == 1

    misclassifications: List[Misclassification] = []
    actuals: List[int] = []
    expecteds: List[float] = []
    total_error = 0.0
    for example in examples:
        output = network.forward(example.input)
        target = example.output

        if is_binary:
            actual = 1 if output[0] >= binary_threshold else 0
            expected = float(target[0])
        else:
            actual = int(np.argmax(output))
            expected = int(np.argmax(target))
        actuals.append(actual)
        expecteds.append(expected)

        if actual != expected:
            misclassifications.append(
                Misclassification(
                    input=example.source.input,
                    output=example.source.output,
                    actual=actual,
                    expected=expected,
                )
            )
        total_error += mse(target - output)

    stats = EvaluationStats(
        error=total_error / len(examples),
        misclassifications=misclassifications,
    )
    if is_binary:
        stats.binary = binary_stats(actuals, expecteds)
    return stats


__all__ = ["DEFAULT_BINARY_THRESHOLD", "binary_stats", "evaluate"]
