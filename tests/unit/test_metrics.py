import math

import numpy as np
import pytest

from sigmanet.core.network import FeedForwardNetwork
from sigmanet.training.metrics import binary_stats, evaluate


def _constant_network(inputs, outputs):
    """A network whose every output unit is exactly 0.5."""

    net = FeedForwardNetwork()
    net.load_parameters(
        [np.zeros((2, inputs)), np.zeros((outputs, 2))],
        [np.zeros(2), np.zeros(outputs)],
    )
    return net


def test_binary_stats_counts():
    stats = binary_stats([1, 0, 1, 0], [1, 0, 0, 1])
    assert (stats.true_pos, stats.true_neg, stats.false_pos, stats.false_neg) == (1, 1, 1, 1)
    assert stats.total == 4
    assert stats.accuracy == 0.5
    assert stats.precision == 0.5
    assert stats.recall == 0.5


def test_binary_stats_undefined_rates_are_nan():
    stats = binary_stats([0, 0], [0, 0])
    assert math.isnan(stats.precision)
    assert math.isnan(stats.recall)
    assert stats.accuracy == 1.0


def test_binary_threshold_is_inclusive():
    net = _constant_network(2, 1)
    stats = evaluate(net, [([0, 0], [1]), ([1, 1], [0])])
    assert stats.binary.true_pos == 1
    assert stats.binary.false_pos == 1
    assert len(stats.misclassifications) == 1
    miss = stats.misclassifications[0]
    assert miss.input == [1, 1] and miss.actual == 1 and miss.expected == 0
    assert stats.error == pytest.approx(0.25)


def test_custom_binary_threshold():
    net = _constant_network(2, 1)
    stats = evaluate(net, [([0, 0], [1])], binary_threshold=0.6)
    assert stats.binary.false_neg == 1
    assert math.isnan(stats.binary.precision)
    assert stats.binary.recall == 0.0


def test_multiclass_argmax_ties_pick_first_unit():
    net = _constant_network(2, 2)
    stats = evaluate(net, [([0, 1], [1, 0]), ([1, 0], [0, 1])])
    assert stats.binary is None
    assert len(stats.misclassifications) == 1
    miss = stats.misclassifications[0]
    assert (miss.actual, miss.expected) == (0, 1)


def test_evaluation_stats_as_dict():
    net = _constant_network(2, 1)
    payload = evaluate(net, [([0, 0], [1]), ([1, 1], [0])]).as_dict()
    assert payload["accuracy"] == 0.5
    assert payload["misclassifications"][0]["input"] == [1.0, 1.0]
    assert set(payload) >= {"error", "true_pos", "precision", "recall", "total"}
