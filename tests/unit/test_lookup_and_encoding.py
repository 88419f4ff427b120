import numpy as np
import pytest

from sigmanet.core.lookup import Lookup, build_lookup, to_record, to_vector
from sigmanet.core.types import DatasetError, Example
from sigmanet.data.encoding import DatasetEncoder, as_example, is_keyed, normalize_dataset


def test_lookup_first_seen_order():
    lookup = build_lookup([{"b": 1, "a": 0}, {"c": 2, "a": 1}])
    assert lookup.keys == ("b", "a", "c")
    assert lookup["c"] == 2
    assert "a" in lookup and "z" not in lookup
    assert list(lookup) == ["b", "a", "c"]
    assert len(lookup) == 3


def test_lookup_is_deterministic():
    records = [{"x": 1, "y": 2}, {"z": 3}]
    assert build_lookup(records) == build_lookup(records)


def test_lookup_rejects_duplicates():
    with pytest.raises(ValueError):
        Lookup(("a", "a"))


def test_to_vector_defaults_and_drops_unknown_keys():
    lookup = Lookup.from_keys(["r", "g", "b"])
    vector = to_vector(lookup, {"b": 0.5, "alpha": 9.0})
    assert vector.dtype == np.float64
    assert vector.tolist() == [0.0, 0.0, 0.5]


def test_record_round_trip():
    lookup = Lookup.from_keys(["black", "white"])
    record = {"black": 0.25, "white": 0.75}
    assert to_record(lookup, to_vector(lookup, record)) == record


def test_as_example_accepts_common_shapes():
    pair = as_example(([0, 1], [1]))
    mapping = as_example({"input": [0, 1], "output": [1]})
    assert pair == mapping == Example(input=[0, 1], output=[1])
    with pytest.raises(DatasetError):
        as_example({"input": [0, 1]})
    with pytest.raises(DatasetError):
        as_example(3)


def test_normalize_single_example():
    examples = normalize_dataset({"input": [0, 1], "output": [1]})
    assert len(examples) == 1
    with pytest.raises(DatasetError):
        normalize_dataset([])


def test_is_keyed():
    assert is_keyed({"a": 1})
    assert not is_keyed([1, 2])
    assert not is_keyed(np.zeros(2))
    with pytest.raises(DatasetError):
        is_keyed("abc")


def test_encoder_builds_lookups_once():
    encoder = DatasetEncoder()
    encoded = encoder.encode(
        [
            {"input": {"r": 1}, "output": [1]},
            {"input": {"g": 1, "r": 0.5}, "output": [0]},
        ]
    )
    assert encoder.input_lookup.keys == ("r", "g")
    assert encoder.output_lookup is None
    assert encoded[1].input.tolist() == [0.5, 1.0]
    assert encoded[1].output.tolist() == [0.0]

    encoder.encode([{"input": {"b": 1, "r": 1}, "output": [1]}])
    assert encoder.input_lookup.keys == ("r", "g")
    assert encoder.encode_input({"b": 1, "r": 1}).tolist() == [1.0, 0.0]


def test_encoder_rejects_mixed_records():
    encoder = DatasetEncoder()
    with pytest.raises(DatasetError):
        encoder.encode([{"input": {"r": 1}, "output": [1]}, {"input": [1], "output": [0]}])


def test_keyed_record_without_lookup():
    with pytest.raises(DatasetError):
        DatasetEncoder().encode_input({"r": 1})


def test_decode_output():
    encoder = DatasetEncoder(output_lookup=Lookup.from_keys(["yes", "no"]))
    assert encoder.decode_output(np.array([0.9, 0.1])) == {"yes": 0.9, "no": 0.1}
    plain = np.array([0.3])
    assert DatasetEncoder().decode_output(plain) is plain
