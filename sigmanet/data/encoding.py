"""Dataset normalisation and symbolic-key encoding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Sequence

import numpy as np

from ..core.lookup import Lookup
from ..core.types import Array, DatasetError, Example, Record


@dataclass(frozen=True)
class EncodedExample:
    """Dense view of an :class:`Example` as consumed by the numeric core."""

    input: Array
    output: Array
    source: Example


def as_example(item: object) -> Example:
    if isinstance(item, Example):
        return item
    if isinstance(item, Mapping):
        try:
            return Example(input=item["input"], output=item["output"])
        except KeyError as exc:
            raise DatasetError(f"Example is missing the {exc.args[0]!r} field") from exc
    if isinstance(item, Sequence) and len(item) == 2 and not isinstance(item, str):
        return Example(input=item[0], output=item[1])
    raise DatasetError(f"Cannot interpret {type(item).__name__} as a training example")


def normalize_dataset(data: object) -> List[Example]:
    """Promote a single example to a one-element list and coerce the rest."""

    if isinstance(data, (Example, Mapping)):
        examples = [as_example(data)]
    elif isinstance(data, Iterable) and not isinstance(data, str):
        examples = [as_example(item) for item in data]
    else:
        raise DatasetError(f"Unsupported dataset type: {type(data).__name__}")
    if not examples:
        raise DatasetError("Dataset is empty")
    return examples


def is_keyed(record: Record) -> bool:
    if isinstance(record, Mapping):
        return True
    if isinstance(record, (np.ndarray, Sequence)) and not isinstance(record, str):
        return False
    raise DatasetError(f"Record must be a numeric vector or a keyed mapping, got {type(record).__name__}")


class DatasetEncoder:
    """Holds the input/output lookup tables of one network.

    Each table is built from the first keyed dataset seen on its side and is
    never rebuilt afterwards; keys that first appear later are dropped.
    """

    def __init__(self, input_lookup: Lookup | None = None, output_lookup: Lookup | None = None) -> None:
        self.input_lookup = input_lookup
        self.output_lookup = output_lookup

    def fit(self, examples: Sequence[Example]) -> None:
        """Build whichever lookups are still missing for a keyed dataset."""

        input_keyed = _consistent(examples, "input")
        output_keyed = _consistent(examples, "output")
        if input_keyed and self.input_lookup is None:
            self.input_lookup = Lookup.build(ex.input for ex in examples)
        if output_keyed and self.output_lookup is None:
            self.output_lookup = Lookup.build(ex.output for ex in examples)

    def encode(self, data: object) -> List[EncodedExample]:
        examples = normalize_dataset(data)
        self.fit(examples)
        return [
            EncodedExample(
                input=self.encode_input(ex.input),
                output=self.encode_output(ex.output),
                source=ex,
            )
            for ex in examples
        ]

    def encode_input(self, record: Record) -> Array:
        return _encode(record, self.input_lookup)

    def encode_output(self, record: Record) -> Array:
        return _encode(record, self.output_lookup)

    def decode_output(self, vector: Array):
        if self.output_lookup is not None:
            return self.output_lookup.to_record(vector)
        return vector


def _consistent(examples: Sequence[Example], side: str) -> bool:
    flags = {is_keyed(getattr(ex, side)) for ex in examples}
    if len(flags) > 1:
        raise DatasetError(f"Examples mix keyed and vector {side} records")
    return flags.pop()


def _encode(record: Record, lookup: Lookup | None) -> Array:
    if isinstance(record, Mapping):
        if lookup is None:
            raise DatasetError("Keyed record given but no lookup table was built for it")
        return lookup.to_vector(record)
    return np.asarray(record, dtype=np.float64)


__all__ = ["DatasetEncoder", "EncodedExample", "as_example", "is_keyed", "normalize_dataset"]
