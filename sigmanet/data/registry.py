"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, MutableMapping

from ..core.types import Example


@dataclass(frozen=True)
class DatasetSpec:
    """A named, fully materialised list of training examples.

    Attributes
    ----------
    name:
        Registry identifier the dataset was created from.
    examples:
        The examples, either numeric vectors or keyed records.
    provenance:
        Free-form metadata describing where the examples came from. It is
        written verbatim into run manifests.
    """

    name: str
    examples: List[Example]
    provenance: Dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.examples)


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("xor")
        def make_xor(**kwargs):
            ...

    or directly::

        register_dataset("xor", make_xor)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(dataset: str, /, **options: Any) -> DatasetSpec:
    """Return the :class:`DatasetSpec` for ``dataset``."""

    if dataset not in _REGISTRY:
        raise KeyError(f"Unknown dataset: {dataset}")
    spec = _REGISTRY[dataset](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    if not spec.examples:
        raise ValueError(f"Dataset {spec.name!r} has no examples")


def _gate(name: str, outputs: List[float]) -> DatasetSpec:
    inputs = [[0, 0], [0, 1], [1, 0], [1, 1]]
    examples = [Example(input=x, output=[y]) for x, y in zip(inputs, outputs)]
    return DatasetSpec(name=name, examples=examples, provenance={"type": "fixture", "name": name})


@register_dataset("and")
def make_and(**_: object) -> DatasetSpec:
    return _gate("and", [0, 0, 0, 1])


@register_dataset("or")
def make_or(**_: object) -> DatasetSpec:
    return _gate("or", [0, 1, 1, 1])


@register_dataset("xor")
def make_xor(**_: object) -> DatasetSpec:
    return _gate("xor", [0, 1, 1, 0])


@register_dataset("colors")
def make_colors(**_: object) -> DatasetSpec:
    """Keyed records: colour intensities to a brightness label."""

    examples = [
        Example(input={"r": 0.03, "g": 0.7, "b": 0.5}, output={"black": 1}),
        Example(input={"r": 0.16, "b": 0.2}, output={"white": 1}),
        Example(input={"r": 0.5, "g": 0.5, "b": 1.0}, output={"white": 1}),
        Example(input={"g": 0.1, "b": 0.1}, output={"black": 1}),
        Example(input={"r": 0.9, "g": 0.9, "b": 0.9}, output={"white": 1}),
    ]
    return DatasetSpec(name="colors", examples=examples, provenance={"type": "fixture", "name": "colors"})


__all__ = [
    "DatasetSpec",
    "available_datasets",
    "get_dataset",
    "make_and",
    "make_colors",
    "make_or",
    "make_xor",
    "register_dataset",
]
