"""Streaming adapter that trains on records pushed over time."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Mapping

from ..core.lookup import Lookup
from ..core.types import DatasetError, TrainResult
from ..data.encoding import EncodedExample, as_example, is_keyed
from .trainer import DEFAULT_LEARNING_RATE, TrainOptions, Trainer


class TrainStream:
    """Writable sink feeding a :class:`Trainer` one record at a time.

    The producer writes every example then calls :meth:`end` to close a pass.
    The first pass only inventories keys and sizes the network. Each later
    pass trains on records as they are written; when a pass ends the epoch
    error is reported and either ``flood_callback`` is invoked so the
    producer can write the data again, or training is finished and
    ``on_done`` receives the :class:`TrainResult`.
    """

    def __init__(
        self,
        trainer: Trainer,
        *,
        iterations: int = 20000,
        error_threshold: float = 0.005,
        learning_rate: float | None = None,
        log: bool | Callable[[str], None] = False,
        log_period: int = 10,
        callback: Callable[[Mapping[str, float]], None] | None = None,
        callback_period: int = 10,
        flood_callback: Callable[[], None] | None = None,
        on_done: Callable[[TrainResult], None] | None = None,
    ) -> None:
        self.trainer = trainer
        self.options = TrainOptions(
            iterations=iterations,
            error_threshold=error_threshold,
            learning_rate=learning_rate,
            log=log,
            log_period=log_period,
            callback=callback,
            callback_period=callback_period,
        )
        self.flood_callback = flood_callback
        self.on_done = on_done

        self.format_determined = False
        self.input_keys: Dict[str, None] = {}
        self.output_keys: Dict[str, None] = {}
        self.first_datum = None
        self.size = 0
        self.count = 0
        self.sum = 0.0
        self.epoch = 0
        self.result: TrainResult | None = None

    @property
    def learning_rate(self) -> float:
        return self.options.learning_rate or self.trainer.learning_rate or DEFAULT_LEARNING_RATE

    def write(self, datum: object) -> None:
        if self.result is not None:
            raise RuntimeError("Training already finished; create a new stream")
        example = as_example(datum)

        if not self.format_determined:
            self.size += 1
            if is_keyed(example.input):
                self.input_keys.update(dict.fromkeys(example.input))
            if is_keyed(example.output):
                self.output_keys.update(dict.fromkeys(example.output))
            if self.first_datum is None:
                self.first_datum = example
            return

        encoder = self.trainer.encoder
        self.count += 1
        self.sum += self.trainer.network.train_pattern(
            encoder.encode_input(example.input),
            encoder.encode_output(example.output),
            self.learning_rate,
        )

    def end(self) -> TrainResult | None:
        """Close the current pass over the data."""

        if not self.format_determined:
            self._determine_format()
            if self.flood_callback is not None:
                self.flood_callback()
            return None

        if self.count != self.size:
            print(f"This pass had {self.count} records, the first had {self.size}.")
        error = self.sum / max(1, self.count)
        self.trainer.report_epoch(self.epoch, error, self.options)
        self.sum = 0.0
        self.count = 0
        self.epoch += 1

        if self.epoch < self.options.iterations and error > self.options.error_threshold:
            if self.flood_callback is not None:
                self.flood_callback()
            return None

        self.result = TrainResult(error=error, iterations=self.epoch)
        if self.on_done is not None:
            self.on_done(self.result)
        return self.result

    def consume(self, producer: Callable[[], Iterable[object]]) -> TrainResult:
        """Write every record from ``producer()`` and end the pass until done.

        Use this instead of a ``flood_callback`` that writes synchronously.
        """

        while self.result is None:
            for datum in producer():
                self.write(datum)
            self.end()
        return self.result

    def _determine_format(self) -> None:
        if self.first_datum is None:
            raise DatasetError("No records were written before the first end()")
        encoder = self.trainer.encoder
        if self.input_keys and encoder.input_lookup is None:
            encoder.input_lookup = Lookup.from_keys(self.input_keys)
        if self.output_keys and encoder.output_lookup is None:
            encoder.output_lookup = Lookup.from_keys(self.output_keys)
        first = EncodedExample(
            input=encoder.encode_input(self.first_datum.input),
            output=encoder.encode_output(self.first_datum.output),
            source=self.first_datum,
        )
        self.trainer.network.initialize(self.trainer.topology([first]))
        self.format_determined = True


__all__ = ["TrainStream"]
