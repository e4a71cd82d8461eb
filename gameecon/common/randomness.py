"""
Random Sources.

Every probabilistic calculation (milestone dice roll, return-rate sampling)
draws from a RandomSource passed in by the caller. Nothing in the engines
calls the global `random` module.

Implementations:
- SeededRandomSource: reproducible pseudo-random stream
- SequenceRandomSource: replays a fixed list of draws (exact boundary tests)
"""

import random
from typing import Iterable, Optional, Protocol, runtime_checkable

from gameecon.common.exceptions import ErrorCode, InvalidInputError, RandomSourceExhaustedError


@runtime_checkable
class RandomSource(Protocol):
    """Produces uniform floats in [0, 1)."""

    def next(self) -> float:
        ...


class SeededRandomSource:
    """Pseudo-random source backed by its own `random.Random` instance."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def next(self) -> float:
        return self._rng.random()


class SequenceRandomSource:
    """
    Replays a fixed sequence of draws.

    Raises RandomSourceExhaustedError when more draws are requested than
    were supplied, so a test never silently reuses a value.
    """

    def __init__(self, values: Iterable[float]):
        self._values = list(values)
        for value in self._values:
            if not 0.0 <= value < 1.0:
                raise InvalidInputError(
                    f"Random draws must lie in [0, 1), got {value}",
                    field="values",
                    code=ErrorCode.OUT_OF_RANGE,
                )
        self._index = 0

    @property
    def remaining(self) -> int:
        return len(self._values) - self._index

    def next(self) -> float:
        if self._index >= len(self._values):
            raise RandomSourceExhaustedError(
                f"Sequence of {len(self._values)} draws exhausted"
            )
        value = self._values[self._index]
        self._index += 1
        return value


def uniform_between(source: RandomSource, low: float, high: float) -> float:
    """Map one draw from `source` onto [low, high)."""
    return low + source.next() * (high - low)
