"""Injectable randomness for reproducible colour fallbacks."""

import random
from typing import Optional, Protocol


class RandomSource(Protocol):
    """Anything that yields floats in [0, 1)."""

    def next(self) -> float:
        ...


class SeededRandom:
    """RandomSource backed by ``random.Random``; unseeded when ``seed`` is None."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._random = random.Random(seed)

    def next(self) -> float:
        return self._random.random()
