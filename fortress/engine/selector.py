"""Single-pass best-candidate selection with uniform tie-breaking."""

from __future__ import annotations

import math
import random
from typing import Generic, Optional, TypeVar


T = TypeVar("T")


class ReservoirSelector(Generic[T]):
    """Keeps the lowest-scoring candidate seen so far.

    Ties at the best score are resolved by reservoir sampling: after ``n``
    tied candidates each one has been kept with probability ``1/n``. With
    ``randomize`` off the first best candidate wins.
    """

    def __init__(self, randomize: bool = False, rng: Optional[random.Random] = None) -> None:
        self.randomize = randomize
        self.rng = rng or random.Random()
        self.value: Optional[T] = None
        self.score: float = math.inf
        self.count = 0

    def consider(self, candidate: T, score: float) -> None:
        if score < self.score:
            self.count = 0
            self.score = score
        if score <= self.score:
            self.count += 1
            if self.count == 1 or (self.randomize and self.rng.random() < 1 / self.count):
                self.value = candidate

    @property
    def empty(self) -> bool:
        return self.count == 0
