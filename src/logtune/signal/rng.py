"""Seeded pseudo-random source for reproducible jitter.

A plain linear congruential generator rather than numpy's PCG64: the
recurrence below is part of the output contract, so the same seed must
produce the same noise on any platform and any numpy version.
"""

from __future__ import annotations

import math

_MULTIPLIER = 9301
_INCREMENT = 49297
_MODULUS = 233280


class SeededRandom:
    """Linear congruential generator with a Box-Muller Gaussian draw.

    Args:
        seed: Initial state. Any integer; it is reduced on the first draw.
    """

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def state(self) -> int:
        return self._seed

    def next(self) -> float:
        """Advance the recurrence and return a uniform value in [0, 1)."""
        self._seed = (self._seed * _MULTIPLIER + _INCREMENT) % _MODULUS
        return self._seed / _MODULUS

    def next_gaussian(self, mean: float = 0.0, std: float = 1.0) -> float:
        """Return one normal sample via the Box-Muller transform.

        Each uniform draw is repeated while it is exactly 0 so the
        logarithm stays finite.

        Args:
            mean: Mean of the returned sample.
            std: Standard deviation of the returned sample.
        """
        u = 0.0
        while u == 0.0:
            u = self.next()
        v = 0.0
        while v == 0.0:
            v = self.next()
        num = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
        return num * std + mean
