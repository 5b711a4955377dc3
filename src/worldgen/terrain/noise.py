"""Seeded random numbers and continuous gradient noise.

Every world is driven by a single seed string. The string is folded into a
32-bit hash state that backs a small deterministic PRNG, and the first value
drawn from that PRNG seeds an OpenSimplex noise field. Both are explicit
objects, so several worlds can coexist in one process.
"""

import math
from typing import Sequence, TypeVar

import numpy as np
from numpy.typing import NDArray
from opensimplex import OpenSimplex

_MASK = 0xFFFFFFFF
_SEED_BASE = 1779033703

T = TypeVar("T")


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK


def _rotl(value: int, bits: int) -> int:
    """32-bit rotate left."""
    return ((value << bits) | (value >> (32 - bits))) & _MASK


def hash_seed(seed: str) -> int:
    """Fold a seed string into the initial 32-bit PRNG state."""
    h = (_SEED_BASE ^ len(seed)) & _MASK
    for char in seed:
        h = _imul(h ^ ord(char), 3432918353)
        h = _rotl(h, 13)
    return h


class SeededRandom:
    """Deterministic PRNG over a 32-bit mixing hash.

    Calling the instance is the same as calling ``next()``; both return a
    float in ``[0, 1)`` and advance the state.
    """

    def __init__(self, seed: str):
        self.seed = seed
        self._state = hash_seed(seed)

    @property
    def state(self) -> int:
        """Current 32-bit state."""
        return self._state

    def next_uint32(self) -> int:
        """Advance and return the next raw 32-bit value."""
        h = self._state
        h = _imul(h ^ (h >> 16), 2246822507)
        h = _imul(h ^ (h >> 13), 3266489909)
        h ^= h >> 16
        self._state = h
        return h

    def next(self) -> float:
        """Advance and return a float in [0, 1)."""
        return self.next_uint32() / 4294967296.0

    def __call__(self) -> float:
        return self.next()

    def randint(self, n: int) -> int:
        """Return an integer in [0, n)."""
        return math.floor(self.next() * n)

    def uniform(self, low: float, high: float) -> float:
        """Return a float in [low, high)."""
        return low + self.next() * (high - low)

    def choice(self, items: Sequence[T]) -> T:
        """Pick one element.

        Raises:
            IndexError: If items is empty.
        """
        if not items:
            raise IndexError("Cannot choose from an empty sequence")
        return items[self.randint(len(items))]


class NoiseSource:
    """Continuous 2D OpenSimplex noise seeded from a SeededRandom.

    Drawing the noise seed consumes one value from ``rng``. The array
    samplers are compiled by numba on first use.
    """

    def __init__(self, rng: SeededRandom):
        self.seed = math.floor(rng.next() * 4294967296.0)
        self._simplex = OpenSimplex(seed=self.seed)

    def noise(self, x: float, y: float) -> float:
        """Sample noise at one point, in [-1, 1]."""
        return float(self._simplex.noise2(x, y))

    def grid(self, xs: NDArray[np.float64], ys: NDArray[np.float64]) -> NDArray[np.float64]:
        """Sample noise on the lattice ``xs`` x ``ys``.

        Args:
            xs: 1D array of x coordinates (already scaled by frequency).
            ys: 1D array of y coordinates (already scaled by frequency).

        Returns:
            Array of shape (len(ys), len(xs)); entry ``[j, i]`` equals
            ``noise(xs[i], ys[j])``.
        """
        xs = np.ascontiguousarray(xs, dtype=np.float64)
        ys = np.ascontiguousarray(ys, dtype=np.float64)
        return np.asarray(self._simplex.noise2array(xs, ys), dtype=np.float64)


class WorldSeed:
    """PRNG and noise field derived from one seed string."""

    def __init__(self, seed: str, rng: SeededRandom, noise: NoiseSource):
        self.seed = seed
        self.rng = rng
        self.noise = noise

    @classmethod
    def from_string(cls, seed: str) -> "WorldSeed":
        """Build the PRNG, then seed the noise from its first draw."""
        rng = SeededRandom(seed)
        noise = NoiseSource(rng)
        return cls(seed, rng, noise)

    def __repr__(self) -> str:
        return f"WorldSeed({self.seed!r}, noise_seed={self.noise.seed})"
