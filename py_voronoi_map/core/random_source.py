"""
Seedable random source shared by every stochastic step of a generation run.

Uses Johannes Baagøe's Alea generator so that a string or numeric seed
always reproduces the same map. The Mash hash and the generator step are a
direct port of the reference JavaScript implementation. Unseeded sources
draw their seed from OS entropy and remember it, so any run can be replayed
afterwards.
"""

import math
import secrets
from typing import Optional, Sequence, TypeVar, Union

import numpy as np

T = TypeVar("T")

SeedLike = Union[str, int, float]


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class _Mash:
    """Alea's string hashing step, used only while seeding."""

    def __init__(self):
        self.n = 0xEFC8249D

    def __call__(self, data) -> float:
        for char in str(data):
            self.n += ord(char)
            h = 0.02519603282416938 * self.n
            self.n = _uint32(h)
            h -= self.n
            h *= self.n
            self.n = _uint32(h)
            h -= self.n
            self.n += h * 0x100000000  # 2^32
        return _uint32(self.n) * 2.3283064365386963e-10  # 2^-32


class RandomSource:
    """
    Uniform random scalar generator.

    All randomness in a run flows through one instance of this class, which
    makes every sampler, mask and name draw reproducible from ``seed``.
    """

    def __init__(self, seed: Optional[SeedLike] = None):
        if seed is None:
            seed = secrets.token_hex(8)
        self.seed = seed
        self.call_count = 0

        mash = _Mash()
        self._s0 = mash(" ")
        self._s1 = mash(" ")
        self._s2 = mash(" ")
        self._c = 1

        self._s0 -= mash(seed)
        if self._s0 < 0:
            self._s0 += 1
        self._s1 -= mash(seed)
        if self._s1 < 0:
            self._s1 += 1
        self._s2 -= mash(seed)
        if self._s2 < 0:
            self._s2 += 1

    def random(self) -> float:
        """Next value in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self._s0 + self._c * 2.3283064365386963e-10  # 2^-32
        self._s0 = self._s1
        self._s1 = self._s2
        self._c = int(t)
        self._s2 = t - self._c
        return self._s2

    def uniform(self, low: float, high: float) -> float:
        """Value in [low, high)."""
        return low + (high - low) * self.random()

    def randint(self, low: int, high: int) -> int:
        """Integer in [low, high], both ends inclusive."""
        if high < low:
            raise ValueError(f"Empty range for randint: [{low}, {high}]")
        return low + int(math.floor(self.random() * (high - low + 1)))

    def angle(self) -> float:
        """Angle in [0, 2*pi)."""
        return self.random() * 2 * math.pi

    def choice(self, seq: Sequence[T]) -> T:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[int(self.random() * len(seq))]

    def numpy_generator(self) -> np.random.Generator:
        """
        Derive a NumPy generator from the next value of this stream.

        Bulk arrays (white noise lattices) are drawn from the derived generator
        instead of one Alea call per value. The derivation consumes exactly one
        value, so the rest of the run stays reproducible.
        """
        return np.random.default_rng(int(self.random() * 2**32))

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed!r}, calls={self.call_count})"
