"""MT19937 pseudo-random number generator."""

from __future__ import annotations

import os
from typing import Optional

_N = 624
_M = 397
_MATRIX_A = 0x9908B0DF
_UPPER = 0x80000000
_LOWER = 0x7FFFFFFF
_U32 = 0xFFFFFFFF


class MersenneTwister:
    """A 32-bit Mersenne Twister; seeded from the OS when no seed is given."""

    def __init__(self, seed: Optional[int] = None):
        self._state: list[int] = []
        self._index = _N
        if seed is None:
            seed = int.from_bytes(os.urandom(4), "little")
        self.seed(seed)

    def seed(self, value: int) -> None:
        """Reinitialise the state from a 32-bit seed."""
        state = [value & _U32]
        for i in range(1, _N):
            prev = state[-1]
            state.append((1812433253 * (prev ^ (prev >> 30)) + i) & _U32)
        self._state = state
        self._index = _N

    def _twist(self) -> None:
        s = self._state
        for kk in range(_N):
            y = (s[kk] & _UPPER) | (s[(kk + 1) % _N] & _LOWER)
            s[kk] = s[(kk + _M) % _N] ^ (y >> 1) ^ (_MATRIX_A if y & 1 else 0)
        self._index = 0

    def rand32(self) -> int:
        """Next 32-bit output."""
        if self._index >= _N:
            self._twist()
        y = self._state[self._index]
        self._index += 1
        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        y ^= y >> 18
        return y & _U32

    def rand64(self) -> int:
        """Next 64-bit output: two 32-bit draws, the first in the high half."""
        high = self.rand32()
        return (high << 32) | self.rand32()


_default: Optional[MersenneTwister] = None


def _generator() -> MersenneTwister:
    global _default
    if _default is None:
        _default = MersenneTwister()
    return _default


def srand(value: int) -> None:
    """Seed the shared generator."""
    global _default
    if _default is None:
        _default = MersenneTwister(value)
    else:
        _default.seed(value)


def rand32() -> int:
    """Next 32-bit value from the shared generator."""
    return _generator().rand32()


def rand64() -> int:
    """Next 64-bit value from the shared generator."""
    return _generator().rand64()