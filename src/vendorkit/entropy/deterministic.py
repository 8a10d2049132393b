"""
entropy.deterministic — Seeded, replayable byte generator.

A 64-bit linear congruential generator.  Each output byte advances the
state once and is taken from bits 33..40 of the new state; the low bits
of an LCG have short periods and are never emitted.

Not synchronized: ``seed`` and ``generate`` each read-modify-write the
state, so concurrent callers must serialize access themselves or lose
replayability.
"""

from __future__ import annotations

from typing import Optional

MULTIPLIER = 6364136223846793005
INCREMENT = 1
DEFAULT_SEED = 42
SEED_LENGTH = 8

_MASK64 = (1 << 64) - 1


class DeterministicRng:
    """The five operations of a pluggable RNG backend, over one 64-bit state."""

    def __init__(self, seed: int = DEFAULT_SEED) -> None:
        self._state = seed & _MASK64

    @property
    def state(self) -> int:
        return self._state

    def seed(self, buffer: bytes, length: Optional[int] = None) -> bool:
        """Adopt the first 8 bytes of *buffer* (little-endian) as the new state.

        Returns ``False`` and leaves the state alone when fewer than 8
        bytes are offered.
        """
        if length is None:
            length = len(buffer)
        if length < SEED_LENGTH or len(buffer) < SEED_LENGTH:
            return False
        self._state = int.from_bytes(bytes(buffer[:SEED_LENGTH]), "little")
        return True

    def generate(self, length: int) -> bytes:
        if length < 0:
            raise ValueError(f"cannot generate {length} bytes")
        out = bytearray(length)
        state = self._state
        for i in range(length):
            state = (MULTIPLIER * state + INCREMENT) & _MASK64
            out[i] = (state >> 33) & 0xFF
        self._state = state
        return bytes(out)

    def cleanup(self) -> None:
        pass

    def add_entropy(self, buffer: bytes, length: int, estimate: float) -> bool:
        # Outside entropy is ignored.
        return True

    def status(self) -> bool:
        return True
