"""
entropy — Deterministic randomness for replayable fuzzing runs.

Entry-points:
    make_deterministic(libcrypto, seed)   Install once, process-wide
    EntropyOverride(library, rng)         Explicit binding of one generator
    DeterministicRng(seed)                The generator itself
"""

from .deterministic import DEFAULT_SEED, DeterministicRng
from .openssl import EntropyOverride, RandMethod, load_libcrypto, make_deterministic

__all__ = [
    "DEFAULT_SEED",
    "DeterministicRng",
    "EntropyOverride",
    "RandMethod",
    "load_libcrypto",
    "make_deterministic",
]
