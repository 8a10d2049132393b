"""
entropy.openssl — Install a ``DeterministicRng`` as libcrypto's RAND method.

The host library takes a six-slot method table::

    seed, bytes, cleanup, add, pseudorand, status

``bytes`` and ``pseudorand`` both draw from ``DeterministicRng.generate``.
Installation is global and cannot be undone for the life of the process;
it must happen before anything else draws randomness from the library.
The ctypes callbacks and the table itself are pinned on the override
object (and, through ``make_deterministic``, on this module) so the
library never calls into freed memory.
"""

from __future__ import annotations

import ctypes
import ctypes.util
from typing import Any, Optional

from ..core.config import Config, load_config
from ..core.errors import EntropyOverrideError
from ..core.log import console, debug_print
from .deterministic import DEFAULT_SEED, SEED_LENGTH, DeterministicRng

SEED_FN = ctypes.CFUNCTYPE(ctypes.c_int, ctypes.c_void_p, ctypes.c_int)
BYTES_FN = ctypes.CFUNCTYPE(ctypes.c_int, ctypes.POINTER(ctypes.c_ubyte), ctypes.c_int)
CLEANUP_FN = ctypes.CFUNCTYPE(None)
ADD_FN = ctypes.CFUNCTYPE(ctypes.c_int, ctypes.c_void_p, ctypes.c_int, ctypes.c_double)
STATUS_FN = ctypes.CFUNCTYPE(ctypes.c_int)


class RandMethod(ctypes.Structure):
    _fields_ = [
        ("seed", SEED_FN),
        ("bytes", BYTES_FN),
        ("cleanup", CLEANUP_FN),
        ("add", ADD_FN),
        ("pseudorand", BYTES_FN),
        ("status", STATUS_FN),
    ]


class EntropyOverride:
    """Owns one ``DeterministicRng`` and binds it into a host library once."""

    def __init__(self, library: Any, rng: Optional[DeterministicRng] = None) -> None:
        self.library = library
        self.rng = rng or DeterministicRng()
        self.installed = False
        self.method = RandMethod(
            SEED_FN(self._seed),
            BYTES_FN(self._bytes),
            CLEANUP_FN(self._cleanup),
            ADD_FN(self._add),
            BYTES_FN(self._bytes),
            STATUS_FN(self._status),
        )

    # ── C slots ───────────────────────────────────────────────────────

    def _seed(self, buf, num):
        if num < SEED_LENGTH or not buf:
            return 0
        return int(self.rng.seed(ctypes.string_at(buf, SEED_LENGTH)))

    def _bytes(self, buf, num):
        if num > 0:
            ctypes.memmove(buf, self.rng.generate(num), num)
        return 1

    def _cleanup(self):
        self.rng.cleanup()

    def _add(self, buf, num, estimate):
        return int(self.rng.add_entropy(b"", num, estimate))

    def _status(self):
        return int(self.rng.status())

    # ── Host library ──────────────────────────────────────────────────

    def install(self) -> None:
        if self.installed:
            raise EntropyOverrideError("deterministic RAND method already installed")
        set_method = self.library.RAND_set_rand_method
        set_method.argtypes = [ctypes.POINTER(RandMethod)]
        set_method.restype = ctypes.c_int
        if set_method(ctypes.byref(self.method)) != 1:
            raise EntropyOverrideError("RAND_set_rand_method rejected the method table")
        self.installed = True

    def reseed(self, value: int = DEFAULT_SEED) -> None:
        """Reseed through the library's ``RAND_seed`` with 8 little-endian bytes."""
        rand_seed = self.library.RAND_seed
        rand_seed.argtypes = [ctypes.c_void_p, ctypes.c_int]
        rand_seed.restype = None
        raw = (value & 0xFFFFFFFFFFFFFFFF).to_bytes(SEED_LENGTH, "little")
        buf = ctypes.create_string_buffer(raw, SEED_LENGTH)
        rand_seed(buf, SEED_LENGTH)


_override: Optional[EntropyOverride] = None


def load_libcrypto(cfg: Optional[Config] = None) -> ctypes.CDLL:
    cfg = cfg or load_config()
    path = cfg.libcrypto_path or ctypes.util.find_library("crypto")
    if not path:
        raise EntropyOverrideError("libcrypto not found; set VENDORKIT_LIBCRYPTO")
    try:
        return ctypes.CDLL(path)
    except OSError as exc:
        raise EntropyOverrideError(f"cannot load {path}: {exc}") from exc


def make_deterministic(
    libcrypto: Any = None,
    seed: Optional[int] = None,
    *,
    cfg: Optional[Config] = None,
) -> EntropyOverride:
    """
    Make the host library fully deterministic for this process.

    The first call installs the override; later calls return the same
    object (reseeding it when *seed* is given).  There is no way back to
    the library's original RAND method.
    """
    global _override
    cfg = cfg or load_config()
    if _override is None:
        console.print("[bold]Making libcrypto deterministic: replacing RAND method[/]")
        override = EntropyOverride(libcrypto if libcrypto is not None else load_libcrypto(cfg))
        override.install()
        _override = override
    elif libcrypto is not None and libcrypto is not _override.library:
        raise EntropyOverrideError("deterministic RAND method is bound to another library")
    if seed is not None:
        debug_print("entropy", f"reseeding with {seed}", enabled=cfg.debug)
        _override.reseed(seed)
    return _override
