from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass


@dataclass
class RandomSource:
    engine: str

    def randrange(self, a: int, b: int) -> int:
        """Uniform integer in ``[a, b)``."""
        raise NotImplementedError


class PyRandomSource(RandomSource):
    def __init__(self, seed: int):
        super().__init__(engine="py_random")
        self._rng = random.Random(seed)

    def randrange(self, a: int, b: int) -> int:
        return self._rng.randrange(a, b)


class NumpyPCG64Source(RandomSource):  # pragma: no cover - covered when numpy present
    def __init__(self, seed: int):
        try:
            import numpy as np
        except ImportError as exc:
            raise RuntimeError("numpy is not installed; install grid-shuffle[pcg]") from exc
        super().__init__(engine="numpy_pcg64")
        self._rng = np.random.Generator(np.random.PCG64(seed))

    def randrange(self, a: int, b: int) -> int:
        return int(self._rng.integers(low=a, high=b))


def create_rng(engine: str, seed: int) -> RandomSource:
    engine = (engine or "py_random").strip().lower()
    if engine == "py_random":
        return PyRandomSource(seed)
    if engine == "numpy_pcg64":
        return NumpyPCG64Source(seed)
    raise ValueError(f"Unsupported RNG engine: {engine}")


def derive_parallel_seed(base_seed: int, index: int, purpose: str) -> int:
    """Derive a per-attempt seed from base seed, index and purpose using sha256.

    Returns a 63-bit positive integer suitable for seeding common RNGs.
    """
    s = f"{base_seed}|{index}|{purpose}".encode("utf-8")
    digest = hashlib.sha256(s).digest()
    return int.from_bytes(digest[:8], byteorder="big") & ((1 << 63) - 1)
