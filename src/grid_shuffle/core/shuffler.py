from __future__ import annotations

from typing import List, Sequence

from ..rng import RandomSource
from ..runs import TokenRun


def swap_shuffle(runs: Sequence[TokenRun], rng: RandomSource) -> List[TokenRun]:
    """Reorder runs with ``n`` random pairwise swaps.

    Both indices of every swap are drawn independently from ``[0, n)`` and may
    coincide. The result is not a uniform permutation: low-mixing orderings
    close to the input are over-represented.
    """
    result = list(runs)
    n = len(result)
    for _ in range(n):
        a = rng.randrange(0, n)
        b = rng.randrange(0, n)
        result[a], result[b] = result[b], result[a]
    return result
