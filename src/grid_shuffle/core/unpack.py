from __future__ import annotations

from typing import List, Sequence

from ..errors import IncompleteSelection
from ..runs import TokenRun, expand_runs
from .selector import take


def build_rows(pool: Sequence[TokenRun], rows: int, columns: int) -> List[List[str]]:
    """Reassemble ``rows`` rows of width ``columns`` from a pool of runs.

    Each row takes the first exact-count selection from what is left of the
    pool. The caller's sequence is copied, never mutated.

    Raises IncompleteSelection if a row cannot be filled or if runs are left
    over after the last row; no partial grid is returned.
    """
    remaining = list(pool)
    result: List[List[str]] = []
    for i in range(rows):
        chosen = take(remaining, columns)
        if chosen is None:
            raise IncompleteSelection(i, columns, remaining)
        result.append(expand_runs(chosen))
    if remaining:
        raise IncompleteSelection(rows, columns, remaining)
    return result
