"""Exact-count selection of runs from a pool."""

from __future__ import annotations

from typing import List, Optional, Sequence, Set, Tuple

from ..runs import TokenRun


def pick_indices(pool: Sequence[TokenRun], target: int) -> Optional[List[int]]:
    """Return ascending pool indices whose run counts sum exactly to ``target``.

    Depth-first over the pool, left to right, trying to include each run before
    moving past it. Each stack frame is ``[start, remaining, cursor]``; the
    indices taken so far are pushed on descent and popped on backtrack. Runs
    are atomic, so a run longer than the remaining target is skipped.
    ``(start, remaining)`` states that already failed are not searched again,
    which bounds the search by ``len(pool) * target``.

    Returns None when no subset sums to ``target``.
    """
    if target < 0:
        return None
    if target == 0:
        return []
    counts = [run.count for run in pool]
    n = len(counts)
    taken: List[int] = []
    dead: Set[Tuple[int, int]] = set()
    stack: List[List[int]] = [[0, target, 0]]

    while stack:
        frame = stack[-1]
        start, remaining, i = frame
        while i < n and (
            counts[i] > remaining or (i + 1, remaining - counts[i]) in dead
        ):
            i += 1
        if i == n:
            dead.add((start, remaining))
            stack.pop()
            # stack depth is always len(taken) + 1
            if stack:
                taken.pop()
            continue
        frame[2] = i + 1
        taken.append(i)
        left = remaining - counts[i]
        if left == 0:
            return list(taken)
        stack.append([i + 1, left, i + 1])
    return None


def pick(pool: Sequence[TokenRun], target: int) -> Optional[List[TokenRun]]:
    """Runs (in pool order) whose counts sum to ``target``, or None."""
    idxs = pick_indices(pool, target)
    if idxs is None:
        return None
    return [pool[i] for i in idxs]


def take(pool: List[TokenRun], target: int) -> Optional[List[TokenRun]]:
    """Like :func:`pick`, but removes the chosen runs from ``pool`` in place.

    Removal is positional, so equal runs elsewhere in the pool stay put.
    The pool is left untouched when nothing fits.
    """
    idxs = pick_indices(pool, target)
    if idxs is None:
        return None
    chosen = [pool[i] for i in idxs]
    for i in reversed(idxs):
        del pool[i]
    return chosen
