from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence


@dataclass(frozen=True)
class TokenRun:
    """A token value repeated ``count`` times in a row."""

    value: str
    count: int = 1

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError(f"TokenRun count must be >= 1, got {self.count}")

    def expand(self) -> List[str]:
        return [self.value] * self.count

    def __str__(self) -> str:
        return f"{self.value} - {self.count}"


def pack(row: Sequence[str]) -> List[TokenRun]:
    """Run-length encode a single row, merging consecutive equal values."""
    out: List[TokenRun] = []
    if not row:
        return out
    cur = row[0]
    run = 1
    for v in row[1:]:
        if v == cur:
            run += 1
        else:
            out.append(TokenRun(cur, run))
            cur = v
            run = 1
    out.append(TokenRun(cur, run))
    return out


def pack_grid(grid: Sequence[Sequence[str]]) -> List[TokenRun]:
    """Pack every row and concatenate; runs never span a row boundary."""
    pool: List[TokenRun] = []
    for row in grid:
        pool.extend(pack(row))
    return pool


def expand_runs(runs: Iterable[TokenRun]) -> List[str]:
    tokens: List[str] = []
    for run in runs:
        tokens.extend(run.expand())
    return tokens


def count_adjacent_pairs(grid: Sequence[Sequence[str]]) -> int:
    """Number of horizontally adjacent cells holding the same token."""
    return sum(1 for row in grid for a, b in zip(row, row[1:]) if a == b)
