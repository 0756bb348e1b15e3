from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from .runs import TokenRun


@dataclass
class Feasibility:
    feasible: bool
    reasons: List[str]


def grid_shape(grid: Sequence[Sequence[str]]) -> tuple[int, int]:
    rows = len(grid)
    columns = len(grid[0]) if rows > 0 else 0
    return rows, columns


def check_grid(grid: Sequence[Sequence[str]]) -> Feasibility:
    """Check that a grid is a non-empty rectangle without unset cells."""
    reasons: List[str] = []
    rows, columns = grid_shape(grid)
    if rows == 0 or columns == 0:
        reasons.append("grid must have at least one row and one column")
    ragged = [i for i, row in enumerate(grid) if len(row) != columns]
    if ragged:
        reasons.append(f"ragged grid: rows {ragged} differ from width {columns}")
    for i, row in enumerate(grid):
        for j, value in enumerate(row):
            if value is None or value == "":
                reasons.append(f"empty cell at ({i},{j})")
    return Feasibility(feasible=not reasons, reasons=reasons)


def check_partition(pool: Sequence[TokenRun], *, rows: int, columns: int) -> Feasibility:
    """Cheap necessary conditions for rebuilding ``rows`` x ``columns`` from ``pool``.

    Passing does not guarantee the row builder succeeds for a given run order.
    """
    reasons: List[str] = []
    total = sum(run.count for run in pool)
    if total != rows * columns:
        reasons.append(f"pool holds {total} tokens, grid needs {rows * columns}")
    too_long = [str(run) for run in pool if run.count > columns]
    if too_long:
        reasons.append(f"runs longer than a row: {too_long}")
    return Feasibility(feasible=not reasons, reasons=reasons)
