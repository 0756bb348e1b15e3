from __future__ import annotations

from collections import Counter
from typing import Dict, Sequence

from .errors import (
    AdjacencyIntroduced,
    ContentMismatch,
    CountMismatch,
    MissingCell,
    ShapeMismatch,
    VerificationError,
)
from .feasibility import grid_shape
from .runs import TokenRun, count_adjacent_pairs, pack_grid

Grid = Sequence[Sequence[str]]


def count_cells(grid: Grid) -> int:
    return sum(len(row) for row in grid)


def contains_run(run: TokenRun, grid: Grid) -> bool:
    """Row-major scan for ``run.count`` consecutive cells equal to ``run.value``.

    The match counter resets on any other value but carries across row ends.
    """
    matched = 0
    for row in grid:
        for value in row:
            if value == run.value:
                matched += 1
                if matched == run.count:
                    return True
            else:
                matched = 0
    return False


def check_counts(expected: Grid, actual: Grid) -> None:
    n_exp, n_act = count_cells(expected), count_cells(actual)
    if n_exp != n_act:
        raise CountMismatch(n_exp, n_act)


def check_shape(expected: Grid, actual: Grid) -> None:
    shape_exp, shape_act = grid_shape(expected), grid_shape(actual)
    if shape_exp != shape_act:
        raise ShapeMismatch(shape_exp, shape_act)
    widths = [len(row) for row in actual]
    if any(w != shape_act[1] for w in widths):
        raise ShapeMismatch(shape_exp, widths)


def check_no_missing(actual: Grid) -> None:
    for i, row in enumerate(actual):
        for j, value in enumerate(row):
            if value is None or value == "":
                raise MissingCell(i, j, value)


def check_contains_runs(expected: Grid, actual: Grid) -> None:
    for run in pack_grid(expected):
        if not contains_run(run, actual):
            raise ContentMismatch(run)


def check_no_new_adjacency(expected: Grid, actual: Grid) -> None:
    """Fail if shuffling merged runs into new, longer runs.

    The row builder cannot guarantee this, so verify() leaves it off unless
    asked.
    """
    packed_in = pack_grid(expected)
    packed_out = pack_grid(actual)
    if len(packed_in) != len(packed_out):
        raise AdjacencyIntroduced(
            "run count changed", expected=len(packed_in), actual=len(packed_out)
        )
    known = set(packed_in)
    for run in packed_out:
        if run not in known:
            raise AdjacencyIntroduced(f"unexpected run {run}", expected=None, actual=run)


def verify(expected: Grid, actual: Grid, *, check_adjacency: bool = False) -> None:
    """Check a shuffled grid against its input, raising on the first violation."""
    check_counts(expected, actual)
    check_shape(expected, actual)
    check_no_missing(actual)
    check_contains_runs(expected, actual)
    if check_adjacency:
        check_no_new_adjacency(expected, actual)


def compute_frequencies(grid: Grid) -> Dict[str, int]:
    counts: Counter[str] = Counter()
    for row in grid:
        counts.update(v for v in row if v is not None)
    return dict(counts)


def verify_report(expected: Grid, actual: Grid, *, check_adjacency: bool = False) -> Dict[str, object]:
    error: VerificationError | None = None
    try:
        verify(expected, actual, check_adjacency=check_adjacency)
    except VerificationError as exc:
        error = exc
    rows, columns = grid_shape(actual)
    return {
        "ok": error is None,
        "error": str(error) if error else None,
        "kind": error.kind if error else None,
        "shape": {"rows": rows, "columns": columns},
        "runs": {
            "input": len(pack_grid(expected)),
            "output": len(pack_grid(actual)),
        },
        "adjacent_pairs": {
            "input": count_adjacent_pairs(expected),
            "output": count_adjacent_pairs(actual),
        },
        "frequencies": compute_frequencies(actual),
        "ok_same_multiset": compute_frequencies(expected) == compute_frequencies(actual),
        "adjacency_checked": check_adjacency,
    }
