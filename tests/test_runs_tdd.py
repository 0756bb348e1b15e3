from __future__ import annotations

import pytest
from hypothesis import given, strategies as st

from grid_shuffle.runs import TokenRun, count_adjacent_pairs, expand_runs, pack, pack_grid

tokens = st.lists(st.sampled_from(["a", "b", "c", "FREE"]), max_size=30)


def test_pack_merges_consecutive_values():
    runs = pack(["a", "a", "b"])
    assert runs == [TokenRun("a", 2), TokenRun("b", 1)]
    assert expand_runs(runs) == ["a", "a", "b"]


def test_pack_empty_and_single():
    assert pack([]) == []
    assert pack(["x"]) == [TokenRun("x", 1)]


def test_pack_grid_restarts_runs_on_each_row():
    grid = [["a", "a"], ["a", "b"]]
    assert pack_grid(grid) == [TokenRun("a", 2), TokenRun("a", 1), TokenRun("b", 1)]


def test_run_count_must_be_positive():
    with pytest.raises(ValueError):
        TokenRun("a", 0)


def test_equal_runs_compare_equal_but_stay_distinct_objects():
    a, b = TokenRun("a", 2), TokenRun("a", 2)
    assert a == b
    assert a is not b
    assert str(a) == "a - 2"


def test_count_adjacent_pairs_ignores_row_ends():
    assert count_adjacent_pairs([["a", "a", "b"], ["b", "c", "c"]]) == 2


@given(row=tokens)
def test_pack_round_trip(row):
    runs = pack(row)
    assert expand_runs(runs) == row
    assert all(r.count >= 1 for r in runs)
    # neighbouring runs never share a value
    assert all(x.value != y.value for x, y in zip(runs, runs[1:]))
