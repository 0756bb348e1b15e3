from __future__ import annotations

import pytest

import grid_shuffle.driver as driver_mod
from grid_shuffle.driver import DEFAULT_GRID, MAX_REPORTED_ERRORS, run_trials
from grid_shuffle.errors import IncompleteSelection


def test_default_grid_trials_succeed_and_report_progress():
    seen = []
    report = run_trials(DEFAULT_GRID, iterations=50, seed=123, on_progress=seen.append)
    assert report.ok
    assert report.failures == 0
    assert report.summary() == "Completed successfully"
    assert len(seen) == 50
    assert seen[-1] == pytest.approx(1.0)
    assert seen == sorted(seen)


def test_failed_trials_are_counted_not_fatal(monkeypatch):
    def always_fail(grid, rng):
        raise IncompleteSelection(0, 12, [])

    monkeypatch.setattr(driver_mod, "shuffle_grid", always_fail)
    report = run_trials(DEFAULT_GRID, iterations=15, seed=1)
    assert report.failures == 15
    assert report.errors_by_kind["incomplete_selection"] == 15
    assert len(report.first_errors) == MAX_REPORTED_ERRORS
    assert report.summary() == "Completed with errors"
    assert report.to_dict()["ok"] is False


def test_iterations_must_be_positive():
    with pytest.raises(ValueError):
        run_trials(DEFAULT_GRID, iterations=0, seed=1)
