"""Repeated shuffle-and-verify trials over one input grid."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from .core import shuffle_grid
from .errors import ShuffleError
from .rng import create_rng, derive_parallel_seed
from .verify import verify

logger = logging.getLogger(__name__)

MAX_REPORTED_ERRORS = 10

# Sample card: two rows of twelve with repeated words and FREE cells.
DEFAULT_GRID: List[List[str]] = [
    ["ab", "ab", "ab", "FREE", "me", "me", "me", "FREE", "mo", "mo", "FREE", "FREE"],
    ["so", "so", "FREE", "no", "no", "FREE", "to", "to", "to", "FREE", "do", "do"],
]


@dataclass
class TrialReport:
    iterations: int
    failures: int = 0
    errors_by_kind: Counter = field(default_factory=Counter)
    first_errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failures == 0

    def summary(self) -> str:
        return "Completed successfully" if self.ok else "Completed with errors"

    def to_dict(self) -> Dict[str, object]:
        return {
            "iterations": self.iterations,
            "failures": self.failures,
            "errors_by_kind": dict(self.errors_by_kind),
            "first_errors": list(self.first_errors),
            "ok": self.ok,
            "summary": self.summary(),
        }


def run_trials(
    grid: Sequence[Sequence[str]],
    *,
    iterations: int,
    seed: int,
    rng_engine: str = "py_random",
    check_adjacency: bool = False,
    on_progress: Optional[Callable[[float], None]] = None,
) -> TrialReport:
    """Shuffle and verify ``grid`` ``iterations`` times, counting failures.

    Each trial uses its own random source derived from ``seed``. A failed trial
    is logged and counted; the loop always runs to the end. ``on_progress`` is
    called after every trial with the completed fraction.
    """
    if iterations < 1:
        raise ValueError("iterations must be >= 1")
    report = TrialReport(iterations=iterations)
    for i in range(1, iterations + 1):
        rng = create_rng(rng_engine, derive_parallel_seed(seed, i, "trial"))
        try:
            shuffled = shuffle_grid(grid, rng)
            verify(grid, shuffled, check_adjacency=check_adjacency)
        except ShuffleError as exc:
            report.failures += 1
            report.errors_by_kind[exc.kind] += 1
            if len(report.first_errors) < MAX_REPORTED_ERRORS:
                report.first_errors.append(str(exc))
            logger.warning("trial %d failed (%s): %s", i, exc.kind, exc)
        if on_progress is not None:
            on_progress(i / iterations)
    logger.info("%s: %d/%d trials failed", report.summary(), report.failures, iterations)
    return report
