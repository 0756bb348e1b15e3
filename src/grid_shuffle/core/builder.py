"""Grid shuffler with configurable retry strategies."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Sequence

from ..errors import ShuffleError
from ..feasibility import check_grid, check_partition, grid_shape
from ..rng import RandomSource, create_rng, derive_parallel_seed
from ..runs import pack_grid
from ..verify import verify
from .shuffler import swap_shuffle
from .unpack import build_rows

logger = logging.getLogger(__name__)


def shuffle_grid(grid: Sequence[Sequence[str]], rng: RandomSource) -> List[List[str]]:
    """Pack, reorder and rebuild ``grid`` once.

    Raises ValueError for an invalid grid and IncompleteSelection when the
    shuffled runs cannot be partitioned into rows of the original width.
    """
    feas = check_grid(grid)
    if not feas.feasible:
        raise ValueError("; ".join(feas.reasons))
    rows, columns = grid_shape(grid)
    packed = pack_grid(grid)
    part = check_partition(packed, rows=rows, columns=columns)
    if not part.feasible:  # pragma: no cover - packing a valid grid always fits
        raise ValueError("; ".join(part.reasons))
    shuffled = swap_shuffle(packed, rng)
    return build_rows(shuffled, rows, columns)


@dataclass
class ShuffleParams:
    """Parameters for a shuffle."""

    seed: int
    rng_engine: str = "py_random"
    max_attempts: int = 20
    check_adjacency: bool = False


@dataclass
class ShuffleMetrics:
    attempts: int
    failed_selections: int
    failed_verifications: int
    total_time: float = 0.0


@dataclass
class ShuffleResult:
    grid: List[List[str]]
    metrics: ShuffleMetrics


class GridShuffler:
    """Runs shuffle attempts with the ``single`` or ``retry`` strategy."""

    def __init__(self, strategy: str = "retry"):
        if strategy not in ("single", "retry"):
            raise ValueError(f"Unknown strategy: {strategy}")
        self.strategy = strategy

    def shuffle(self, grid: Sequence[Sequence[str]], params: ShuffleParams) -> ShuffleResult:
        if self.strategy == "single":
            return self._shuffle(grid, params, max_attempts=1)
        return self._shuffle(grid, params, max_attempts=params.max_attempts)

    def _shuffle(
        self, grid: Sequence[Sequence[str]], params: ShuffleParams, max_attempts: int
    ) -> ShuffleResult:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        start_time = time.time()
        failed_selections = 0
        failed_verifications = 0
        last_error: ShuffleError | None = None

        for attempt in range(max_attempts):
            attempt_seed = derive_parallel_seed(params.seed, attempt, "grid_shuffler")
            rng = create_rng(params.rng_engine, attempt_seed)
            try:
                out = shuffle_grid(grid, rng)
                verify(grid, out, check_adjacency=params.check_adjacency)
            except ShuffleError as exc:
                if exc.kind == "incomplete_selection":
                    failed_selections += 1
                else:
                    failed_verifications += 1
                last_error = exc
                logger.debug("attempt %d failed: %s", attempt + 1, exc)
                if self.strategy == "single":
                    raise
                continue

            metrics = ShuffleMetrics(
                attempts=attempt + 1,
                failed_selections=failed_selections,
                failed_verifications=failed_verifications,
                total_time=time.time() - start_time,
            )
            return ShuffleResult(grid=out, metrics=metrics)

        raise RuntimeError(
            f"Failed to shuffle grid within {max_attempts} attempts: {last_error}"
        )
