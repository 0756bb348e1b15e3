"""Core module for grid shuffling."""

from .builder import GridShuffler, ShuffleMetrics, ShuffleParams, ShuffleResult, shuffle_grid
from .selector import pick, pick_indices, take
from .shuffler import swap_shuffle
from .unpack import build_rows

__all__ = [
    "GridShuffler",
    "ShuffleMetrics",
    "ShuffleParams",
    "ShuffleResult",
    "build_rows",
    "pick",
    "pick_indices",
    "shuffle_grid",
    "swap_shuffle",
    "take",
]
