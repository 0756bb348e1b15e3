"""Run-preserving shuffler for rectangular token grids."""

from .core import GridShuffler, ShuffleParams, shuffle_grid
from .errors import IncompleteSelection, ShuffleError, VerificationError
from .runs import TokenRun, pack, pack_grid
from .verify import verify
from .version import __version__

__all__ = [
    "GridShuffler",
    "IncompleteSelection",
    "ShuffleError",
    "ShuffleParams",
    "TokenRun",
    "VerificationError",
    "__version__",
    "pack",
    "pack_grid",
    "shuffle_grid",
    "verify",
]
