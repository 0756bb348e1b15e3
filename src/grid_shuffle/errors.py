"""Failure types raised by the shuffle pipeline and the verifier."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from .runs import TokenRun


class ShuffleError(Exception):
    """Base class for recoverable failures of a single shuffle attempt."""

    kind = "shuffle_error"


class IncompleteSelection(ShuffleError):
    """No subset of the remaining runs fills the row exactly."""

    kind = "incomplete_selection"

    def __init__(self, row: int, columns: int, remaining: Sequence[TokenRun]):
        self.row = row
        self.columns = columns
        self.remaining: List[TokenRun] = list(remaining)
        pool = ", ".join(str(r) for r in self.remaining)
        super().__init__(
            f"cannot select runs summing to {columns} for row {row}; remaining pool: [{pool}]"
        )


class VerificationError(ShuffleError):
    kind = "verification_error"

    def __init__(self, message: str, *, expected: Any = None, actual: Any = None):
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class CountMismatch(VerificationError):
    kind = "count_mismatch"

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"items count do not match: expected {expected}, got {actual}",
            expected=expected,
            actual=actual,
        )


class ShapeMismatch(VerificationError):
    kind = "shape_mismatch"

    def __init__(self, expected: Any, actual: Any):
        super().__init__(
            f"sizes do not match: expected {expected}, got {actual}",
            expected=expected,
            actual=actual,
        )


class MissingCell(VerificationError):
    kind = "missing_cell"

    def __init__(self, row: int, column: int, value: Optional[str] = None):
        self.row = row
        self.column = column
        super().__init__(
            f"empty cell found at ({row},{column})", expected="token", actual=value
        )


class ContentMismatch(VerificationError):
    kind = "content_mismatch"

    def __init__(self, run: TokenRun):
        self.run = run
        super().__init__(f"output does not contain {run}", expected=run, actual=None)


class AdjacencyIntroduced(VerificationError):
    kind = "adjacency_introduced"

    def __init__(self, message: str, *, expected: Any = None, actual: Any = None):
        super().__init__(
            f"there are some adjacent items moved each other: {message}",
            expected=expected,
            actual=actual,
        )
