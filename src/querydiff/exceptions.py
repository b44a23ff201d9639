"""Exception hierarchy for querydiff.

Only fatal conditions are exceptions. Data disagreements (missing rows,
mismatched cells, row count differences) are captured in the DiffResult.
"""


class QueryDiffError(Exception):
    """Base exception for querydiff errors."""
    pass


class ConfigurationError(QueryDiffError):
    """Raised before matching when the comparison is misconfigured."""

    def __init__(self, message: str, side: str | None = None, column: str | None = None):
        super().__init__(message)
        self.message = message
        self.side = side
        self.column = column


class UpstreamExecutionError(QueryDiffError):
    """Raised when a side's row set could not be produced."""

    def __init__(self, message: str, side: str | None = None):
        super().__init__(message)
        self.message = message
        self.side = side


class ComparisonTimeoutError(QueryDiffError):
    """Raised when matching exceeds its wall-clock budget."""

    def __init__(self, timeout_seconds: float, rows_processed: int = 0):
        super().__init__(
            f"Comparison timeout ({timeout_seconds}s) exceeded "
            f"after {rows_processed} rows"
        )
        self.timeout_seconds = timeout_seconds
        self.rows_processed = rows_processed


class MatchCancelledError(QueryDiffError):
    """Raised inside a worker when a sibling partition has already failed."""
    pass
