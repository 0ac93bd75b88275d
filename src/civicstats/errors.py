"""Exception hierarchy for the ingestion engine."""


class CivicStatsError(Exception):
    """Base class for all civicstats errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable


class FetchError(CivicStatsError):
    """A source could not be retrieved after all retry attempts."""

    def __init__(self, path: str, last_cause: str, attempts: int) -> None:
        super().__init__(
            f"Failed to load {path} after {attempts} attempts: {last_cause}",
            retriable=True,
        )
        self.path = path
        self.last_cause = last_cause
        self.attempts = attempts


class ParseError(CivicStatsError):
    """A source text could not be parsed as delimited data at all."""

    def __init__(self, source_key: str, reason: str) -> None:
        super().__init__(f"Could not parse source '{source_key}': {reason}")
        self.source_key = source_key
        self.reason = reason


class LoadTimeoutError(CivicStatsError):
    """The aggregate load exceeded its time budget."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(f"Data loading timed out after {timeout_seconds:g}s")
        self.timeout_seconds = timeout_seconds
