"""Error types for check-procs."""


class CheckError(Exception):
    """Base class for errors that end a check run with UNKNOWN."""


class InvalidPatternError(CheckError):
    """An include or exclude command pattern does not compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(reason)
        self.pattern = pattern
        self.reason = reason


class ProcessEnumerationError(CheckError):
    """The process table could not be read."""
