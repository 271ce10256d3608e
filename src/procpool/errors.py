"""Common error types used across the package."""

from __future__ import annotations


class CensusLineError(ValueError):
    """Raised when a process-table line does not have the expected shape."""

    def __init__(self, line: str, *, reason: str = "Unrecognised process line") -> None:
        message = f"{reason}: {line!r}"
        super().__init__(message)
        self.line = line
        self.reason = reason


__all__ = ["CensusLineError"]
