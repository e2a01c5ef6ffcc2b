"""Error types raised for user-supplied board descriptions."""

from __future__ import annotations


class InvalidConfiguration(ValueError):
    """Raised when a board cannot be built from the given parameters."""

    def __init__(self, reason: str, problems: list[str] | None = None) -> None:
        self.reason = reason
        self.problems = list(problems or [])
        message = reason
        if self.problems:
            message += ": " + "; ".join(self.problems)
        super().__init__(message)
