"""Error taxonomy shared by the team sync and labeling commands."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when decoded configuration or team data has the wrong shape.

    Always fatal: the run aborts before any further side effect is attempted.
    """


class ExternalCallError(RuntimeError):
    """Raised when a GitHub API call fails."""

    def __init__(self, operation: str, message: str, *, status_code: int | None = None) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.status_code = status_code
