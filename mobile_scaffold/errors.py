"""Exception hierarchy for mobile-scaffold.

Every failure the CLI knows how to report derives from ``ScaffoldError``.
Library code raises at the point of failure; only ``cli.main`` catches.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all mobile-scaffold errors."""


class ValidationError(ScaffoldError):
    """Raised when user input is unusable (e.g. a blank entity name)."""


class NotFoundError(ScaffoldError):
    """Raised when an expected file does not exist."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class ParseError(ScaffoldError):
    """Raised when a JSON document cannot be parsed."""

    def __init__(self, message: str, source: str = "") -> None:
        self.source = source
        super().__init__(message)


class CommandError(ScaffoldError):
    """Raised when an external command exits with a non-zero code."""

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed with exit code {returncode}: {command}"
        if stderr:
            message = f"{message}\n{stderr}"
        super().__init__(message)


class ResolutionAborted(ScaffoldError):
    """Raised when the user interrupts interactive entity resolution."""
