"""
Error taxonomy for repository extraction.
"""

from typing import Optional, Sequence


class ExtractorError(Exception):
    """Base class for every error raised by the extractor."""


class ExecutionError(ExtractorError):
    """The history tool could not be started or exited with an unexpected status."""

    def __init__(self, message: str, command: Optional[Sequence[str]] = None,
                 returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.command = list(command) if command else []
        self.returncode = returncode
        self.stderr = stderr


class ParseError(ExtractorError):
    """A header or numeric-stat line in the history output is malformed."""

    def __init__(self, message: str, line_number: Optional[int] = None, line: str = ""):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
        self.line = line


class CoordinationError(ExtractorError):
    """An internal invariant of the retrieval pipeline was violated."""


class RepositoryError(ExtractorError):
    """The target path is not a usable git repository."""
