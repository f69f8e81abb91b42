"""Analysis-related exceptions."""

from pathlib import Path

from .base import PolylocError


class AnalysisError(PolylocError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised by the default reader when a file cannot be read.

    The orchestrator turns it into an IoError issue (SC100); it never
    escapes a scan.
    """

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason
