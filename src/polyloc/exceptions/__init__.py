"""Exception hierarchy for polyloc."""

from .analysis import (
    AnalysisError,
    FileAccessError,
)
from .base import PolylocError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)
from .taxonomy import ErrorCode, ScanIssue, Severity

__all__ = [
    "PolylocError",
    "AnalysisError",
    "FileAccessError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "ErrorCode",
    "ScanIssue",
    "Severity",
]
