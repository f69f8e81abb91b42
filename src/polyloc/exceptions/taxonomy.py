"""Per-file issue taxonomy with error codes.

Error Code Convention:
    SC1xx - Scanning issues (collected into the ScanResult, never raised)

None of these halt a scan. Issues are attached to the ScanResult as
warnings or errors depending on their severity.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """Structured codes for per-file scan issues."""

    SC100 = "SC100"  # File read error (IoError)
    SC101 = "SC101"  # Undecodable byte stream (EncodingError)
    SC104 = "SC104"  # Closing boundary not found (ExtractionAmbiguity)
    SC105 = "SC105"  # No registry match (UnknownLanguage)
    SC106 = "SC106"  # Code lines above warn size (OversizedFile)


ISSUE_KINDS = {
    ErrorCode.SC100: "IoError",
    ErrorCode.SC101: "EncodingError",
    ErrorCode.SC104: "ExtractionAmbiguity",
    ErrorCode.SC105: "UnknownLanguage",
    ErrorCode.SC106: "OversizedFile",
}


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ScanIssue:
    """A non-fatal problem found while analyzing one file.

    Attributes:
        code: Structured error code
        path: File the issue belongs to
        message: Human-readable description
        line: Line number the issue points at, if any
        severity: ERROR for unreadable files, WARNING otherwise
    """

    code: ErrorCode
    path: str
    message: str
    line: Optional[int] = None
    severity: Severity = Severity.WARNING

    @property
    def kind(self) -> str:
        return ISSUE_KINDS[self.code]

    def __str__(self) -> str:
        location = f"{self.path}:{self.line}" if self.line is not None else self.path
        return f"[{self.code.value}] {location}: {self.message}"

    def sort_key(self) -> tuple:
        return (self.path, self.code.value, self.line or 0, self.message)

    def to_json(self) -> dict[str, Any]:
        """Structured logging format."""
        return {
            "error_code": self.code.value,
            "kind": self.kind,
            "path": self.path,
            "line": self.line,
            "message": self.message,
            "severity": self.severity.value,
        }


def io_error(path: str, reason: str) -> ScanIssue:
    return ScanIssue(ErrorCode.SC100, path, f"Cannot read file: {reason}", severity=Severity.ERROR)


def encoding_error(path: str) -> ScanIssue:
    return ScanIssue(ErrorCode.SC101, path, "Undecodable byte stream, treated as binary")


def extraction_ambiguity(path: str, name: str, line: int) -> ScanIssue:
    return ScanIssue(
        ErrorCode.SC104,
        path,
        f"No closing boundary for '{name}', truncated at end of file",
        line=line,
    )


def unknown_language(path: str) -> ScanIssue:
    return ScanIssue(ErrorCode.SC105, path, "No language registered for this file")


def oversized_file(path: str, code_lines: int, threshold: int) -> ScanIssue:
    return ScanIssue(
        ErrorCode.SC106,
        path,
        f"{code_lines} code lines exceeds warn size of {threshold}",
    )
