"""Base formatter interface and shared serialization for polyloc output."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..analysis import FunctionSummary
from ..models import ScanResult
from ..scanning.models import FileRecord, FunctionKind, FunctionRecord


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, result: ScanResult, summary: Optional[FunctionSummary] = None) -> None:
        """Render a scan result to the terminal."""

    @abstractmethod
    def format(self, result: ScanResult, summary: Optional[FunctionSummary] = None) -> str:
        """Return formatted string representation of a scan result."""


def _timestamp(record: FileRecord) -> Optional[str]:
    if record.last_modified is None:
        return None
    return record.last_modified.isoformat()


def function_to_dict(fn: FunctionRecord) -> dict[str, Any]:
    return {
        "name": fn.name,
        "kind": fn.kind.value,
        "line_start": fn.start_line,
        "line_end": fn.end_line,
        "line_count": fn.line_count,
        "parent": fn.parent_name,
        "parameters": list(fn.parameters),
        "decorators": list(fn.decorators),
        "is_async": fn.is_async,
        "is_method": fn.kind is FunctionKind.METHOD,
        "is_class": fn.is_container,
        "has_docstring": fn.has_docstring,
        "visibility": fn.visibility.value,
        "complexity": fn.complexity,
        "partial": fn.partial,
    }


def file_to_dict(record: FileRecord, include_functions: bool) -> dict[str, Any]:
    """Serialize one file record.

    Function columns are only present when structural extraction ran, so a
    plain line count export stays small.
    """
    data: dict[str, Any] = {
        "path": record.path,
        "language": record.language,
        "extension": record.extension,
        "lines": record.stats.total,
        "code": record.stats.code,
        "comment": record.stats.comment,
        "blank": record.stats.blank,
        "is_binary": record.stats.binary,
        "encoding": record.stats.encoding,
        "size_bytes": record.size_bytes,
        "oversized": record.oversized,
        "last_modified": _timestamp(record),
    }
    if include_functions:
        data["function_count"] = record.function_count
        data["class_count"] = record.class_count
        data["avg_function_length"] = round(record.avg_function_length, 2)
        data["functions"] = [function_to_dict(fn) for fn in record.functions]
    return data
