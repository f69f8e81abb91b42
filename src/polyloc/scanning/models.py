"""Per-file analysis records.

FileLineStats, FunctionRecord and FileRecord are built entirely inside one
analysis task and never mutated afterwards. Consumers read them from the
ScanResult (see ``polyloc.models``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import PurePath
from typing import Optional


class FunctionKind(str, Enum):
    """Kind of structural record."""

    FUNCTION = "function"
    METHOD = "method"
    CLASS = "class"
    STRUCT = "struct"


class Visibility(str, Enum):
    """Visibility tag derived from keywords or naming conventions."""

    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    INTERNAL = "internal"
    UNSPECIFIED = "unspecified"


@dataclass(frozen=True)
class FileLineStats:
    """Line partition of a single file.

    Attributes:
        total: Physical line count (newline-delimited, unterminated last line counts)
        code: Lines with at least one non-comment, non-whitespace character
        comment: Lines touching a comment region and holding no code
        blank: Remaining lines
        binary: True if the file was not classified as text
        encoding: Detected text encoding (None when undecodable)
    """

    total: int = 0
    code: int = 0
    comment: int = 0
    blank: int = 0
    binary: bool = False
    encoding: Optional[str] = None

    @property
    def is_partitioned(self) -> bool:
        """True if code/comment/blank add up to total (always, for text files)."""
        if self.binary:
            return self.code == self.comment == self.blank == 0
        return self.code + self.comment + self.blank == self.total


@dataclass(frozen=True)
class FunctionRecord:
    """A function, method, class or struct found by the structural extractor.

    Attributes:
        name: Declared name
        kind: FUNCTION, METHOD, CLASS or STRUCT
        path: Owning file path
        start_line: Header line (1-indexed)
        end_line: Closing line (1-indexed, inclusive)
        parent: Enclosing record, a back-reference for containment queries only
        is_async: Header carries an async marker
        has_decorator: Decorator/attribute lines precede the header
        has_docstring: Docstring or doc comment attached
        visibility: Visibility tag
        complexity: Estimated cyclomatic complexity (None unless estimated)
        partial: Closing boundary not found, truncated at end of file
        parameters: Raw parameter (or base class) strings
        decorators: Decorator/attribute names
    """

    name: str
    kind: FunctionKind
    path: str
    start_line: int
    end_line: int
    parent: Optional["FunctionRecord"] = field(default=None, compare=False, repr=False)
    is_async: bool = False
    has_decorator: bool = False
    has_docstring: bool = False
    visibility: Visibility = Visibility.UNSPECIFIED
    complexity: Optional[int] = None
    partial: bool = False
    parameters: tuple[str, ...] = ()
    decorators: tuple[str, ...] = ()

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    @property
    def is_container(self) -> bool:
        """True for classes and structs."""
        return self.kind in (FunctionKind.CLASS, FunctionKind.STRUCT)

    @property
    def parent_name(self) -> Optional[str]:
        return self.parent.name if self.parent is not None else None

    def contains(self, other: "FunctionRecord") -> bool:
        return self.start_line <= other.start_line and other.end_line <= self.end_line


@dataclass(frozen=True)
class FileRecord:
    """Complete analysis of one file.

    Attributes:
        path: File path as supplied to the scan
        language: Registry id (None when the extension is unrecognized)
        stats: Line partition
        functions: Structural records ordered by start line (empty unless extracted)
        last_modified: Timestamp from the configured provider
        oversized: Code lines exceed the configured warn size
        size_bytes: Raw size of the file
    """

    path: str
    language: Optional[str]
    stats: FileLineStats
    functions: tuple[FunctionRecord, ...] = ()
    last_modified: Optional[datetime] = None
    oversized: bool = False
    size_bytes: int = 0

    @property
    def function_count(self) -> int:
        """Functions and methods; classes and structs are counted by class_count."""
        return sum(1 for fn in self.functions if not fn.is_container)

    @property
    def class_count(self) -> int:
        return sum(1 for fn in self.functions if fn.is_container)

    @property
    def avg_function_length(self) -> float:
        """Mean line count of non-container records."""
        lengths = [fn.line_count for fn in self.functions if not fn.is_container]
        if not lengths:
            return 0.0
        return sum(lengths) / len(lengths)

    @property
    def extension(self) -> str:
        """File extension without the leading dot, or empty string."""
        return PurePath(self.path).suffix.lstrip(".")
