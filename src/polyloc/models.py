"""Scan-wide result model.

A ScanResult is produced once per scan by folding the per-file outcomes in
the calling thread. It is never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from .exceptions import ScanIssue, Severity
from .scanning.models import FileRecord, FunctionRecord

UNKNOWN_LANGUAGE = "unknown"
# Bucket for files without a suffix (Makefile, LICENSE) in the extension breakdown.
NO_EXTENSION = "(none)"


@dataclass(frozen=True)
class LanguageTotals:
    """Aggregated counts for one language (or for the whole scan).

    Binary files are counted in ``binary_files`` only; their lines never
    enter the code/comment/blank totals.
    """

    files: int = 0
    binary_files: int = 0
    total: int = 0
    code: int = 0
    comment: int = 0
    blank: int = 0
    functions: int = 0

    def add(self, record: FileRecord) -> LanguageTotals:
        if record.stats.binary:
            return LanguageTotals(
                files=self.files,
                binary_files=self.binary_files + 1,
                total=self.total,
                code=self.code,
                comment=self.comment,
                blank=self.blank,
                functions=self.functions,
            )
        return LanguageTotals(
            files=self.files + 1,
            binary_files=self.binary_files,
            total=self.total + record.stats.total,
            code=self.code + record.stats.code,
            comment=self.comment + record.stats.comment,
            blank=self.blank + record.stats.blank,
            functions=self.functions + record.function_count,
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "files": self.files,
            "binary_files": self.binary_files,
            "total": self.total,
            "code": self.code,
            "comment": self.comment,
            "blank": self.blank,
            "functions": self.functions,
        }


@dataclass(frozen=True)
class ScanResult:
    """Everything a scan produced.

    Attributes:
        files: Per-file records sorted by path (binary files included)
        language_totals: Language id (or "unknown") -> totals
        totals: Totals over every file
        warnings: Non-fatal issues sorted by (path, code, line)
        errors: Unreadable files sorted the same way
        function_extraction_enabled: Structural extraction ran
        complexity_enabled: Complexity estimation ran
    """

    files: tuple[FileRecord, ...] = ()
    language_totals: Mapping[str, LanguageTotals] = field(default_factory=dict)
    totals: LanguageTotals = field(default_factory=LanguageTotals)
    warnings: tuple[ScanIssue, ...] = ()
    errors: tuple[ScanIssue, ...] = ()
    function_extraction_enabled: bool = False
    complexity_enabled: bool = False

    @classmethod
    def build(
        cls,
        records: Iterable[FileRecord],
        issues: Iterable[ScanIssue],
        function_extraction_enabled: bool = False,
        complexity_enabled: bool = False,
    ) -> ScanResult:
        """Fold per-file outcomes into a result.

        Records and issues may arrive in any order; the output is canonical.
        """
        files = tuple(sorted(records, key=lambda r: r.path))
        per_language: dict[str, LanguageTotals] = {}
        totals = LanguageTotals()
        for record in files:
            key = record.language or UNKNOWN_LANGUAGE
            per_language[key] = per_language.get(key, LanguageTotals()).add(record)
            totals = totals.add(record)

        ordered = sorted(issues, key=lambda issue: issue.sort_key())
        return cls(
            files=files,
            language_totals=dict(sorted(per_language.items())),
            totals=totals,
            warnings=tuple(i for i in ordered if i.severity is Severity.WARNING),
            errors=tuple(i for i in ordered if i.severity is Severity.ERROR),
            function_extraction_enabled=function_extraction_enabled,
            complexity_enabled=complexity_enabled,
        )

    @property
    def text_files(self) -> tuple[FileRecord, ...]:
        return tuple(f for f in self.files if not f.stats.binary)

    @property
    def text_file_count(self) -> int:
        return self.totals.files

    @property
    def binary_file_count(self) -> int:
        return self.totals.binary_files

    @property
    def total_functions(self) -> int:
        return sum(1 for fn in self.all_functions() if not fn.is_container)

    @property
    def total_classes(self) -> int:
        return sum(1 for fn in self.all_functions() if fn.is_container)

    def extension_totals(self) -> dict[str, LanguageTotals]:
        """Totals keyed by file extension, largest line count first."""
        per_extension: dict[str, LanguageTotals] = {}
        for record in self.files:
            key = record.extension.lower() or NO_EXTENSION
            per_extension[key] = per_extension.get(key, LanguageTotals()).add(record)
        return dict(sorted(per_extension.items(), key=lambda item: (-item[1].total, item[0])))

    def all_functions(self) -> list[FunctionRecord]:
        """Every structural record, in file then line order."""
        return [fn for record in self.files for fn in record.functions]

    def get_file(self, path: str) -> FileRecord:
        """Look up a record by path. Raises KeyError if absent."""
        for record in self.files:
            if record.path == path:
                return record
        raise KeyError(path)
