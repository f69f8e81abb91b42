"""Scan orchestrator.

Runs the per-file pipeline (read -> classify -> extract -> estimate ->
timestamp) over a list of paths, either sequentially or on a bounded thread
pool, then folds the per-file outcomes into one ScanResult in the calling
thread.

Each task only reads its own file and the immutable language registry. Tasks
share nothing mutable, so the pool needs no locking beyond what the
timestamp provider does internally.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from .config import ScanConfig
from .exceptions import FileAccessError, ScanIssue
from .exceptions.taxonomy import encoding_error, io_error, oversized_file, unknown_language
from .logging_config import get_logger
from .models import ScanResult
from .scanning.classifier import classify_decoded, decode
from .scanning.extractor import extract
from .scanning.languages import detect_language
from .scanning.models import FileRecord, FunctionRecord
from .temporal import TimestampProvider, get_timestamp_provider

logger = get_logger(__name__)

PathLike = Union[str, Path]
Reader = Callable[[Path], bytes]


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise FileAccessError(path, e.strerror or str(e)) from e


@dataclass(frozen=True)
class FileOutcome:
    """What one analysis task hands back to the reduction step.

    ``record`` is None when the file was skipped (filtered out or unreadable).
    """

    record: Optional[FileRecord]
    issues: tuple[ScanIssue, ...] = ()


class Scanner:
    """Analyzes a set of files according to a ScanConfig.

    Args:
        config: Validated scan configuration
        timestamps: Timestamp provider (default: picked from config.timestamp_source)
        reader: Reads a file's bytes (default: Path.read_bytes)
        root: Repository root handed to the git timestamp provider
    """

    def __init__(
        self,
        config: ScanConfig,
        timestamps: Optional[TimestampProvider] = None,
        reader: Optional[Reader] = None,
        root: PathLike = ".",
    ):
        self.config = config
        self.timestamps = timestamps or get_timestamp_provider(config.timestamp_source, root)
        self.reader = reader or _read_bytes

    def analyze_file(self, path: PathLike) -> FileOutcome:
        """Run the full per-file pipeline. Never raises for per-file problems."""
        path = Path(path)
        path_str = str(path)
        config = self.config
        spec = detect_language(path)

        if config.language_filter is not None and (spec is None or spec.id not in config.language_filter):
            logger.debug(f"Skipping {path_str}: outside language filter")
            return FileOutcome(None)

        try:
            data = self.reader(path)
        except FileAccessError as e:
            logger.debug(f"{e}")
            return FileOutcome(None, (io_error(path_str, e.reason),))
        except OSError as e:
            logger.debug(f"Cannot read {path_str}: {e}")
            return FileOutcome(None, (io_error(path_str, e.strerror or str(e)),))

        issues: list[ScanIssue] = []
        if spec is None:
            issues.append(unknown_language(path_str))

        decoded = decode(data)
        if decoded.undecodable:
            issues.append(encoding_error(path_str))
        stats = classify_decoded(decoded, data, spec)

        functions: tuple[FunctionRecord, ...] = ()
        if config.extract_functions and spec is not None and not stats.binary:
            extraction = extract(decoded.text, spec, path_str, config.estimate_complexity)
            functions = tuple(extraction.records)
            issues.extend(extraction.ambiguities)

        threshold = config.warn_size_threshold
        oversized = threshold is not None and stats.code > threshold
        if oversized:
            issues.append(oversized_file(path_str, stats.code, threshold))

        record = FileRecord(
            path=path_str,
            language=spec.id if spec is not None else None,
            stats=stats,
            functions=functions,
            last_modified=self.timestamps.lookup(path),
            oversized=oversized,
            size_bytes=len(data),
        )
        return FileOutcome(record, tuple(issues))

    def _use_pool(self, file_count: int) -> bool:
        config = self.config
        return config.parallel and file_count >= max(config.parallel_min_files, 2) and config.max_workers > 1

    def scan(self, paths: Iterable[PathLike]) -> ScanResult:
        """Analyze every path and reduce the outcomes into a ScanResult."""
        paths = list(paths)
        outcomes: list[FileOutcome] = []

        # Batch setup (git history) happens here, before any task starts.
        load = getattr(self.timestamps, "load", None)
        if load is not None:
            load()

        if self._use_pool(len(paths)):
            logger.debug(f"Scanning {len(paths)} files on {self.config.max_workers} workers")
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                futures = {executor.submit(self.analyze_file, p): p for p in paths}
                for future in as_completed(futures):
                    outcomes.append(future.result())
        else:
            logger.debug(f"Scanning {len(paths)} files sequentially")
            outcomes = [self.analyze_file(p) for p in paths]

        result = ScanResult.build(
            (o.record for o in outcomes if o.record is not None),
            (issue for o in outcomes for issue in o.issues),
            function_extraction_enabled=self.config.extract_functions,
            complexity_enabled=self.config.estimate_complexity,
        )
        logger.info(
            f"Scanned {len(result.files)} files: {result.totals.code} code, "
            f"{result.totals.comment} comment, {result.totals.blank} blank lines "
            f"({len(result.warnings)} warnings, {len(result.errors)} errors)"
        )
        return result


def run_scan(
    paths: Iterable[PathLike],
    config: Optional[ScanConfig] = None,
    timestamps: Optional[TimestampProvider] = None,
    reader: Optional[Reader] = None,
    root: PathLike = ".",
) -> ScanResult:
    """Scan paths with a fresh Scanner (default configuration if none given)."""
    return Scanner(config or ScanConfig(), timestamps=timestamps, reader=reader, root=root).scan(paths)
