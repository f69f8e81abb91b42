"""Function analysis summary over a finished scan."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .math import Statistics
from .models import ScanResult
from .scanning.models import FunctionRecord

# Complexity above which a function is reported.
COMPLEXITY_WARNING = 10
# Robust z-score above which a function length is an outlier.
LENGTH_OUTLIER_Z = 3.5


@dataclass(frozen=True)
class FunctionSummary:
    """Aggregate view of every extracted record.

    Attributes:
        function_count: Functions and methods
        class_count: Classes and structs
        async_count: Functions carrying an async marker
        documented_count: Functions with a docstring or doc comment
        mean_length: Mean function length in lines
        median_length: Median function length in lines
        mean_complexity: Mean complexity (None when not estimated)
        median_complexity: Median complexity (None when not estimated)
        p90_complexity: 90th percentile complexity (None when not estimated)
        largest: Longest functions, longest first
        most_complex: Functions above COMPLEXITY_WARNING, most complex first
        length_outliers: Functions whose length is a robust outlier
        files_by_function_count: (path, function count), most first
    """

    function_count: int = 0
    class_count: int = 0
    async_count: int = 0
    documented_count: int = 0
    mean_length: float = 0.0
    median_length: float = 0.0
    mean_complexity: Optional[float] = None
    median_complexity: Optional[float] = None
    p90_complexity: Optional[float] = None
    largest: tuple[FunctionRecord, ...] = ()
    most_complex: tuple[FunctionRecord, ...] = ()
    length_outliers: tuple[FunctionRecord, ...] = ()
    files_by_function_count: tuple[tuple[str, int], ...] = field(default_factory=tuple)

    @property
    def documented_ratio(self) -> float:
        if self.function_count == 0:
            return 0.0
        return self.documented_count / self.function_count


def _canonical(fn: FunctionRecord) -> tuple:
    return (fn.path, fn.start_line)


def summarize_functions(result: ScanResult, top: int = 10) -> FunctionSummary:
    """Summarize the structural records of a scan.

    Args:
        result: Scan result (extraction must have run for anything to show)
        top: Length of the ranked lists

    Returns:
        FunctionSummary
    """
    records = result.all_functions()
    functions = [fn for fn in records if not fn.is_container]
    classes = [fn for fn in records if fn.is_container]

    lengths = [float(fn.line_count) for fn in functions]
    complexities = [float(fn.complexity) for fn in functions if fn.complexity is not None]

    largest = sorted(functions, key=lambda fn: (-fn.line_count,) + _canonical(fn))[:top]
    most_complex = sorted(
        (fn for fn in functions if fn.complexity is not None and fn.complexity > COMPLEXITY_WARNING),
        key=lambda fn: (-fn.complexity,) + _canonical(fn),
    )[:top]
    outliers = [
        fn for fn, z in zip(functions, Statistics.mad_z_score(lengths)) if z > LENGTH_OUTLIER_Z
    ]

    per_file = [(f.path, f.function_count) for f in result.files if f.function_count]
    per_file.sort(key=lambda item: (-item[1], item[0]))

    return FunctionSummary(
        function_count=len(functions),
        class_count=len(classes),
        async_count=sum(1 for fn in functions if fn.is_async),
        documented_count=sum(1 for fn in functions if fn.has_docstring),
        mean_length=Statistics.mean(lengths),
        median_length=Statistics.median(lengths),
        mean_complexity=Statistics.mean(complexities) if complexities else None,
        median_complexity=Statistics.median(complexities) if complexities else None,
        p90_complexity=Statistics.percentile(complexities, 90) if complexities else None,
        largest=tuple(largest),
        most_complex=tuple(most_complex),
        length_outliers=tuple(outliers),
        files_by_function_count=tuple(per_file[:top]),
    )
