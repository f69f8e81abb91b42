"""JSON formatter for polyloc."""

import json
from datetime import datetime, timezone
from typing import Optional

from .. import __version__
from ..analysis import FunctionSummary
from ..models import ScanResult
from .base import BaseFormatter, file_to_dict, function_to_dict

GENERATOR = f"polyloc {__version__}"


def _summary_to_dict(summary: FunctionSummary) -> dict:
    return {
        "function_count": summary.function_count,
        "class_count": summary.class_count,
        "async_count": summary.async_count,
        "documented_ratio": round(summary.documented_ratio, 4),
        "mean_length": round(summary.mean_length, 2),
        "median_length": summary.median_length,
        "mean_complexity": None if summary.mean_complexity is None else round(summary.mean_complexity, 2),
        "median_complexity": summary.median_complexity,
        "p90_complexity": summary.p90_complexity,
        "largest": [function_to_dict(fn) | {"path": fn.path} for fn in summary.largest],
        "most_complex": [function_to_dict(fn) | {"path": fn.path} for fn in summary.most_complex],
    }


def build_report(result: ScanResult, summary: Optional[FunctionSummary] = None) -> dict:
    """The export document shared by the JSON and HTML formatters."""
    include_functions = result.function_extraction_enabled
    data = {
        "metadata": {
            "total_lines": result.totals.total,
            "total_files": result.text_file_count,
            "binary_files": result.binary_file_count,
            "total_functions": result.total_functions,
            "total_classes": result.total_classes,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "function_extraction_enabled": include_functions,
            "complexity_enabled": result.complexity_enabled,
            "generator": GENERATOR,
        },
        "breakdown": {lang: totals.to_dict() for lang, totals in result.language_totals.items()},
        "files": [file_to_dict(f, include_functions) for f in result.text_files],
        "warnings": [issue.to_json() for issue in result.warnings],
        "errors": [issue.to_json() for issue in result.errors],
    }
    if summary is not None:
        data["function_summary"] = _summary_to_dict(summary)
    return data


class JsonFormatter(BaseFormatter):
    """Render a scan result as one JSON document."""

    def render(self, result: ScanResult, summary: Optional[FunctionSummary] = None) -> None:
        print(self.format(result, summary))

    def format(self, result: ScanResult, summary: Optional[FunctionSummary] = None) -> str:
        return json.dumps(build_report(result, summary), indent=2)
