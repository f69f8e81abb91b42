"""CSV formatter for polyloc."""

import csv
import io
from typing import Optional

from ..analysis import FunctionSummary
from ..models import ScanResult
from .base import BaseFormatter


class CsvFormatter(BaseFormatter):
    """Render one row per text file."""

    def render(self, result: ScanResult, summary: Optional[FunctionSummary] = None) -> None:
        print(self.format(result, summary), end="")

    def format(self, result: ScanResult, summary: Optional[FunctionSummary] = None) -> str:
        include_functions = result.function_extraction_enabled
        output = io.StringIO()
        writer = csv.writer(output)

        header = ["path", "language", "lines", "code", "comment", "blank", "extension"]
        if include_functions:
            header += ["functions", "classes", "avg_function_length"]
        header.append("last_modified")
        writer.writerow(header)

        for f in result.text_files:
            row = [
                f.path, f.language or "", f.stats.total,
                f.stats.code, f.stats.comment, f.stats.blank,
                f.extension,
            ]
            if include_functions:
                row += [f.function_count, f.class_count, f"{f.avg_function_length:.2f}"]
            row.append(f.last_modified.strftime("%Y-%m-%dT%H:%M:%SZ") if f.last_modified else "")
            writer.writerow(row)
        return output.getvalue()
