"""JSON Lines formatter for polyloc: one file object per line."""

import json
from typing import Optional

from ..analysis import FunctionSummary
from ..models import ScanResult
from .base import BaseFormatter, file_to_dict


class JsonlFormatter(BaseFormatter):
    """Render each text file as a standalone JSON object."""

    def render(self, result: ScanResult, summary: Optional[FunctionSummary] = None) -> None:
        print(self.format(result, summary), end="")

    def format(self, result: ScanResult, summary: Optional[FunctionSummary] = None) -> str:
        lines = [
            json.dumps(file_to_dict(f, result.function_extraction_enabled)) + "\n"
            for f in result.text_files
        ]
        return "".join(lines)
