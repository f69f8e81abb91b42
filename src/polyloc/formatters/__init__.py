"""Output formatters for polyloc."""

from pathlib import Path
from typing import Optional

from ..analysis import FunctionSummary
from ..logging_config import get_logger
from ..models import ScanResult
from .base import BaseFormatter
from .csv_formatter import CsvFormatter
from .html_formatter import HtmlFormatter
from .json_formatter import JsonFormatter
from .jsonl_formatter import JsonlFormatter
from .rich_formatter import RichFormatter
from .tree_formatter import TreeFormatter, build_tree

logger = get_logger(__name__)

FORMATTERS = {
    "rich": RichFormatter,
    "json": JsonFormatter,
    "jsonl": JsonlFormatter,
    "csv": CsvFormatter,
    "html": HtmlFormatter,
}

# File suffix -> formatter name for exports
EXPORT_SUFFIXES = {
    ".json": "json",
    ".jsonl": "jsonl",
    ".csv": "csv",
    ".html": "html",
    ".htm": "html",
}


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "rich", "json", "jsonl", "csv", "html"

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    cls = FORMATTERS.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(FORMATTERS))}")
    return cls()


def export(result: ScanResult, path: Path, summary: Optional[FunctionSummary] = None) -> None:
    """Write a scan result to a file, picking the format from its suffix.

    Raises:
        ValueError: If the suffix is not an export format
    """
    path = Path(path)
    name = EXPORT_SUFFIXES.get(path.suffix.lower())
    if name is None:
        raise ValueError(
            f"Unsupported export format {path.suffix or path.name!r}. "
            f"Use {', '.join(sorted(EXPORT_SUFFIXES))}"
        )
    text = get_formatter(name).format(result, summary)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    logger.info(f"Exported {name.upper()} to {path}")


__all__ = [
    "BaseFormatter",
    "RichFormatter",
    "JsonFormatter",
    "JsonlFormatter",
    "CsvFormatter",
    "HtmlFormatter",
    "TreeFormatter",
    "build_tree",
    "FORMATTERS",
    "get_formatter",
    "export",
]
