"""
polyloc - Multi-language line counter

Counts code, comment and blank lines across dozens of languages and,
on request, extracts functions, methods, classes and structs with an
estimated cyclomatic complexity.
"""

__version__ = "1.0.0"

from .config import ScanConfig, load_config
from .core import Scanner, run_scan
from .models import LanguageTotals, ScanResult
from .scanning.models import FileLineStats, FileRecord, FunctionKind, FunctionRecord, Visibility

__all__ = [
    "run_scan",  # Main entry point
    "Scanner",
    "ScanConfig",
    "load_config",
    "ScanResult",
    "LanguageTotals",
    "FileRecord",
    "FileLineStats",
    "FunctionRecord",
    "FunctionKind",
    "Visibility",
]
