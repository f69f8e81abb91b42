"""Mathematical utilities for scan summaries."""

from .statistics import Statistics

__all__ = ["Statistics"]
