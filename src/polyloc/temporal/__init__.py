"""Last-modified timestamps from the filesystem or git history."""

from .git_extractor import GitTimestampExtractor
from .timestamps import FilesystemTimestamps, GitTimestamps, TimestampProvider, get_timestamp_provider

__all__ = [
    "GitTimestampExtractor",
    "FilesystemTimestamps",
    "GitTimestamps",
    "TimestampProvider",
    "get_timestamp_provider",
]
