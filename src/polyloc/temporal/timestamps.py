"""Last-modified timestamp providers.

The orchestrator treats timestamps as a pluggable collaborator: anything with
a ``lookup(path) -> datetime | None`` method will do. Providers are shared by
every analysis task, so lookup must be safe to call from several threads.
A provider that needs expensive setup also offers ``load()``; the scanner
calls it once before fanning out, so no task waits on another.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Optional, Protocol, Union

from ..logging_config import get_logger
from .git_extractor import GitTimestampExtractor

logger = get_logger(__name__)

PathLike = Union[str, Path]


class TimestampProvider(Protocol):
    def load(self) -> None:
        ...

    def lookup(self, path: PathLike) -> Optional[datetime]:
        ...


class FilesystemTimestamps:
    """Modification time from file metadata, as a UTC datetime."""

    def load(self) -> None:
        pass

    def lookup(self, path: PathLike) -> Optional[datetime]:
        try:
            mtime = Path(path).stat().st_mtime
        except OSError as e:
            logger.debug(f"Cannot stat {path}: {e}")
            return None
        return datetime.fromtimestamp(mtime, tz=timezone.utc)


class GitTimestamps:
    """Time of the newest commit touching each file.

    The whole history is read with a single ``git log`` call in load(). After
    that, lookups are plain dict reads. A lookup before load() loads first.
    Files git knows nothing about (untracked, or outside a repository) get
    None.
    """

    def __init__(self, root: PathLike = "."):
        self.root = Path(root)
        self._lock = Lock()
        self._loaded = False
        self._times: dict[Path, int] = {}

    def load(self) -> None:
        """Read the git history once. Later calls return immediately."""
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return
            times = GitTimestampExtractor(str(self.root)).extract()
            if times is None:
                logger.warning(f"git timestamps unavailable for {self.root}")
            else:
                self._times = times
                logger.debug(f"Loaded git timestamps for {len(times)} paths")
            self._loaded = True

    def lookup(self, path: PathLike) -> Optional[datetime]:
        if not self._loaded:
            self.load()
        stamp = self._times.get(Path(path).resolve())
        if stamp is None:
            return None
        return datetime.fromtimestamp(stamp, tz=timezone.utc)


def get_timestamp_provider(source: str, root: PathLike = ".") -> TimestampProvider:
    """Pick the provider for a configured timestamp source."""
    if source == "git":
        return GitTimestamps(root)
    if source == "filesystem":
        return FilesystemTimestamps()
    raise ValueError(f"Unknown timestamp source: {source}")
