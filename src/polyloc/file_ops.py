"""
File discovery for polyloc.

Inside a git work tree the file list comes from ``git ls-files`` (so
.gitignore rules apply); elsewhere the tree is walked with a fixed set of
excluded directories. In both cases ``.locignore`` patterns and hidden
entries are filtered out.
"""

import fnmatch
import os
import subprocess
from pathlib import Path
from typing import Iterable, Optional

from .exceptions import InvalidPathError
from .logging_config import get_logger

logger = get_logger(__name__)

LOCIGNORE_NAME = ".locignore"

EXCLUDED_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        "target",
        "dist",
        "build",
        "vendor",
        "venv",
        ".venv",
        "__pycache__",
        ".tox",
        ".mypy_cache",
        ".pytest_cache",
        ".idea",
        ".vscode",
        ".next",
        ".gradle",
        "coverage",
    }
)


def should_skip_file(filepath: Path, exclude_patterns: Iterable[str]) -> bool:
    """
    Check if a file should be skipped based on exclusion patterns.

    A pattern matches the path from the right (``*.min.js``, ``gen/*.go``)
    or any single path component (``fixtures``).

    Args:
        filepath: File to check
        exclude_patterns: Glob patterns to exclude

    Returns:
        True if file should be skipped
    """
    for pattern in exclude_patterns:
        if filepath.match(pattern):
            return True
        if any(fnmatch.fnmatch(part, pattern) for part in filepath.parts):
            return True
    return False


def read_ignore_file(root: Path) -> list[str]:
    """Read glob patterns from ``root/.locignore`` (missing file = none)."""
    ignore_file = root / LOCIGNORE_NAME
    try:
        text = ignore_file.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except OSError as e:
        logger.warning(f"Cannot read {ignore_file}: {e}")
        return []
    patterns = []
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            patterns.append(line.rstrip("/"))
    return patterns


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") for part in relative.parts)


def _git_ls_files(root: Path) -> Optional[list[Path]]:
    """Tracked and untracked-but-not-ignored files, or None outside git."""
    try:
        result = subprocess.run(
            ["git", "-C", str(root), "ls-files", "-z", "--cached", "--others", "--exclude-standard"],
            capture_output=True,
            timeout=30,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    names = result.stdout.decode("utf-8", errors="surrogateescape").split("\0")
    return [Path(name) for name in names if name]


def _walk(root: Path, include_hidden: bool) -> list[Path]:
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [
            d for d in dirnames if d not in EXCLUDED_DIRS and (include_hidden or not d.startswith("."))
        ]
        base = Path(dirpath)
        for name in filenames:
            found.append((base / name).relative_to(root))
    return found


def discover_files(
    root: Path,
    include_hidden: bool = False,
    extra_ignores: Iterable[str] = (),
) -> list[Path]:
    """
    List the files to scan under a directory.

    Args:
        root: Directory (or single file) to scan
        include_hidden: Keep files and directories starting with "."
        extra_ignores: Glob patterns excluded on top of ``.locignore``

    Returns:
        Sorted paths, each joined onto ``root``

    Raises:
        InvalidPathError: If root does not exist
    """
    if root.is_file():
        return [root]
    if not root.is_dir():
        raise InvalidPathError(root, "path does not exist")

    relative = _git_ls_files(root)
    if relative is None:
        logger.debug(f"{root} is not a git work tree, walking the filesystem")
        relative = _walk(root, include_hidden)
    else:
        logger.debug(f"git ls-files listed {len(relative)} files")

    patterns = read_ignore_file(root) + list(extra_ignores)
    files = []
    for rel in relative:
        if not include_hidden and _is_hidden(rel):
            continue
        if patterns and should_skip_file(rel, patterns):
            continue
        path = root / rel
        if path.is_file():
            files.append(path)
    return sorted(files)
