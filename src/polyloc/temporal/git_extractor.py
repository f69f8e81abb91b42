"""Extract last-commit times per file via one git log subprocess."""

import subprocess
from pathlib import Path
from typing import Optional

from ..logging_config import get_logger

logger = get_logger(__name__)

_COMMIT_PREFIX = "commit "


class GitTimestampExtractor:
    """Parse ``git log --name-only`` into a path -> unix time mapping.

    Paths in the mapping are absolute (resolved against the work tree top).
    The newest commit touching a path wins; git lists commits newest first.
    """

    # Maximum git log output size (50MB) to prevent OOM on huge repos
    _MAX_OUTPUT_BYTES = 50 * 1024 * 1024

    def __init__(self, repo_path: str):
        self.repo_path = str(Path(repo_path).resolve())

    def extract(self) -> Optional[dict[Path, int]]:
        """Run git log once. Return None if not a git repo or git fails."""
        toplevel = self._toplevel()
        if toplevel is None:
            logger.info("Not a git repository, falling back to no timestamps")
            return None

        raw = self._run_git_log()
        if raw is None:
            return None

        return self._parse_log(raw, toplevel)

    def _toplevel(self) -> Optional[Path]:
        try:
            result = subprocess.run(
                ["git", "-C", self.repo_path, "rev-parse", "--show-toplevel"],
                capture_output=True,
                text=True,
                timeout=5,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired):
            return None
        if result.returncode != 0:
            return None
        return Path(result.stdout.strip())

    def _run_git_log(self) -> Optional[str]:
        try:
            cmd = [
                "git",
                "-C",
                self.repo_path,
                "log",
                "--format=commit %ct",
                "--name-only",
            ]
            # Use Popen for streaming to avoid loading unbounded output into memory
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
            try:
                chunks = []
                total_size = 0
                stdout = proc.stdout
                if stdout is None:
                    return None
                while True:
                    chunk = stdout.read(1024 * 1024)  # 1MB chunks
                    if not chunk:
                        break
                    total_size += len(chunk)
                    if total_size > self._MAX_OUTPUT_BYTES:
                        logger.warning(
                            "git log output exceeded %dMB limit, truncating",
                            self._MAX_OUTPUT_BYTES // (1024 * 1024),
                        )
                        proc.kill()
                        break
                    chunks.append(chunk)

                proc.wait(timeout=30)
                if proc.returncode != 0 and proc.returncode != -9:  # -9 = killed
                    stderr = proc.stderr.read() if proc.stderr else ""
                    logger.warning("git log failed: %s", stderr.strip())
                    return None
                return "".join(chunks)
            finally:
                if proc.stdout:
                    proc.stdout.close()
                if proc.stderr:
                    proc.stderr.close()
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            logger.warning("git log error: %s", e)
            return None

    @staticmethod
    def _parse_log(raw: str, toplevel: Path) -> dict[Path, int]:
        """Parse "commit <unix time>" headers followed by file names."""
        timestamps: dict[Path, int] = {}
        current: Optional[int] = None

        for line in raw.split("\n"):
            line = line.strip()
            if not line:
                continue
            if line.startswith(_COMMIT_PREFIX):
                try:
                    current = int(line[len(_COMMIT_PREFIX):])
                    continue
                except ValueError:
                    pass
            if current is None:
                continue
            timestamps.setdefault(toplevel / line, current)

        return timestamps
