"""Configuration loading and management for polyloc.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in ScanConfig)
    2. Global config (~/.config/polyloc/config.toml)
    3. Project config (./polyloc.toml)
    4. Explicit config file (--config)
    5. Environment variables (POLYLOC_* prefix)
    6. CLI overrides (passed as kwargs, None means "not given")

Config files use the persisted key names:

    warn_size = 1000
    default_types = ["py", "rs"]
    always_extract_functions = true
    parallel = true
    workers = 4
    timestamp_source = "git"

Example:
    >>> config = load_config(extract_functions=True)
    >>> config.extract_functions
    True
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError, InvalidPathError
from .logging_config import get_logger
from .scanning.languages import resolve

logger = get_logger(__name__)

TimestampSource = Literal["filesystem", "git"]
TIMESTAMP_SOURCES = ("filesystem", "git")

GLOBAL_CONFIG_PATH = Path("~/.config/polyloc/config.toml")
PROJECT_CONFIG_NAME = "polyloc.toml"

# Persisted (file) key -> ScanConfig field
_FILE_KEYS = {
    "warn_size": "warn_size_threshold",
    "default_types": "language_filter",
    "always_extract_functions": "extract_functions",
    "parallel": "parallel",
    "workers": "workers",
    "timestamp_source": "timestamp_source",
}


def normalize_languages(names: Iterable[str]) -> frozenset[str]:
    """Resolve language names, aliases or extensions to registry ids.

    Raises:
        InvalidConfigError: If any name is not registered
    """
    ids = set()
    for name in names:
        spec = resolve(name)
        if spec is None:
            raise InvalidConfigError("language_filter", name, "unknown language")
        ids.add(spec.id)
    return frozenset(ids)


@dataclass(frozen=True)
class ScanConfig:
    """Configuration for one scan.

    Attributes:
        parallel: Analyze files on a thread pool
        language_filter: Registry ids to keep (None = every file)
        extract_functions: Run the structural extractor
        estimate_complexity: Estimate complexity of extracted records
        warn_size_threshold: Code-line count above which a file is oversized
        timestamp_source: "filesystem" (mtime) or "git" (last commit)
        workers: Pool size (None = CPU count)
        parallel_min_files: Below this many files the scan runs sequentially
    """

    parallel: bool = True
    language_filter: Optional[frozenset[str]] = None
    extract_functions: bool = False
    estimate_complexity: bool = False
    warn_size_threshold: Optional[int] = None
    timestamp_source: TimestampSource = "filesystem"
    workers: Optional[int] = None
    parallel_min_files: int = 50

    def __post_init__(self) -> None:
        """Validate and normalize configuration."""
        if self.language_filter is not None:
            names = self.language_filter
            if isinstance(names, str):
                names = [name for name in names.split(",") if name.strip()]
            object.__setattr__(self, "language_filter", normalize_languages(names) or None)

        if self.estimate_complexity and not self.extract_functions:
            raise InvalidConfigError(
                "estimate_complexity", True, "complexity estimation requires function extraction"
            )
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.warn_size_threshold is not None and self.warn_size_threshold < 1:
            raise InvalidConfigError("warn_size_threshold", self.warn_size_threshold, "must be at least 1")
        if self.timestamp_source not in TIMESTAMP_SOURCES:
            raise InvalidConfigError(
                "timestamp_source", self.timestamp_source, f"expected one of {', '.join(TIMESTAMP_SOURCES)}"
            )
        if self.parallel_min_files < 0:
            raise InvalidConfigError("parallel_min_files", self.parallel_min_files, "must be non-negative")

    @property
    def max_workers(self) -> int:
        return self.workers or os.cpu_count() or 1


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> ScanConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). None values
            are ignored so that only options actually given win.

    Returns:
        Validated ScanConfig instance

    Raises:
        InvalidPathError: If the explicit config file does not exist
        ConfigurationError: If a config file cannot be parsed
        InvalidConfigError: If a value is invalid or a key unknown
    """
    merged: dict[str, Any] = {}

    # 1. Global config
    global_config = GLOBAL_CONFIG_PATH.expanduser()
    if global_config.is_file():
        merged.update(_load_config_file(global_config))

    # 2. Project config
    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.is_file():
        merged.update(_load_config_file(project_config))

    # 3. Explicit config file (highest priority from files)
    if config_file is not None:
        if not config_file.is_file():
            raise InvalidPathError(config_file, "config file not found")
        merged.update(_load_config_file(config_file))

    # 4. Environment variables (POLYLOC_* prefix)
    merged.update(_load_env_vars())

    # 5. CLI overrides (highest priority)
    merged.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return ScanConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_config_file(path: Path) -> dict[str, Any]:
    """Read a TOML config file and translate persisted keys to fields."""
    try:
        raw = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}", details={"path": str(path)})

    logger.debug(f"Loaded config from {path}")
    result: dict[str, Any] = {}
    for key, value in raw.items():
        field_name = _FILE_KEYS.get(key)
        if field_name is None:
            raise InvalidConfigError(key, value, f"unknown key in {path}")
        result[field_name] = value
    return result


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from POLYLOC_* environment variables.

    Supported environment variables:
        POLYLOC_PARALLEL: bool (true/false/1/0)
        POLYLOC_LANGUAGE_FILTER: comma-separated languages
        POLYLOC_EXTRACT_FUNCTIONS: bool
        POLYLOC_ESTIMATE_COMPLEXITY: bool
        POLYLOC_WARN_SIZE_THRESHOLD: int
        POLYLOC_TIMESTAMP_SOURCE: filesystem/git
        POLYLOC_WORKERS: int
        POLYLOC_PARALLEL_MIN_FILES: int

    Returns:
        Dict of field_name -> parsed_value for any POLYLOC_* vars found.
    """
    type_hints = get_type_hints(ScanConfig)

    result: dict[str, Any] = {}

    for field_name in ScanConfig.__dataclass_fields__:
        env_key = f"POLYLOC_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Args:
        value: Raw string from environment
        type_hint: Type annotation from dataclass

    Returns:
        Parsed value or None if the type is not supported

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    # Handle Optional[X] which is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]

    origin = getattr(type_hint, "__origin__", None)

    # Collections: comma-separated
    if origin is frozenset or type_hint is frozenset:
        return frozenset(part.strip() for part in value.split(",") if part.strip())

    # Bool: accept true/false/1/0/yes/no
    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    # String (including Literal types like TimestampSource)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
