"""Shared test fixtures for polyloc tests."""

import os
from pathlib import Path

import pytest

from polyloc import config as config_module

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Directory holding the sample sources."""
    return FIXTURES


@pytest.fixture
def write_file(tmp_path):
    """Write text (or bytes) to a file under tmp_path and return its path."""

    def _write(relative, content=""):
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run with no global config, no project config and no POLYLOC_* variables."""
    monkeypatch.setattr(config_module, "GLOBAL_CONFIG_PATH", tmp_path / "no-such-dir" / "config.toml")
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("POLYLOC_"):
            monkeypatch.delenv(key)
    return tmp_path


@pytest.fixture
def sample_project(tmp_path, write_file):
    """A small mixed-language tree."""
    write_file(
        "project/app.py",
        'import os\n\n\ndef main():\n    """Entry point."""\n    if os.environ:\n        return 1\n    return 0\n',
    )
    write_file(
        "project/lib.rs",
        "// helpers\npub fn add(a: i32, b: i32) -> i32 {\n    a + b\n}\n",
    )
    write_file("project/notes.xyz", "free text\n\n")
    write_file("project/data.json", b'{"a": 1}\x00\x00\x00binary')
    write_file("project/empty.py", "")
    return tmp_path / "project"
