"""Tests for polyloc.file_ops - file discovery."""

from pathlib import Path

import pytest

from polyloc.exceptions import InvalidPathError
from polyloc.file_ops import discover_files, read_ignore_file, should_skip_file


class TestShouldSkipFile:
    def test_suffix_pattern(self):
        assert should_skip_file(Path("web/app.min.js"), ["*.min.js"])

    def test_component_pattern(self):
        assert should_skip_file(Path("tests/fixtures/a.py"), ["fixtures"])

    def test_relative_glob(self):
        assert should_skip_file(Path("src/gen/api.go"), ["gen/*.go"])

    def test_no_match(self):
        assert not should_skip_file(Path("src/app.py"), ["*.min.js", "fixtures"])


def test_read_ignore_file(tmp_path):
    (tmp_path / ".locignore").write_text("# generated\n\ngen/\n*.min.js\n")
    assert read_ignore_file(tmp_path) == ["gen", "*.min.js"]


def test_read_ignore_file_missing(tmp_path):
    assert read_ignore_file(tmp_path) == []


class TestDiscoverFiles:
    @pytest.fixture
    def tree(self, tmp_path, write_file):
        write_file("src/a.py", "x = 1\n")
        write_file("src/b.min.js", "x\n")
        write_file("node_modules/pkg/index.js", "x\n")
        write_file("build/out.py", "x\n")
        write_file(".hidden/secret.py", "x\n")
        write_file(".env", "A=1\n")
        write_file("gen/skip.py", "x\n")
        write_file(".locignore", "gen/\n")
        return tmp_path

    def test_default_walk(self, tree):
        assert discover_files(tree) == [tree / "src" / "a.py", tree / "src" / "b.min.js"]

    def test_extra_ignores(self, tree):
        assert discover_files(tree, extra_ignores=["*.min.js"]) == [tree / "src" / "a.py"]

    def test_include_hidden(self, tree):
        found = discover_files(tree, include_hidden=True)
        assert tree / ".hidden" / "secret.py" in found
        assert tree / ".env" in found
        assert tree / "node_modules" / "pkg" / "index.js" not in found
        assert tree / "gen" / "skip.py" not in found

    def test_single_file(self, tree):
        target = tree / "src" / "a.py"
        assert discover_files(target) == [target]

    def test_missing_root(self, tmp_path):
        with pytest.raises(InvalidPathError):
            discover_files(tmp_path / "nope")
