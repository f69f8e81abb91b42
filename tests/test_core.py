"""Tests for polyloc.core - the scan orchestrator."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from polyloc.config import ScanConfig
from polyloc.core import Scanner, _read_bytes, run_scan
from polyloc.exceptions import ErrorCode, FileAccessError, Severity
from polyloc.models import UNKNOWN_LANGUAGE


def project_files(root):
    return sorted(p for p in root.rglob("*") if p.is_file())


class FixedTimestamps:
    def __init__(self, when):
        self.when = when
        self.calls = []

    def lookup(self, path):
        self.calls.append(Path(path))
        return self.when


class PreloadedTimestamps:
    """Records whether load() ran before each lookup."""

    def __init__(self):
        self.loaded = False
        self.load_calls = 0
        self.seen_loaded = []

    def load(self):
        self.load_calls += 1
        self.loaded = True

    def lookup(self, path):
        self.seen_loaded.append(self.loaded)
        return None


class TestScan:
    def test_totals(self, sample_project):
        result = run_scan(project_files(sample_project), ScanConfig(parallel=False))

        python = result.language_totals["python"]
        assert python.files == 2
        assert python.code == 5
        assert python.comment == 1
        assert python.blank == 2

        rust = result.language_totals["rust"]
        assert (rust.files, rust.code, rust.comment, rust.blank) == (1, 3, 1, 0)

    def test_files_sorted_by_path(self, sample_project):
        result = run_scan(project_files(sample_project), ScanConfig(parallel=False))
        paths = [f.path for f in result.files]
        assert paths == sorted(paths)
        assert len(paths) == 5

    def test_unknown_language_bucket(self, sample_project):
        result = run_scan(project_files(sample_project), ScanConfig(parallel=False))
        unknown = result.language_totals[UNKNOWN_LANGUAGE]
        assert (unknown.files, unknown.code, unknown.blank) == (1, 1, 1)
        (issue,) = [w for w in result.warnings if w.code is ErrorCode.SC105]
        assert issue.path.endswith("notes.xyz")

    def test_binary_file_listed_but_not_counted(self, sample_project):
        result = run_scan(project_files(sample_project), ScanConfig(parallel=False))
        binary = result.get_file(str(sample_project / "data.json"))
        assert binary.stats.binary
        assert result.language_totals["json"].binary_files == 1
        assert result.language_totals["json"].files == 0
        assert result.binary_file_count == 1
        assert result.text_file_count == 4
        assert binary not in result.text_files

    def test_totals_are_sum_of_languages(self, sample_project):
        result = run_scan(project_files(sample_project), ScanConfig(parallel=False))
        for attr in ("files", "code", "comment", "blank", "total"):
            assert getattr(result.totals, attr) == sum(
                getattr(t, attr) for t in result.language_totals.values()
            )

    def test_empty_file_never_oversized(self, sample_project):
        config = ScanConfig(parallel=False, warn_size_threshold=1)
        result = run_scan(project_files(sample_project), config)
        empty = result.get_file(str(sample_project / "empty.py"))
        assert empty.stats.total == 0
        assert not empty.oversized

    def test_oversized_warning(self, sample_project):
        config = ScanConfig(parallel=False, warn_size_threshold=2)
        result = run_scan(project_files(sample_project), config)
        oversized = [w for w in result.warnings if w.code is ErrorCode.SC106]
        assert [Path(w.path).name for w in oversized] == ["app.py", "lib.rs"]
        assert result.get_file(str(sample_project / "app.py")).oversized

    def test_no_extraction_by_default(self, sample_project):
        result = run_scan(project_files(sample_project), ScanConfig(parallel=False))
        assert not result.function_extraction_enabled
        assert result.all_functions() == []


class TestExtraction:
    def test_functions_attached(self, sample_project):
        config = ScanConfig(parallel=False, extract_functions=True, estimate_complexity=True)
        result = run_scan(project_files(sample_project), config)
        assert result.function_extraction_enabled and result.complexity_enabled

        main = result.get_file(str(sample_project / "app.py")).functions[0]
        assert main.name == "main"
        assert main.complexity == 2
        assert main.has_docstring
        assert result.total_functions == 2
        assert result.language_totals["rust"].functions == 1

    def test_ambiguity_does_not_stop_scan(self, write_file, fixtures_dir):
        broken = write_file("src/broken.rs", (fixtures_dir / "polyloc_samples" / "broken.rs").read_text())
        other = write_file("src/other.py", "def f():\n    return 1\n")
        config = ScanConfig(parallel=False, extract_functions=True)
        result = run_scan([broken, other], config)

        assert len(result.files) == 2
        (issue,) = result.warnings
        assert issue.code is ErrorCode.SC104
        assert issue.line == 5
        assert result.get_file(str(other)).functions[0].name == "f"
        assert not result.errors

    def test_function_totals_exclude_classes(self, write_file):
        path = write_file("pkg/shapes.py", "class A:\n    def f(self):\n        return 1\n")
        result = run_scan([path], ScanConfig(parallel=False, extract_functions=True))
        record = result.get_file(str(path))
        assert (record.function_count, record.class_count) == (1, 1)
        assert result.language_totals["python"].functions == result.total_functions == 1


class TestErrors:
    def test_unreadable_file_is_an_error(self, sample_project):
        blocked = sample_project / "lib.rs"

        def reader(path):
            if path == blocked:
                raise PermissionError(13, "Permission denied")
            return path.read_bytes()

        result = run_scan(project_files(sample_project), ScanConfig(parallel=False), reader=reader)
        (error,) = result.errors
        assert error.code is ErrorCode.SC100
        assert error.severity is Severity.ERROR

    def test_default_reader_reports_missing_file(self, tmp_path):
        missing = tmp_path / "gone.py"
        result = run_scan([missing], ScanConfig(parallel=False))
        (error,) = result.errors
        assert error.code is ErrorCode.SC100
        assert error.path == str(missing)
        assert result.files == ()

    def test_default_reader_raises_file_access_error(self, tmp_path):
        with pytest.raises(FileAccessError) as info:
            _read_bytes(tmp_path / "gone.py")
        assert info.value.reason
        assert info.value.details["filepath"].endswith("gone.py")
        assert error.path == str(blocked)
        assert "Permission denied" in error.message
        assert "rust" not in result.language_totals
        with pytest.raises(KeyError):
            result.get_file(str(blocked))

    def test_undecodable_file_warns(self, write_file):
        path = write_file("latin1.py", b"caf\xe9 = 1\n")
        result = run_scan([path], ScanConfig(parallel=False))
        (issue,) = result.warnings
        assert issue.code is ErrorCode.SC101
        assert result.files[0].stats.binary


class TestFilter:
    def test_language_filter(self, sample_project):
        config = ScanConfig(parallel=False, language_filter=["py"])
        result = run_scan(project_files(sample_project), config)
        assert {f.language for f in result.files} == {"python"}
        assert list(result.language_totals) == ["python"]
        assert not result.warnings

    def test_filtered_file_is_skipped_silently(self, sample_project):
        scanner = Scanner(ScanConfig(parallel=False, language_filter="rs"))
        outcome = scanner.analyze_file(sample_project / "app.py")
        assert outcome.record is None
        assert outcome.issues == ()


class TestDeterminism:
    @pytest.fixture
    def many_files(self, write_file, fixtures_dir):
        samples = sorted((fixtures_dir / "polyloc_samples").iterdir())
        paths = []
        for i in range(12):
            for sample in samples:
                paths.append(write_file(f"copy{i}/{sample.name}", sample.read_bytes()))
        paths.append(write_file("misc/unknown.zzz", "x\n"))
        return paths

    def test_parallel_matches_sequential(self, many_files):
        options = dict(extract_functions=True, estimate_complexity=True, warn_size_threshold=5)
        sequential = run_scan(many_files, ScanConfig(parallel=False, **options))
        parallel = run_scan(
            list(reversed(many_files)),
            ScanConfig(parallel=True, workers=4, parallel_min_files=0, **options),
        )
        assert parallel == sequential
        assert parallel.warnings == sequential.warnings

    def test_pool_threshold(self):
        scanner = Scanner(ScanConfig(workers=4, parallel_min_files=10))
        assert not scanner._use_pool(9)
        assert scanner._use_pool(10)
        assert not Scanner(ScanConfig(workers=1, parallel_min_files=0))._use_pool(100)
        assert not Scanner(ScanConfig(parallel=False, workers=4))._use_pool(100)


class TestTimestamps:
    def test_provider_is_consulted(self, sample_project):
        when = datetime(2024, 1, 2, tzinfo=timezone.utc)
        provider = FixedTimestamps(when)
        result = run_scan(project_files(sample_project), ScanConfig(parallel=False), timestamps=provider)
        assert all(f.last_modified == when for f in result.files)
        assert len(provider.calls) == 5

    def test_provider_loaded_once_before_parallel_tasks(self, sample_project):
        provider = PreloadedTimestamps()
        config = ScanConfig(workers=2, parallel_min_files=0)
        run_scan(project_files(sample_project), config, timestamps=provider)
        assert provider.load_calls == 1
        assert provider.seen_loaded == [True] * 5

    def test_provider_without_load_is_accepted(self, sample_project):
        provider = FixedTimestamps(None)
        run_scan(project_files(sample_project), ScanConfig(workers=2, parallel_min_files=0), timestamps=provider)
        assert len(provider.calls) == 5

    def test_filesystem_default(self, sample_project):
        result = run_scan(project_files(sample_project), ScanConfig(parallel=False))
        assert all(f.last_modified is not None for f in result.files)
