"""Tests for polyloc.analysis - the function summary."""

import pytest

from polyloc.analysis import COMPLEXITY_WARNING, summarize_functions
from polyloc.models import ScanResult
from polyloc.scanning.models import FileLineStats, FileRecord, FunctionKind, FunctionRecord


def fn(name, path, start, length, complexity=None, kind=FunctionKind.FUNCTION, **kwargs):
    return FunctionRecord(
        name=name,
        kind=kind,
        path=path,
        start_line=start,
        end_line=start + length - 1,
        complexity=complexity,
        **kwargs,
    )


def result_with(*files):
    records = [
        FileRecord(path=path, language="python", stats=FileLineStats(total=100, code=100), functions=tuple(fns))
        for path, fns in files
    ]
    return ScanResult.build(records, [], function_extraction_enabled=True, complexity_enabled=True)


@pytest.fixture
def result():
    return result_with(
        (
            "a.py",
            [
                fn("A", "a.py", 1, 40, complexity=1, kind=FunctionKind.CLASS),
                fn("small", "a.py", 2, 5, complexity=2, has_docstring=True),
                fn("branchy", "a.py", 10, 10, complexity=14, is_async=True),
            ],
        ),
        (
            "b.py",
            [
                fn("huge", "b.py", 1, 200, complexity=25),
                fn("tiny", "b.py", 300, 5, complexity=1, has_docstring=True),
                fn("mid", "b.py", 400, 6, complexity=3),
            ],
        ),
    )


class TestSummary:
    def test_counts(self, result):
        summary = summarize_functions(result)
        assert summary.function_count == 5
        assert summary.class_count == 1
        assert summary.async_count == 1
        assert summary.documented_count == 2
        assert summary.documented_ratio == pytest.approx(0.4)

    def test_lengths(self, result):
        summary = summarize_functions(result)
        assert summary.median_length == 6.0
        assert summary.mean_length == pytest.approx((5 + 10 + 200 + 5 + 6) / 5)

    def test_complexity(self, result):
        summary = summarize_functions(result)
        assert summary.median_complexity == 3.0
        assert summary.mean_complexity == pytest.approx((2 + 14 + 25 + 1 + 3) / 5)
        assert summary.p90_complexity > 14

    def test_rankings(self, result):
        summary = summarize_functions(result, top=2)
        assert [f.name for f in summary.largest] == ["huge", "branchy"]
        assert [f.name for f in summary.most_complex] == ["huge", "branchy"]
        assert all(f.complexity > COMPLEXITY_WARNING for f in summary.most_complex)

    def test_length_outliers(self, result):
        summary = summarize_functions(result)
        assert [f.name for f in summary.length_outliers] == ["huge"]

    def test_files_by_function_count(self, result):
        summary = summarize_functions(result)
        assert summary.files_by_function_count == (("b.py", 3), ("a.py", 2))

    def test_ties_broken_by_location(self):
        result = result_with(("z.py", [fn("z", "z.py", 1, 5)]), ("a.py", [fn("a", "a.py", 1, 5)]))
        assert [f.name for f in summarize_functions(result).largest] == ["a", "z"]


def test_empty_result():
    summary = summarize_functions(ScanResult.build([], []))
    assert summary.function_count == 0
    assert summary.documented_ratio == 0.0
    assert summary.mean_complexity is None
    assert summary.p90_complexity is None
    assert summary.largest == ()


def test_without_complexity():
    result = result_with(("a.py", [fn("f", "a.py", 1, 3)]))
    summary = summarize_functions(result)
    assert summary.mean_length == 3.0
    assert summary.median_complexity is None
    assert summary.most_complex == ()
