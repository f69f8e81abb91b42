"""Tests for polyloc.scanning.extractor on indentation delimited languages."""

import pytest

from polyloc.scanning.extractor import extract
from polyloc.scanning.languages import get_language
from polyloc.scanning.models import FunctionKind, Visibility

PYTHON = get_language("python")


@pytest.fixture
def shapes(fixtures_dir):
    source = (fixtures_dir / "polyloc_samples" / "shapes.py").read_text(encoding="utf-8")
    records = extract(source, PYTHON, path="shapes.py", estimate_complexity=True).records
    return {r.name: r for r in records}


class TestFunctions:
    def test_docstring_and_branches(self, shapes):
        classify = shapes["classify"]
        assert classify.kind is FunctionKind.FUNCTION
        assert classify.start_line == 4
        assert classify.has_docstring
        # base + if + elif; a plain else adds nothing
        assert classify.complexity == 3
        assert classify.parameters == ("value",)
        assert classify.path == "shapes.py"

    def test_body_runs_until_dedent(self, shapes):
        assert shapes["classify"].end_line >= 11
        assert shapes["classify"].end_line < shapes["Shape"].start_line

    def test_nested_function_keeps_function_kind(self, shapes):
        inner = shapes["inner"]
        assert inner.kind is FunctionKind.FUNCTION
        assert inner.parent_name == "outer"
        assert (inner.start_line, inner.end_line) == (27, 28)
        assert (shapes["outer"].start_line, shapes["outer"].end_line) == (26, 29)


class TestClass:
    def test_class_record(self, shapes):
        shape = shapes["Shape"]
        assert shape.kind is FunctionKind.CLASS
        assert shape.start_line == 14
        assert shape.end_line < shapes["outer"].start_line
        assert shape.complexity == 1

    def test_methods(self, shapes):
        for name in ("__init__", "_hidden", "fetch"):
            assert shapes[name].kind is FunctionKind.METHOD
            assert shapes[name].parent_name == "Shape"

    def test_dunder_is_public_underscore_is_private(self, shapes):
        assert shapes["__init__"].visibility is Visibility.PUBLIC
        assert shapes["_hidden"].visibility is Visibility.PRIVATE
        assert shapes["classify"].visibility is Visibility.PUBLIC

    def test_decorator(self, shapes):
        hidden = shapes["_hidden"]
        assert hidden.has_decorator
        assert hidden.decorators == ("property",)
        assert not shapes["__init__"].has_decorator

    def test_async(self, shapes):
        assert shapes["fetch"].is_async
        assert not shapes["__init__"].is_async

    def test_parameters(self, shapes):
        assert shapes["__init__"].parameters == ("self", "sides")
        assert not shapes["__init__"].has_docstring


class TestHeaders:
    def test_multiline_signature(self):
        source = "def f(\n    a: int,\n    b: dict[str, int] = {},\n) -> int:\n    return a\n"
        (record,) = extract(source, PYTHON).records
        assert record.parameters == ("a: int", "b: dict[str, int] = {}")
        assert (record.start_line, record.end_line) == (1, 5)

    def test_def_inside_string_ignored(self):
        source = 'text = """\ndef fake():\n    pass\n"""\n\ndef real():\n    pass\n'
        assert [r.name for r in extract(source, PYTHON).records] == ["real"]

    def test_body_at_end_of_file(self):
        (record,) = extract("def last():\n    return 1", PYTHON).records
        assert record.end_line == 2
        assert not record.partial

    def test_docstring_after_comment(self):
        source = 'def f():\n    # note\n    """Doc."""\n    return 1\n'
        (record,) = extract(source, PYTHON).records
        assert record.has_docstring

    def test_prefixed_docstring(self):
        (record,) = extract('class C:\n    r"""Raw doc."""\n', PYTHON).records
        assert record.has_docstring

    def test_empty_source(self):
        assert extract("", PYTHON).records == []
