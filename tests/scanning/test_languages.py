"""Tests for polyloc.scanning.languages - the language registry."""

import re

import pytest

from polyloc.scanning.languages import (
    LANGUAGES,
    StructuralFamily,
    all_languages,
    detect_language,
    get_language,
    resolve,
    resolve_extensions,
)


class TestResolve:
    """Names, aliases and extensions all lead to the same spec."""

    @pytest.mark.parametrize("key", [".py", "py", "python", "PY", "Python3", " .PY "])
    def test_python_spellings(self, key):
        assert resolve(key).id == "python"

    def test_bare_extension_without_alias(self):
        assert resolve("pyi").id == "python"

    def test_alias(self):
        assert resolve("golang").id == "go"
        assert resolve("c++").id == "cpp"

    def test_unknown_returns_none(self):
        assert resolve("cobol-2077") is None
        assert resolve("") is None


class TestDetectLanguage:
    def test_by_extension(self):
        assert detect_language("src/main.rs").id == "rust"
        assert detect_language("include/util.h").id == "c"

    def test_extension_case_insensitive(self):
        assert detect_language("LEGACY.PY").id == "python"

    def test_by_filename(self):
        assert detect_language("build/Makefile").id == "makefile"
        assert detect_language("Dockerfile").id == "dockerfile"
        assert detect_language("CMakeLists.txt").id == "cmake"

    def test_unknown(self):
        assert detect_language("README") is None
        assert detect_language("notes.xyz") is None

    def test_every_extension_maps_back_to_its_language(self):
        for spec in LANGUAGES.values():
            for ext in spec.extensions:
                assert detect_language(f"file{ext}") is spec


class TestRegistry:
    def test_resolve_extensions(self):
        assert resolve_extensions("py") == [".py", ".pyi", ".pyw"]

    def test_resolve_extensions_unknown_falls_back(self):
        assert resolve_extensions("foo") == [".foo"]
        assert resolve_extensions(".Foo") == [".foo"]

    def test_all_languages_sorted(self):
        ids = all_languages()
        assert ids == sorted(ids)
        assert len(ids) == len(LANGUAGES)
        assert len(ids) >= 40

    def test_get_language(self):
        assert get_language("python").family is StructuralFamily.INDENT
        with pytest.raises(KeyError):
            get_language("nope")

    def test_families(self):
        assert get_language("rust").family is StructuralFamily.BRACE
        assert get_language("ruby").family is StructuralFamily.OTHER

    def test_extracts_structure(self):
        assert get_language("python").extracts_structure
        assert get_language("ruby").extracts_structure
        assert not get_language("shell").extracts_structure
        assert not get_language("json").extracts_structure

    def test_header_patterns_compile_with_name_group(self):
        for spec in LANGUAGES.values():
            for pattern in spec.function_patterns + spec.class_patterns + spec.struct_patterns:
                assert "name" in re.compile(pattern).groupindex, (spec.id, pattern)

    def test_specs_are_immutable(self):
        with pytest.raises(AttributeError):
            get_language("python").name = "Snake"
