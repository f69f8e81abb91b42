"""Tests for polyloc.scanning.lexer - comment and string regions."""

from polyloc.scanning.languages import get_language
from polyloc.scanning.lexer import LineKind, lex_lines, mask_text, split_lines

C = get_language("c")
PYTHON = get_language("python")
RUST = get_language("rust")
SHELL = get_language("shell")


def kinds(lines, spec):
    return [entry.kind for entry in lex_lines(lines, spec)]


class TestLineComments:
    def test_trailing_comment_is_code(self):
        (entry,) = lex_lines(["int x = 1; // note"], C)
        assert entry.has_code and entry.has_comment
        assert entry.kind is LineKind.CODE

    def test_masked_keeps_width(self):
        (entry,) = lex_lines(["int x = 1; // note"], C)
        assert len(entry.masked) == len(entry.text)
        assert entry.masked.rstrip() == "int x = 1;"

    def test_comment_marker_inside_string(self):
        (entry,) = lex_lines(['s = "// not a comment"'], PYTHON)
        assert entry.kind is LineKind.CODE
        assert not entry.has_comment
        assert entry.masked == 's = "' + " " * len("// not a comment") + '"'

    def test_shell_hash_needs_space(self):
        (no_comment,) = lex_lines(["echo $# args"], SHELL)
        (comment,) = lex_lines(["echo hi # trailing"], SHELL)
        assert not no_comment.has_comment
        assert comment.has_comment and comment.kind is LineKind.CODE


class TestBlockComments:
    def test_spans_lines(self):
        entries = lex_lines(["/* a", "b", "c */ int x;"], C)
        assert [e.kind for e in entries] == [LineKind.COMMENT, LineKind.COMMENT, LineKind.CODE]
        assert entries[1].starts_in_region
        assert not entries[0].starts_in_region

    def test_two_comments_on_one_line(self):
        assert kinds(["/* a */ /* b */"], C) == [LineKind.COMMENT]

    def test_nested_comments_in_rust(self):
        lines = ["/* outer /* inner */ still", "*/ fn x() {}"]
        assert kinds(lines, RUST) == [LineKind.COMMENT, LineKind.CODE]

    def test_c_comments_do_not_nest(self):
        lines = ["/* outer /* inner */ still"]
        assert kinds(lines, C) == [LineKind.CODE]


class TestStrings:
    def test_python_docstring_is_comment(self):
        lines = ["def f():", '    """Doc', '    more"""', "    return 1"]
        assert kinds(lines, PYTHON) == [LineKind.CODE, LineKind.COMMENT, LineKind.COMMENT, LineKind.CODE]

    def test_assigned_triple_quoted_string_is_code(self):
        assert kinds(['x = """a', 'b"""'], PYTHON) == [LineKind.CODE, LineKind.CODE]

    def test_single_line_string_does_not_leak(self):
        lines = ['x = "unterminated', "# comment"]
        assert kinds(lines, PYTHON) == [LineKind.CODE, LineKind.COMMENT]

    def test_rust_lifetime_is_not_a_string(self):
        lines = ["fn f<'a>(x: &'a str) {", "    // c", "}"]
        assert kinds(lines, RUST) == [LineKind.CODE, LineKind.COMMENT, LineKind.CODE]

    def test_rust_char_literal_is_masked(self):
        (entry,) = lex_lines(["let c = '{';"], RUST)
        assert entry.masked == "let c = ' ';"

    def test_escaped_quote(self):
        (entry,) = lex_lines([r'printf("\"{\"");'], C)
        assert "{" not in entry.masked


class TestSplitLines:
    def test_crlf(self):
        assert split_lines("a\r\nb\r\n") == ["a", "b"]

    def test_unterminated_last_line(self):
        assert split_lines("a\nb") == ["a", "b"]

    def test_empty(self):
        assert split_lines("") == []

    def test_single_newline(self):
        assert split_lines("\n") == [""]


def test_mask_text_blanks_comments():
    masked = mask_text("x = 1  # if while\ny = 'for'\n", PYTHON)
    assert "if" not in masked
    assert "for" not in masked
    assert masked.splitlines()[0].startswith("x = 1")
