"""Region lexer shared by the classifier, extractor and estimator.

One pass per file over the decoded lines, carrying a small state machine
across line boundaries:

    NORMAL         plain code
    BLOCK_COMMENT  inside /* ... */ (with a nesting counter where allowed)
    DOC            inside a documentation string (Python docstrings)
    STRING         inside a string literal

For every line it reports whether code and/or comment characters were seen
and produces a masked copy of the line with comment text and string contents
replaced by spaces. The masked copy keeps column positions, so header regexes
and brace counting never see tokens that live inside strings or comments.
"""

from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from typing import Iterable, Optional

from .languages import LanguageSpec, StringDelimiter


class Region(IntEnum):
    NORMAL = 0
    BLOCK_COMMENT = 1
    DOC = 2
    STRING = 3


class LineKind(IntEnum):
    CODE = 0
    COMMENT = 1
    BLANK = 2


_LINE = 0
_BLOCK = 1
_DOC = 2
_STRING = 3

# Longest plausible escaped char literal: '\u{10FFFF}'
_MAX_CHAR_LITERAL = 12


@dataclass(frozen=True)
class LexedLine:
    """Lexer output for one physical line.

    Attributes:
        text: Original line without the newline
        masked: Same width as text, comments and string contents blanked
        has_code: Non-whitespace character outside comment/doc regions
        has_comment: Line touches a comment or doc region
        starts_in_region: Line begins inside a region carried over from above
    """

    text: str
    masked: str
    has_code: bool
    has_comment: bool
    starts_in_region: bool = False

    @property
    def kind(self) -> LineKind:
        if self.has_code:
            return LineKind.CODE
        if self.has_comment:
            return LineKind.COMMENT
        return LineKind.BLANK


@lru_cache(maxsize=None)
def _openers(spec: LanguageSpec) -> tuple[tuple[str, int, object], ...]:
    """All region openers of a language, longest first.

    Doc delimiters are listed before string delimiters of the same length so
    that a statement-opening triple quote becomes a doc region.
    """
    tokens: list[tuple[str, int, object]] = []
    tokens.extend((tok, _LINE, None) for tok in spec.line_comments)
    tokens.extend((pair[0], _BLOCK, pair) for pair in spec.block_comments)
    tokens.extend((delim, _DOC, delim) for delim in spec.doc_strings)
    tokens.extend((s.open, _STRING, s) for s in spec.strings)
    return tuple(sorted(tokens, key=lambda t: -len(t[0])))


def _is_char_literal(line: str, i: int) -> bool:
    """True if the quote at ``i`` opens a one-character literal."""
    j = i + 1
    if j >= len(line):
        return False
    if line[j] == "\\":
        close = line.find("'", j + 2)
        return close != -1 and close - i <= _MAX_CHAR_LITERAL
    return j + 1 < len(line) and line[j + 1] == "'"


class RegionLexer:
    """Stateful line-by-line lexer for one file."""

    def __init__(self, spec: LanguageSpec):
        self.spec = spec
        self._tokens = _openers(spec)
        self._first_chars = frozenset(tok[0][0] for tok in self._tokens)
        self.region = Region.NORMAL
        self._depth = 0
        self._block: Optional[tuple[str, str]] = None
        self._doc: Optional[str] = None
        self._string: Optional[StringDelimiter] = None

    def _match_opener(self, line: str, i: int, has_code: bool):
        for token in self._tokens:
            text, kind, payload = token
            if not line.startswith(text, i):
                continue
            if kind == _DOC and has_code:
                continue
            if kind == _LINE and self.spec.comment_needs_space and i > 0 and not line[i - 1].isspace():
                continue
            if kind == _STRING and payload.char_literal and not _is_char_literal(line, i):
                continue
            return token
        return None

    def feed(self, line: str) -> LexedLine:
        """Lex one line (without its newline) and advance the state."""
        starts_in_region = self.region != Region.NORMAL
        has_code = False
        has_comment = self.region in (Region.BLOCK_COMMENT, Region.DOC)
        masked = list(line)
        escaped_eol = False
        n = len(line)
        i = 0

        def blank(start: int, length: int) -> None:
            for k in range(start, min(start + length, n)):
                masked[k] = " "

        while i < n:
            ch = line[i]

            if self.region == Region.BLOCK_COMMENT:
                has_comment = True
                opener, closer = self._block
                if self.spec.nested_comments and line.startswith(opener, i):
                    self._depth += 1
                    blank(i, len(opener))
                    i += len(opener)
                elif line.startswith(closer, i):
                    self._depth -= 1
                    blank(i, len(closer))
                    i += len(closer)
                    if self._depth == 0:
                        self.region = Region.NORMAL
                        self._block = None
                else:
                    masked[i] = " "
                    i += 1
                continue

            if self.region == Region.DOC:
                has_comment = True
                if line.startswith(self._doc, i):
                    blank(i, len(self._doc))
                    i += len(self._doc)
                    self.region = Region.NORMAL
                    self._doc = None
                elif ch == "\\":
                    blank(i, 2)
                    i += 2
                else:
                    masked[i] = " "
                    i += 1
                continue

            if self.region == Region.STRING:
                delim = self._string
                if delim.escapes and ch == "\\":
                    has_code = True
                    escaped_eol = i + 1 >= n
                    blank(i, 2)
                    i += 2
                elif line.startswith(delim.close, i):
                    has_code = True
                    i += len(delim.close)
                    self.region = Region.NORMAL
                    self._string = None
                else:
                    if not ch.isspace():
                        has_code = True
                    masked[i] = " "
                    i += 1
                continue

            if ch.isspace():
                i += 1
                continue
            token = self._match_opener(line, i, has_code) if ch in self._first_chars else None
            if token is None:
                has_code = True
                i += 1
                continue

            text, kind, payload = token
            if kind == _LINE:
                has_comment = True
                blank(i, n - i)
                break
            if kind == _BLOCK:
                has_comment = True
                self.region = Region.BLOCK_COMMENT
                self._block = payload
                self._depth = 1
                blank(i, len(text))
            elif kind == _DOC:
                has_comment = True
                self.region = Region.DOC
                self._doc = payload
                blank(i, len(text))
            else:
                has_code = True
                self.region = Region.STRING
                self._string = payload
            i += len(text)

        # Single-line strings end with the line unless the newline is escaped.
        if self.region == Region.STRING and not self._string.multiline and not escaped_eol:
            self.region = Region.NORMAL
            self._string = None

        return LexedLine(
            text=line,
            masked="".join(masked),
            has_code=has_code,
            has_comment=has_comment,
            starts_in_region=starts_in_region,
        )


def lex_lines(lines: Iterable[str], spec: LanguageSpec) -> list[LexedLine]:
    """Lex a sequence of lines with a fresh lexer."""
    lexer = RegionLexer(spec)
    return [lexer.feed(line) for line in lines]


def split_lines(text: str) -> list[str]:
    """Split text into physical lines.

    ``\\r\\n`` is normalised, a trailing newline does not start a new line and
    an unterminated final line still counts.
    """
    if not text:
        return []
    lines = text.replace("\r\n", "\n").split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def mask_text(text: str, spec: LanguageSpec) -> str:
    """Return text with comments and string contents blanked."""
    return "\n".join(line.masked for line in lex_lines(split_lines(text), spec))
