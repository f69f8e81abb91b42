"""Boundary finders for the three structural families.

All finders work on masked lines (see ``lexer``), so delimiters inside
strings and comments are invisible to them. Line and column indices are
0-based. A finder returns None when the boundary does not exist within the
text; the caller decides whether that means "declaration only" or
"truncated at end of file".
"""

import re
from typing import Optional, Sequence

from .lexer import LexedLine

# Lines searched for the opening brace after a header.
BRACE_LOOKAHEAD = 6
# Physical lines a parenthesised indentation-family header may span.
HEADER_MAX_LINES = 20

_OPEN_PARENS = "(["
_CLOSE_PARENS = ")]"


def _next_significant(masked: Sequence[str], line: int, col: int, stop: int) -> str:
    """First non-space character at or after (line, col), or empty string."""
    for j in range(line, stop):
        rest = masked[j][col:] if j == line else masked[j]
        stripped = rest.lstrip()
        if stripped:
            return stripped[0]
    return ""


def _is_assignment(line: str, k: int) -> bool:
    """True if the "=" at ``k`` is neither part of ==, =>, <=, >= nor !=."""
    nxt = line[k + 1] if k + 1 < len(line) else ""
    prev = line[k - 1] if k > 0 else ""
    return nxt not in ("=", ">") and prev not in ("=", "!", "<", ">")


def find_body_open(
    masked: Sequence[str],
    line: int,
    col: int,
    depth: int = 0,
    lookahead: int = BRACE_LOOKAHEAD,
) -> Optional[tuple[int, int]]:
    """Locate the "{" opening a brace-delimited body.

    Scanning starts at (line, col) with ``depth`` open parentheses already
    consumed by the header match. Parenthesised text and generic parameter
    lists ("<T = any>") are skipped. A ";" or "}" first means a declaration,
    and so does an expression body ("= expr"), while "= {" still opens a
    block body.

    Returns:
        (line, col) of the brace, or None if this is not a definition
    """
    stop = min(len(masked), line + lookahead)
    angle = 0
    for j in range(line, stop):
        text = masked[j]
        k = col if j == line else 0
        while k < len(text):
            ch = text[k]
            if ch in _OPEN_PARENS:
                depth += 1
            elif ch in _CLOSE_PARENS:
                depth = max(depth - 1, 0)
            elif depth == 0 and ch == "<":
                angle += 1
            elif depth == 0 and ch == ">" and angle and text[k - 1] not in "-=":
                angle -= 1
            elif depth == 0 and angle == 0:
                if ch == "{":
                    return j, k
                if ch in ";}":
                    return None
                if ch == "=" and _is_assignment(text, k):
                    if _next_significant(masked, j, k + 1, stop) != "{":
                        return None
            k += 1
    return None


def find_brace_end(masked: Sequence[str], line: int, col: int) -> Optional[int]:
    """Return the line holding the brace that closes the one at (line, col)."""
    depth = 0
    for j in range(line, len(masked)):
        text = masked[j]
        for ch in text[col:] if j == line else text:
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return j
    return None


def find_header_end(
    masked: Sequence[str],
    line: int,
    col: int,
    terminator: str,
    max_lines: int = HEADER_MAX_LINES,
) -> Optional[tuple[int, int]]:
    """Locate the terminator (":" or "=") closing an indentation-family header.

    The terminator only counts outside brackets. A header continues onto the
    next physical line while brackets are open or the line ends with a
    backslash.

    Returns:
        (line, col) just past the terminator, or None for a bare declaration
    """
    depth = 0
    for j in range(line, min(len(masked), line + max_lines)):
        text = masked[j]
        k = col if j == line else 0
        while k < len(text):
            ch = text[k]
            if ch in "([{":
                depth += 1
            elif ch in ")]}":
                depth = max(depth - 1, 0)
            elif depth == 0 and ch == terminator:
                if terminator != "=" or _is_assignment(text, k):
                    return j, k + 1
            k += 1
        if depth == 0 and not text.rstrip().endswith("\\"):
            return None
    return None


def indent_width(text: str) -> int:
    expanded = text.expandtabs(8)
    return len(expanded) - len(expanded.lstrip())


def find_indent_end(lexed: Sequence[LexedLine], header_end: int, base_indent: int) -> int:
    """Last line of an indentation-delimited body.

    The body ends before the first later line that holds code, does not start
    inside a multi-line string or comment, and is indented no deeper than the
    header. Reaching end of file is a normal end.
    """
    for j in range(header_end + 1, len(lexed)):
        current = lexed[j]
        if current.starts_in_region or not current.has_code:
            continue
        if indent_width(current.text) <= base_indent:
            return j - 1
    return len(lexed) - 1


def find_keyword_end(
    masked: Sequence[str],
    line: int,
    openers: "re.Pattern[str]",
    closers: "re.Pattern[str]",
) -> Optional[int]:
    """Return the line where opener keywords are balanced by closers ("end").

    A header whose own line is already balanced (``def f; end``) ends there.
    """
    depth = 0
    for j in range(line, len(masked)):
        text = masked[j]
        depth += sum(1 for _ in openers.finditer(text))
        depth -= sum(1 for _ in closers.finditer(text))
        if depth <= 0:
            return j
    return None
