"""Heuristic structural extraction of functions, methods, classes and structs.

One implementation serves every language. Headers are found with the
per-language patterns of the registry; how a body ends depends only on the
structural family:

    BRACE   the "{" after the header and its balancing "}"
    INDENT  the first later code line indented no deeper than the header
    OTHER   opener keywords balanced by "end" (Ruby, Lua, Elixir, Crystal)

Headers are matched against masked lines, so nothing inside a string or a
comment is ever taken for a definition. At most one header is recognized
per physical line.

This is not a parser. Unusual formatting can hide definitions or produce
wrong boundaries; well-formed conventional code extracts reproducibly.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional, Sequence

from ..exceptions import ScanIssue
from ..exceptions.taxonomy import extraction_ambiguity
from ..logging_config import get_logger
from .boundaries import (
    find_body_open,
    find_brace_end,
    find_header_end,
    find_indent_end,
    find_keyword_end,
    indent_width,
)
from .complexity import count_decision_points
from .languages import RESERVED_NAMES, LanguageSpec, StructuralFamily
from .lexer import LexedLine, lex_lines, split_lines
from .models import FunctionKind, FunctionRecord, Visibility

logger = get_logger(__name__)

# A definition name never directly follows these words.
_REJECTED_PREFIX_WORDS = frozenset({"new", "return", "throw", "else", "await", "yield", "case", "goto"})

# Comment lines walked upward when looking for a doc comment.
_DOC_LOOKBACK = 200

_DOCSTRING_PREFIX = r"[rRuUbBfF]{0,2}"


@dataclass
class Extraction:
    """Records of one file plus the boundary problems met on the way."""

    records: list[FunctionRecord] = field(default_factory=list)
    ambiguities: list[ScanIssue] = field(default_factory=list)


@dataclass(frozen=True)
class _Header:
    kind: FunctionKind
    match: "re.Match[str]"
    line: int

    @property
    def name(self) -> str:
        return self.match.group("name")


@lru_cache(maxsize=None)
def _compiled_patterns(spec: LanguageSpec) -> tuple[tuple[FunctionKind, "re.Pattern[str]"], ...]:
    compiled = []
    for kind, patterns in (
        (FunctionKind.CLASS, spec.class_patterns),
        (FunctionKind.STRUCT, spec.struct_patterns),
        (FunctionKind.FUNCTION, spec.function_patterns),
    ):
        compiled.extend((kind, re.compile(pattern)) for pattern in patterns)
    return tuple(compiled)


@lru_cache(maxsize=None)
def _method_patterns(spec: LanguageSpec) -> tuple[tuple[FunctionKind, "re.Pattern[str]"], ...]:
    return tuple((FunctionKind.FUNCTION, re.compile(pattern)) for pattern in spec.method_patterns)


@lru_cache(maxsize=None)
def _block_patterns(spec: LanguageSpec) -> tuple["re.Pattern[str]", "re.Pattern[str]"]:
    return re.compile(spec.block_openers), re.compile(spec.block_closers)


@lru_cache(maxsize=None)
def _keyword_regex(keyword: str) -> "re.Pattern[str]":
    tail = r"(?![\w$])" if keyword[-1].isalnum() or keyword[-1] == "_" else ""
    return re.compile(r"(?<![\w$])" + re.escape(keyword) + tail)


@lru_cache(maxsize=None)
def _docstring_regex(spec: LanguageSpec) -> Optional["re.Pattern[str]"]:
    if not spec.doc_strings:
        return None
    delimiters = "|".join(re.escape(d) for d in spec.doc_strings)
    return re.compile(rf"^{_DOCSTRING_PREFIX}(?:{delimiters})")


def _match_header(spec: LanguageSpec, masked_line: str, line: int, in_class: bool = False) -> Optional[_Header]:
    candidates = _compiled_patterns(spec)
    if in_class:
        candidates += _method_patterns(spec)
    for kind, regex in candidates:
        match = regex.search(masked_line)
        if match is None:
            continue
        name = match.group("name")
        if name in RESERVED_NAMES:
            continue
        preceding = masked_line[: match.start("name")].split()
        if preceding and preceding[-1] in _REJECTED_PREFIX_WORDS:
            continue
        return _Header(kind, match, line)
    return None


def _enclosing(stack: Sequence[FunctionRecord], line: int) -> Optional[FunctionRecord]:
    """Innermost open record whose range contains the 1-based line."""
    for record in reversed(stack):
        if record.start_line <= line <= record.end_line:
            return record
    return None


def _open_depth(text: str) -> int:
    return max(0, sum(text.count(c) for c in "([") - sum(text.count(c) for c in ")]"))


def _matching_paren(text: str, open_idx: int) -> Optional[int]:
    depth = 0
    for k in range(open_idx, len(text)):
        if text[k] == "(":
            depth += 1
        elif text[k] == ")":
            depth -= 1
            if depth == 0:
                return k
    return None


def split_parameters(inner: str) -> tuple[str, ...]:
    """Split a raw parameter list on top-level commas."""
    params = []
    depth = 0
    current: list[str] = []
    for k, ch in enumerate(inner):
        if ch in "([{" or (ch == "<" and not inner[k + 1 : k + 2] == "="):
            depth += 1
        elif ch in ")]}" or (ch == ">" and k > 0 and inner[k - 1] not in "-="):
            depth = max(depth - 1, 0)
        elif ch == "," and depth == 0:
            params.append("".join(current))
            current = []
            continue
        current.append(ch)
    params.append("".join(current))
    cleaned = (" ".join(p.split()) for p in params)
    return tuple(p for p in cleaned if p and p != "void")


def _decorator_name(text: str, marker: str) -> str:
    match = re.match(r"\s*([A-Za-z_][\w.:]*)", text[len(marker):])
    return match.group(1) if match else marker


class StructuralExtractor:
    """Extracts structural records from one language's source text.

    Args:
        spec: Language of the text
        path: Owning file path, copied into every record
        estimate_complexity: Attach a complexity estimate to every record
    """

    def __init__(self, spec: LanguageSpec, path: str = "", estimate_complexity: bool = False):
        self.spec = spec
        self.path = path
        self.estimate_complexity = estimate_complexity

    def extract(self, text: str) -> Extraction:
        result = Extraction()
        if not self.spec.extracts_structure:
            return result

        lines = split_lines(text)
        lexed = lex_lines(lines, self.spec)
        masked = [entry.masked for entry in lexed]
        stack: list[FunctionRecord] = []

        for idx, masked_line in enumerate(masked):
            if not masked_line.strip():
                continue
            scope = _enclosing(stack, idx + 1)
            in_class = scope is not None and scope.is_container
            header = _match_header(self.spec, masked_line, idx, in_class)
            if header is None:
                continue

            header_end = self._find_header_end(header, masked)
            if header_end is None:
                continue

            end = self._find_end(header, header_end, masked, lexed)
            partial = end is None
            if partial:
                logger.debug(f"{self.path}:{idx + 1}: no closing boundary for {header.name}, truncated at end of file")
                end = len(lines) - 1
                result.ambiguities.append(extraction_ambiguity(self.path, header.name, idx + 1))

            record = self._build_record(header, header_end, end, partial, lines, lexed, masked, stack)
            result.records.append(record)
            stack.append(record)

        return result

    def _find_header_end(self, header: _Header, masked: Sequence[str]) -> Optional[tuple[int, int]]:
        """Where the header stops and the body begins, None for declarations."""
        family = self.spec.family
        match = header.match
        if family is StructuralFamily.BRACE:
            return find_body_open(masked, header.line, match.end(), depth=_open_depth(match.group(0)))
        if family is StructuralFamily.INDENT:
            return find_header_end(masked, header.line, match.end(), self.spec.header_terminator)
        return header.line, len(masked[header.line])

    def _find_end(
        self,
        header: _Header,
        header_end: tuple[int, int],
        masked: Sequence[str],
        lexed: Sequence[LexedLine],
    ) -> Optional[int]:
        """Last line of the body, None when no closing boundary exists."""
        family = self.spec.family
        if family is StructuralFamily.INDENT:
            base = indent_width(lexed[header.line].text)
            return find_indent_end(lexed, header_end[0], base)

        if family is StructuralFamily.BRACE:
            return find_brace_end(masked, *header_end)
        openers, closers = _block_patterns(self.spec)
        return find_keyword_end(masked, header.line, openers, closers)

    def _build_record(
        self,
        header: _Header,
        header_end: tuple[int, int],
        end: int,
        partial: bool,
        lines: Sequence[str],
        lexed: Sequence[LexedLine],
        masked: Sequence[str],
        stack: list[FunctionRecord],
    ) -> FunctionRecord:
        spec = self.spec
        match = header.match
        name = header.name
        start_line, end_line = header.line + 1, end + 1

        # Header text from the header line up to the body.
        end_row, end_col = header_end
        masked_header = "\n".join(masked[header.line : end_row] + [masked[end_row][:end_col]])
        raw_header = "\n".join(list(lines[header.line : end_row]) + [lines[end_row][:end_col]])
        prefix = masked[header.line][: match.start("name")]

        kind = header.kind
        if kind is FunctionKind.FUNCTION and match.groupdict().get("recv"):
            kind = FunctionKind.METHOD

        while stack and not stack[-1].start_line <= start_line <= end_line <= stack[-1].end_line:
            stack.pop()
        parent = stack[-1] if stack else None
        if kind is FunctionKind.FUNCTION and parent is not None and parent.is_container:
            kind = FunctionKind.METHOD

        decorators, above = self._decorators(lines, header.line, prefix)
        if spec.family is StructuralFamily.INDENT:
            has_docstring = self._has_body_docstring(lines, header_end)
        else:
            has_docstring = self._has_doc_comment(lines, lexed, above)

        is_async = bool(match.groupdict().get("async")) or any(
            _keyword_regex(keyword).search(masked_header) for keyword in spec.async_keywords
        )

        complexity = None
        if self.estimate_complexity:
            if kind in (FunctionKind.CLASS, FunctionKind.STRUCT):
                complexity = 1
            else:
                complexity = 1 + count_decision_points("\n".join(masked[header.line : end + 1]), spec)

        return FunctionRecord(
            name=name,
            kind=kind,
            path=self.path,
            start_line=start_line,
            end_line=end_line,
            parent=parent,
            is_async=is_async,
            has_decorator=bool(decorators),
            has_docstring=has_docstring,
            visibility=self._visibility(name, prefix, masked_header),
            complexity=complexity,
            partial=partial,
            parameters=self._parameters(raw_header, masked_header, match.end("name")),
            decorators=tuple(decorators),
        )

    def _decorators(self, lines: Sequence[str], line: int, prefix: str) -> tuple[list[str], int]:
        """Decorator names, and the index of the first line above them."""
        markers = self.spec.decorator_markers
        names: list[str] = []
        above = line - 1
        if not markers:
            return names, above
        while above >= 0:
            stripped = lines[above].strip()
            marker = next((m for m in markers if stripped.startswith(m)), None)
            if marker is None:
                break
            names.append(_decorator_name(stripped, marker))
            above -= 1
        names.reverse()
        for marker in markers:
            for found in re.finditer(r"(?:^|\s)" + re.escape(marker) + r"\s*([A-Za-z_][\w.:]*)", prefix):
                names.append(found.group(1))
        return names, above

    def _has_body_docstring(self, lines: Sequence[str], header_end: tuple[int, int]) -> bool:
        """True if the first statement of an indented body is a docstring."""
        regex = _docstring_regex(self.spec)
        marker = self.spec.doc_comment
        row, col = header_end
        candidates = [lines[row][col:]] + list(lines[row + 1 :])
        for candidate in candidates:
            stripped = candidate.strip()
            if not stripped:
                continue
            if marker and stripped.startswith(marker):
                return True
            if any(stripped.startswith(token) for token in self.spec.line_comments):
                continue
            return bool(regex and regex.match(stripped))
        return False

    def _has_doc_comment(self, lines: Sequence[str], lexed: Sequence[LexedLine], above: int) -> bool:
        """True if a doc comment ends right above the header (and its decorators).

        Walks up through comment-only lines (and multi-line doc strings such as
        Elixir heredocs) until the doc marker, code or a blank line.
        """
        marker = self.spec.doc_comment
        if not marker:
            return False
        k = above
        while k >= 0 and above - k < _DOC_LOOKBACK:
            stripped = lines[k].strip()
            if not stripped:
                return False
            if stripped.startswith(marker):
                return True
            if lexed[k].has_code and not lexed[k].starts_in_region:
                return False
            k -= 1
        return False

    def _visibility(self, name: str, prefix: str, masked_header: str) -> Visibility:
        spec = self.spec
        convention = spec.visibility_convention
        bare = re.split(r"[.:]", name)[-1]
        if convention == "underscore":
            if bare.startswith("__") and bare.endswith("__"):
                return Visibility.PUBLIC
            return Visibility.PRIVATE if bare.startswith("_") else Visibility.PUBLIC
        if convention == "capitalized":
            return Visibility.PUBLIC if bare[:1].isupper() else Visibility.PRIVATE
        if convention == "star":
            exported = re.search(re.escape(name) + r"\s*\*", masked_header)
            return Visibility.PUBLIC if exported else Visibility.PRIVATE

        for keyword, visibility in spec.visibility_keywords:
            if _keyword_regex(keyword).search(prefix):
                return visibility
        if bare.startswith("#"):
            return Visibility.PRIVATE
        return spec.default_visibility

    @staticmethod
    def _parameters(raw_header: str, masked_header: str, name_end: int) -> tuple[str, ...]:
        open_idx = masked_header.find("(", name_end)
        if open_idx == -1:
            return ()
        close_idx = _matching_paren(masked_header, open_idx)
        if close_idx is None:
            return ()
        return split_parameters(raw_header[open_idx + 1 : close_idx])


def extract(
    text: str,
    spec: LanguageSpec,
    path: str = "",
    estimate_complexity: bool = False,
) -> Extraction:
    """Extract structural records from source text.

    Args:
        text: Decoded source
        spec: Language of the source
        path: File path copied into every record
        estimate_complexity: Attach complexity estimates

    Returns:
        Extraction with records ordered by start line and any ambiguity issues
    """
    return StructuralExtractor(spec, path, estimate_complexity).extract(text)
