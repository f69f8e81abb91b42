"""Language registry: the single source of truth for per-language syntax.

Every language is one LanguageSpec entry in LANGUAGES. Behavior that differs
between languages lives here as data (comment and string delimiters, header
patterns, decision tokens); the lexer, extractor and estimator only dispatch
on the structural family.

Adding a new language:
  1. Add a LanguageSpec entry to LANGUAGES below.
  2. That's it. Lookup tables are rebuilt at import time.

Header patterns run against masked lines (strings and comments blanked) and
must define a ``name`` group. An optional ``recv`` group marks a method
receiver (Go).
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Optional, Union

from .models import Visibility


class StructuralFamily(str, Enum):
    """How function and class bodies are delimited."""

    BRACE = "brace"
    INDENT = "indent"
    OTHER = "other"


@dataclass(frozen=True)
class StringDelimiter:
    """One kind of string literal.

    Attributes:
        open: Opening delimiter
        close: Closing delimiter
        escapes: Backslash escapes the next character
        multiline: Literal may span lines
        char_literal: Opens a string only as a one-character literal ('x', '\\n').
            Used where the quote also appears in other roles (Rust lifetimes).
    """

    open: str
    close: str
    escapes: bool = True
    multiline: bool = False
    char_literal: bool = False


@dataclass(frozen=True)
class LanguageSpec:
    """Everything the scanner needs to know about a language."""

    id: str
    name: str
    extensions: tuple[str, ...]
    aliases: tuple[str, ...] = ()
    filenames: tuple[str, ...] = ()
    family: StructuralFamily = StructuralFamily.OTHER

    # Comment syntax. A line comment runs to end of line.
    line_comments: tuple[str, ...] = ()
    block_comments: tuple[tuple[str, str], ...] = ()
    nested_comments: bool = False
    # Line comment opens only at line start or after whitespace (shell `$#`).
    comment_needs_space: bool = False

    strings: tuple[StringDelimiter, ...] = ()
    # Delimiters that form a documentation region when they open a statement.
    doc_strings: tuple[str, ...] = ()
    doc_comment: Optional[str] = None

    # Structural extraction.
    function_patterns: tuple[str, ...] = ()
    # Method signatures without a keyword; only tried inside a class or struct body.
    method_patterns: tuple[str, ...] = ()
    class_patterns: tuple[str, ...] = ()
    struct_patterns: tuple[str, ...] = ()
    decorator_markers: tuple[str, ...] = ()
    async_keywords: tuple[str, ...] = ()
    # Checked in order against the header text before the name.
    visibility_keywords: tuple[tuple[str, Visibility], ...] = ()
    # "keyword", "underscore", "capitalized" or "star"
    visibility_convention: str = "keyword"
    default_visibility: Visibility = Visibility.UNSPECIFIED
    header_terminator: str = ":"
    block_openers: Optional[str] = None
    block_closers: Optional[str] = None

    # Complexity tokens. Empty means the family default.
    decision_keywords: tuple[str, ...] = ()
    decision_operators: tuple[str, ...] = ()

    @property
    def extracts_structure(self) -> bool:
        """True if the structural extractor has anything to look for."""
        if self.family is StructuralFamily.OTHER and not self.block_openers:
            return False
        return bool(self.function_patterns or self.method_patterns or self.class_patterns or self.struct_patterns)


# ── Re-usable building blocks ──────────────────────────────────────

_C_LINE = ("//",)
_C_BLOCK = (("/*", "*/"),)
_HASH = ("#",)
_HTML_BLOCK = (("<!--", "-->"),)

_DQ = StringDelimiter('"', '"')
_SQ = StringDelimiter("'", "'")
_SQ_RAW = StringDelimiter("'", "'", escapes=False)
_BACKTICK = StringDelimiter("`", "`", multiline=True)
_CHAR = StringDelimiter("'", "'", char_literal=True)
_TRIPLE_DQ = StringDelimiter('"""', '"""', multiline=True)
_TRIPLE_SQ = StringDelimiter("'''", "'''", multiline=True)

_C_DECORATORS = ("@",)

# Words that can precede "(" or "{" without naming a definition.
RESERVED_NAMES = frozenset(
    {
        "if", "else", "elif", "for", "foreach", "while", "do", "switch", "case",
        "catch", "try", "finally", "return", "throw", "new", "delete", "sizeof",
        "typeof", "instanceof", "await", "yield", "with", "match", "when", "loop",
        "guard", "defer", "go", "select", "using", "lock", "fixed", "unless",
        "until", "func", "function", "super", "this", "self", "import", "export",
        "var", "let", "const", "static",
    }
)

# Ternary "?" surrounded by whitespace. "?." "??" "?:" and Swift/Kotlin
# optional types never match.
_TERNARY = r"(?<=\s)\?(?=\s)"
_AND = r"&&"
_OR = r"\|\|"

_C_DECISIONS = ("if", "for", "while", "case", "catch")
_C_OPERATORS = (_AND, _OR, _TERNARY)

_PY_DECISIONS = ("if", "elif", "for", "while", "except", "case", "and", "or")

_RUBY_DECISIONS = ("if", "elsif", "unless", "while", "until", "for", "when", "rescue", "and", "or")

_BRACE_VIS = (
    ("public", Visibility.PUBLIC),
    ("private", Visibility.PRIVATE),
    ("protected", Visibility.PROTECTED),
    ("internal", Visibility.INTERNAL),
)

# C-like signatures: one or more type tokens then name then "(".
_C_SIGNATURE = (
    r"^[ \t]*(?:(?:static|inline|extern|virtual|explicit|constexpr|friend)\s+)*"
    r"(?:[A-Za-z_][\w:<>,]*[\s*&]+)+(?P<name>~?[A-Za-z_][\w:~]*)\s*\("
)
_CPP_QUALIFIED = r"^[ \t]*(?P<name>[A-Za-z_]\w*::~?[A-Za-z_]\w*)\s*\("
_C_AGGREGATE_TAIL = r"(?=\s*(?::[^:]|\{|$))"

_JS_FUNCTION = (
    r"^\s*(?:export\s+(?:default\s+)?)?(?:declare\s+)?(?P<async>async\s+)?function\s*\*?\s*"
    r"(?P<name>[A-Za-z_$][\w$]*)\s*(?:<[^>]*>)?\s*\(",
    r"^\s*(?:export\s+)?(?:const|let|var)\s+(?P<name>[A-Za-z_$][\w$]*)\s*(?::[^=]+)?=\s*"
    r"(?P<async>async\s+)?(?:function\b[^(]*\(|\([^()]*\)\s*(?::[^=]+)?=>|[A-Za-z_$][\w$]*\s*=>)",
)
_JS_METHOD = (
    r"^\s+(?:(?:static|public|private|protected|readonly|override|abstract)\s+)*"
    r"(?P<async>async\s+)?(?:get\s+|set\s+)?\*?(?P<name>#?[A-Za-z_$][\w$]*)\s*(?:<[^>]*>)?\s*\(",
)
_JS_CLASS = (
    r"^\s*(?:export\s+(?:default\s+)?)?(?:declare\s+)?(?:abstract\s+)?class\s+(?P<name>[A-Za-z_$][\w$]*)",
)
_JS_VIS = (
    ("export", Visibility.PUBLIC),
    ("public", Visibility.PUBLIC),
    ("private", Visibility.PRIVATE),
    ("protected", Visibility.PROTECTED),
)

_JAVA_MODIFIERS = r"(?:(?:public|private|protected|static|final|abstract|synchronized|native|default|strictfp|transient)\s+)*"
_JAVA_METHOD = (
    r"^\s*(?:@\w+(?:\([^)]*\))?\s+)*" + _JAVA_MODIFIERS
    + r"(?:<[^>]+>\s+)?[\w$.]+(?:<[^()]*?>)?(?:\[\])*\s+(?P<name>[A-Za-z_$][\w$]*)\s*\("
)
_CSHARP_MODIFIERS = (
    r"(?:(?:public|private|protected|internal|static|virtual|override|abstract|sealed|async|"
    r"extern|unsafe|new|partial|readonly)\s+)*"
)

_RUST_VIS = r"(?P<vis>pub(?:\s*\([^)]*\))?\s+)?"

_RUBY_FUNCTION = (r"^\s*def\s+(?P<name>(?:self\.)?[A-Za-z_]\w*[!?=]?)",)
_RUBY_CLASS = (r"^\s*(?:class|module)\s+(?P<name>[A-Z][\w:]*)",)
_RUBY_OPENERS = r"^\s*(?:def|class|module|if|unless|while|until|case|for|begin)\b|\bdo\b(?:\s*\|[^|]*\|)?\s*$"
_RUBY_CLOSERS = r"(?<![.\w])end\b"


# ── Language definitions ───────────────────────────────────────────

_SPECS = [
    # ── Indentation family ──
    LanguageSpec(
        id="python",
        name="Python",
        extensions=(".py", ".pyi", ".pyw"),
        aliases=("py", "python3"),
        family=StructuralFamily.INDENT,
        line_comments=_HASH,
        strings=(
            _TRIPLE_DQ,
            _TRIPLE_SQ,
            StringDelimiter('"', '"'),
            StringDelimiter("'", "'"),
        ),
        doc_strings=('"""', "'''"),
        function_patterns=(
            r"^(?P<indent>[ \t]*)(?P<async>async\s+)?def\s+(?P<name>[A-Za-z_]\w*)",
        ),
        class_patterns=(r"^(?P<indent>[ \t]*)class\s+(?P<name>[A-Za-z_]\w*)",),
        decorator_markers=_C_DECORATORS,
        async_keywords=("async",),
        visibility_convention="underscore",
        header_terminator=":",
        decision_keywords=_PY_DECISIONS,
    ),
    LanguageSpec(
        id="nim",
        name="Nim",
        extensions=(".nim", ".nims", ".nimble"),
        family=StructuralFamily.INDENT,
        line_comments=_HASH,
        block_comments=(("#[", "]#"),),
        nested_comments=True,
        strings=(StringDelimiter('"""', '"""', escapes=False, multiline=True), _DQ, _CHAR),
        doc_comment="##",
        function_patterns=(
            r"^(?P<indent>[ \t]*)(?:proc|func|method|iterator|template|macro|converter)\s+"
            r"(?P<name>[A-Za-z_]\w*)",
        ),
        async_keywords=("async",),
        visibility_convention="star",
        header_terminator="=",
        decision_keywords=("if", "elif", "when", "for", "while", "except", "and", "or"),
    ),
    # ── Brace family ──
    LanguageSpec(
        id="javascript",
        name="JavaScript",
        extensions=(".js", ".mjs", ".cjs", ".jsx"),
        aliases=("js", "jsx", "node"),
        family=StructuralFamily.BRACE,
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        strings=(_DQ, _SQ, _BACKTICK),
        doc_comment="/**",
        function_patterns=_JS_FUNCTION,
        method_patterns=_JS_METHOD,
        class_patterns=_JS_CLASS,
        decorator_markers=_C_DECORATORS,
        async_keywords=("async",),
        visibility_keywords=_JS_VIS,
        decision_keywords=_C_DECISIONS,
        decision_operators=_C_OPERATORS,
    ),
    LanguageSpec(
        id="typescript",
        name="TypeScript",
        extensions=(".ts", ".tsx", ".mts", ".cts"),
        aliases=("ts", "tsx"),
        family=StructuralFamily.BRACE,
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        strings=(_DQ, _SQ, _BACKTICK),
        doc_comment="/**",
        function_patterns=_JS_FUNCTION,
        method_patterns=_JS_METHOD,
        class_patterns=_JS_CLASS
        + (
            r"^\s*(?:export\s+)?(?:declare\s+)?interface\s+(?P<name>[A-Za-z_$][\w$]*)",
            r"^\s*(?:export\s+)?(?:declare\s+)?(?:const\s+)?enum\s+(?P<name>[A-Za-z_$][\w$]*)",
        ),
        decorator_markers=_C_DECORATORS,
        async_keywords=("async",),
        visibility_keywords=_JS_VIS,
        decision_keywords=_C_DECISIONS,
        decision_operators=_C_OPERATORS,
    ),
    LanguageSpec(
        id="rust",
        name="Rust",
        extensions=(".rs",),
        aliases=("rs",),
        family=StructuralFamily.BRACE,
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        nested_comments=True,
        strings=(
            StringDelimiter('r#"', '"#', escapes=False, multiline=True),
            StringDelimiter('br"', '"', escapes=False, multiline=True),
            StringDelimiter('r"', '"', escapes=False, multiline=True),
            StringDelimiter('"', '"', multiline=True),
            _CHAR,
        ),
        doc_comment="///",
        function_patterns=(
            r"^\s*" + _RUST_VIS + r"(?:default\s+)?(?:const\s+)?(?P<async>async\s+)?(?:const\s+)?"
            r"(?:unsafe\s+)?(?:extern(?:\s+\"[^\"]*\")?\s+)?fn\s+(?P<name>[A-Za-z_]\w*)",
        ),
        class_patterns=(
            r"^\s*" + _RUST_VIS + r"(?:unsafe\s+)?trait\s+(?P<name>[A-Za-z_]\w*)",
            r"^\s*(?:unsafe\s+)?impl(?:\s*<[^>]*>)?\s+(?:[\w:<>, ]+\s+for\s+)?(?P<name>[A-Za-z_][\w:]*)",
        ),
        struct_patterns=(
            r"^\s*" + _RUST_VIS + r"(?:struct|union|enum)\s+(?P<name>[A-Za-z_]\w*)",
        ),
        decorator_markers=("#[",),
        async_keywords=("async",),
        visibility_keywords=(("pub(", Visibility.INTERNAL), ("pub", Visibility.PUBLIC)),
        default_visibility=Visibility.PRIVATE,
        decision_keywords=("if", "for", "while", "loop"),
        # match arms and "?" error propagation
        decision_operators=(_AND, _OR, r"=>", r"\?(?!\w)"),
    ),
    LanguageSpec(
        id="go",
        name="Go",
        extensions=(".go",),
        aliases=("golang",),
        family=StructuralFamily.BRACE,
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        strings=(_DQ, StringDelimiter("`", "`", escapes=False, multiline=True), _CHAR),
        doc_comment="//",
        function_patterns=(
            r"^func\s+(?P<recv>\([^)]*\)\s*)?(?P<name>[A-Za-z_]\w*)",
        ),
        class_patterns=(
            r"^\s*type\s+(?P<name>[A-Za-z_]\w*)(?:\[[^\]]*\])?\s+interface\b",
        ),
        struct_patterns=(
            r"^\s*type\s+(?P<name>[A-Za-z_]\w*)(?:\[[^\]]*\])?\s+struct\b",
        ),
        visibility_convention="capitalized",
        decision_keywords=("if", "for", "case"),
        decision_operators=(_AND, _OR),
    ),
    LanguageSpec(
        id="java",
        name="Java",
        extensions=(".java",),
        family=StructuralFamily.BRACE,
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        strings=(_TRIPLE_DQ, _DQ, _CHAR),
        doc_comment="/**",
        function_patterns=(_JAVA_METHOD,),
        class_patterns=(
            r"^\s*(?:@\w+\s+)*(?:(?:public|private|protected|static|final|abstract|sealed|non-sealed|strictfp)\s+)*"
            r"(?:class|interface|enum|record|@interface)\s+(?P<name>[A-Za-z_]\w*)",
        ),
        decorator_markers=_C_DECORATORS,
        visibility_keywords=_BRACE_VIS[:3],
        decision_keywords=_C_DECISIONS,
        decision_operators=_C_OPERATORS,
    ),
    LanguageSpec(
        id="kotlin",
        name="Kotlin",
        extensions=(".kt", ".kts"),
        aliases=("kt",),
        family=StructuralFamily.BRACE,
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        nested_comments=True,
        strings=(StringDelimiter('"""', '"""', escapes=False, multiline=True), _DQ, _CHAR),
        doc_comment="/**",
        function_patterns=(
            r"^\s*(?:@\w+\s+)*(?:(?:public|private|protected|internal|open|override|abstract|final|"
            r"suspend|inline|operator|infix|tailrec|external|actual|expect)\s+)*fun\s+"
            r"(?:<[^>]+>\s*)?(?:[\w.]+\.)?(?P<name>[A-Za-z_]\w*)\s*\(",
        ),
        class_patterns=(
            r"^\s*(?:(?:public|private|protected|internal|open|abstract|final|data|sealed|enum|inner|"
            r"annotation|value|companion)\s+)*(?:class|interface|object)\s+(?P<name>[A-Za-z_]\w*)",
        ),
        decorator_markers=_C_DECORATORS,
        async_keywords=("suspend",),
        visibility_keywords=_BRACE_VIS,
        default_visibility=Visibility.PUBLIC,
        decision_keywords=("if", "for", "while", "when", "catch"),
        decision_operators=(_AND, _OR, r"\?:"),
    ),
    LanguageSpec(
        id="swift",
        name="Swift",
        extensions=(".swift",),
        family=StructuralFamily.BRACE,
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        nested_comments=True,
        strings=(_TRIPLE_DQ, _DQ),
        doc_comment="///",
        function_patterns=(
            r"^\s*(?:@\w+(?:\([^)]*\))?\s+)*(?:(?:public|private|internal|fileprivate|open|mutating|"
            r"nonmutating|static|class|override|final|convenience|required|dynamic)\s+)*"
            r"func\s+(?P<name>[A-Za-z_]\w*)",
            r"^\s*(?:(?:public|private|internal|fileprivate|open|override|convenience|required)\s+)*"
            r"(?P<name>init|deinit)\b[?!]?\s*(?=[({<])",
        ),
        class_patterns=(
            r"^\s*(?:@\w+\s+)*(?:(?:public|private|internal|fileprivate|open|final)\s+)*"
            r"(?:class|protocol|extension|actor)\s+(?P<name>[A-Za-z_][\w.]*)",
        ),
        struct_patterns=(
            r"^\s*(?:(?:public|private|internal|fileprivate)\s+)*(?:struct|enum)\s+(?P<name>[A-Za-z_]\w*)",
        ),
        decorator_markers=_C_DECORATORS,
        async_keywords=("async",),
        visibility_keywords=(
            ("public", Visibility.PUBLIC),
            ("open", Visibility.PUBLIC),
            ("private", Visibility.PRIVATE),
            ("fileprivate", Visibility.PRIVATE),
            ("internal", Visibility.INTERNAL),
        ),
        default_visibility=Visibility.INTERNAL,
        decision_keywords=("if", "guard", "for", "while", "repeat", "case", "catch"),
        decision_operators=_C_OPERATORS,
    ),
    LanguageSpec(
        id="c",
        name="C",
        extensions=(".c", ".h"),
        family=StructuralFamily.BRACE,
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        strings=(_DQ, _CHAR),
        doc_comment="/**",
        function_patterns=(_C_SIGNATURE,),
        struct_patterns=(
            r"^\s*(?:typedef\s+)?(?:struct|union|enum)\s+(?P<name>[A-Za-z_]\w*)" + _C_AGGREGATE_TAIL,
        ),
        decision_keywords=_C_DECISIONS,
        decision_operators=_C_OPERATORS,
    ),
    LanguageSpec(
        id="cpp",
        name="C++",
        extensions=(".cpp", ".cc", ".cxx", ".c++", ".hpp", ".hh", ".hxx", ".h++", ".ipp"),
        aliases=("c++", "cxx", "cc"),
        family=StructuralFamily.BRACE,
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        strings=(StringDelimiter('R"(', ')"', escapes=False, multiline=True), _DQ, _CHAR),
        doc_comment="///",
        function_patterns=(_C_SIGNATURE, _CPP_QUALIFIED),
        class_patterns=(
            r"^\s*(?:template\s*<[^>]*>\s*)?class\s+(?:[A-Z_]+\s+)?(?P<name>[A-Za-z_]\w*)"
            + r"(?:\s+final)?" + _C_AGGREGATE_TAIL,
        ),
        struct_patterns=(
            r"^\s*(?:template\s*<[^>]*>\s*)?(?:typedef\s+)?(?:struct|union|enum(?:\s+class)?)\s+"
            r"(?P<name>[A-Za-z_]\w*)" + _C_AGGREGATE_TAIL,
        ),
        decorator_markers=("[[",),
        decision_keywords=_C_DECISIONS,
        decision_operators=_C_OPERATORS,
    ),
    LanguageSpec(
        id="csharp",
        name="C#",
        extensions=(".cs", ".csx"),
        aliases=("cs", "c#"),
        family=StructuralFamily.BRACE,
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        strings=(
            StringDelimiter('@"', '"', escapes=False, multiline=True),
            StringDelimiter('$"', '"'),
            _DQ,
            _CHAR,
        ),
        doc_comment="///",
        function_patterns=(
            r"^\s*" + _CSHARP_MODIFIERS
            + r"(?:[\w.]+(?:<[^()]*?>)?(?:\[\])?\??\s+)(?P<name>[A-Za-z_]\w*)\s*(?:<[^>]*>)?\s*\(",
        ),
        class_patterns=(
            r"^\s*" + _CSHARP_MODIFIERS + r"(?:class|interface|record)\s+(?P<name>[A-Za-z_]\w*)",
        ),
        struct_patterns=(
            r"^\s*" + _CSHARP_MODIFIERS + r"(?:struct|enum)\s+(?P<name>[A-Za-z_]\w*)",
        ),
        decorator_markers=("[",),
        async_keywords=("async",),
        visibility_keywords=_BRACE_VIS,
        default_visibility=Visibility.PRIVATE,
        decision_keywords=("if", "for", "foreach", "while", "case", "catch"),
        decision_operators=_C_OPERATORS,
    ),
    LanguageSpec(
        id="scala",
        name="Scala",
        extensions=(".scala", ".sc"),
        family=StructuralFamily.BRACE,
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        nested_comments=True,
        strings=(StringDelimiter('"""', '"""', escapes=False, multiline=True), _DQ, _CHAR),
        doc_comment="/**",
        function_patterns=(
            r"^\s*(?:(?:override|private|protected|final|implicit|inline|sealed|abstract)(?:\[[^\]]*\])?\s+)*"
            r"def\s+(?P<name>[A-Za-z_]\w*)",
        ),
        class_patterns=(
            r"^\s*(?:(?:private|protected|final|sealed|abstract|implicit|case)\s+)*"
            r"(?:class|trait|object)\s+(?P<name>[A-Za-z_]\w*)",
        ),
        decorator_markers=_C_DECORATORS,
        visibility_keywords=_BRACE_VIS[1:3],
        default_visibility=Visibility.PUBLIC,
        decision_keywords=("if", "for", "while", "case", "catch"),
        decision_operators=(_AND, _OR),
    ),
    LanguageSpec(
        id="groovy",
        name="Groovy",
        extensions=(".groovy", ".gradle", ".gvy"),
        family=StructuralFamily.BRACE,
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        strings=(_TRIPLE_DQ, _TRIPLE_SQ, _DQ, _SQ),
        doc_comment="/**",
        function_patterns=(
            r"^\s*" + _JAVA_MODIFIERS + r"def\s+(?P<name>[A-Za-z_]\w*)\s*\(",
        ),
        method_patterns=(_JAVA_METHOD,),
        class_patterns=(
            r"^\s*(?:(?:public|private|protected|static|final|abstract)\s+)*"
            r"(?:class|interface|trait|enum)\s+(?P<name>[A-Za-z_]\w*)",
        ),
        decorator_markers=_C_DECORATORS,
        visibility_keywords=_BRACE_VIS[:3],
        default_visibility=Visibility.PUBLIC,
        decision_keywords=_C_DECISIONS,
        decision_operators=_C_OPERATORS,
    ),
    LanguageSpec(
        id="dart",
        name="Dart",
        extensions=(".dart",),
        family=StructuralFamily.BRACE,
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        nested_comments=True,
        strings=(_TRIPLE_DQ, _TRIPLE_SQ, _DQ, _SQ),
        doc_comment="///",
        function_patterns=(
            r"^\s*(?:@\w+\s+)*(?:(?:static|external|factory)\s+)*"
            r"[\w$]+(?:<[^()]*?>)?\??\s+(?P<name>[A-Za-z_$][\w$]*)\s*(?:<[^>]*>)?\s*\(",
        ),
        class_patterns=(
            r"^\s*(?:(?:abstract|sealed|base|final|interface|mixin)\s+)*"
            r"(?:class|mixin|extension|enum)\s+(?P<name>[A-Za-z_$][\w$]*)",
        ),
        decorator_markers=_C_DECORATORS,
        async_keywords=("async",),
        visibility_convention="underscore",
        decision_keywords=_C_DECISIONS,
        decision_operators=_C_OPERATORS + (r"\?\?",),
    ),
    LanguageSpec(
        id="php",
        name="PHP",
        extensions=(".php", ".phtml"),
        family=StructuralFamily.BRACE,
        line_comments=("//", "#"),
        block_comments=_C_BLOCK,
        strings=(_DQ, _SQ),
        doc_comment="/**",
        function_patterns=(
            r"^\s*(?:(?:public|private|protected|static|abstract|final)\s+)*function\s+&?"
            r"(?P<name>[A-Za-z_]\w*)\s*\(",
        ),
        class_patterns=(
            r"^\s*(?:(?:abstract|final|readonly)\s+)*(?:class|interface|trait|enum)\s+(?P<name>[A-Za-z_]\w*)",
        ),
        decorator_markers=("#[",),
        visibility_keywords=_BRACE_VIS[:3],
        default_visibility=Visibility.PUBLIC,
        decision_keywords=("if", "elseif", "for", "foreach", "while", "case", "catch"),
        decision_operators=_C_OPERATORS,
    ),
    LanguageSpec(
        id="zig",
        name="Zig",
        extensions=(".zig",),
        family=StructuralFamily.BRACE,
        line_comments=_C_LINE,
        strings=(_DQ, _CHAR),
        doc_comment="///",
        function_patterns=(
            r"^\s*(?P<vis>pub\s+)?(?:(?:export|extern|inline|noinline)\s+)*fn\s+(?P<name>[A-Za-z_]\w*)",
        ),
        struct_patterns=(
            r"^\s*(?:pub\s+)?const\s+(?P<name>[A-Za-z_]\w*)\s*=\s*(?:extern\s+|packed\s+)?(?:struct|union|enum)\b",
        ),
        visibility_keywords=(("pub", Visibility.PUBLIC),),
        default_visibility=Visibility.PRIVATE,
        decision_keywords=("if", "for", "while", "catch", "orelse", "try", "and", "or"),
        decision_operators=(r"=>",),
    ),
    # ── Keyword-"end" languages of the other family ──
    LanguageSpec(
        id="ruby",
        name="Ruby",
        extensions=(".rb", ".rake", ".gemspec"),
        aliases=("rb",),
        filenames=("Rakefile", "Gemfile"),
        line_comments=_HASH,
        block_comments=(("=begin", "=end"),),
        strings=(_DQ, _SQ),
        doc_comment="#",
        function_patterns=_RUBY_FUNCTION,
        class_patterns=_RUBY_CLASS,
        default_visibility=Visibility.PUBLIC,
        block_openers=_RUBY_OPENERS,
        block_closers=_RUBY_CLOSERS,
        decision_keywords=_RUBY_DECISIONS,
        decision_operators=_C_OPERATORS,
    ),
    LanguageSpec(
        id="crystal",
        name="Crystal",
        extensions=(".cr",),
        line_comments=_HASH,
        strings=(_DQ, _CHAR),
        doc_comment="#",
        function_patterns=(
            r"^\s*(?:(?:private|protected|abstract)\s+)?def\s+(?P<name>(?:self\.)?[A-Za-z_]\w*[!?=]?)",
        ),
        class_patterns=(
            r"^\s*(?:(?:private|abstract)\s+)?(?:class|module)\s+(?P<name>[A-Z][\w:]*)",
        ),
        struct_patterns=(r"^\s*(?:(?:private|abstract)\s+)?struct\s+(?P<name>[A-Z][\w:]*)",),
        visibility_keywords=(("private", Visibility.PRIVATE), ("protected", Visibility.PROTECTED)),
        default_visibility=Visibility.PUBLIC,
        block_openers=(
            r"^\s*(?:(?:private|protected|abstract)\s+)?(?:def|class|module|struct|if|unless|while|until|case|begin)\b"
            r"|\bdo\b(?:\s*\|[^|]*\|)?\s*$"
        ),
        block_closers=_RUBY_CLOSERS,
        decision_keywords=_RUBY_DECISIONS,
        decision_operators=_C_OPERATORS,
    ),
    LanguageSpec(
        id="lua",
        name="Lua",
        extensions=(".lua",),
        line_comments=("--",),
        block_comments=(("--[[", "]]"),),
        strings=(_DQ, _SQ, StringDelimiter("[[", "]]", escapes=False, multiline=True)),
        doc_comment="---",
        function_patterns=(r"^\s*(?:local\s+)?function\s+(?P<name>[A-Za-z_][\w.:]*)\s*\(",),
        visibility_keywords=(("local", Visibility.PRIVATE),),
        default_visibility=Visibility.PUBLIC,
        block_openers=r"\b(?:function|if|do|repeat)\b",
        block_closers=r"\b(?:end|until)\b",
        decision_keywords=("if", "elseif", "for", "while", "repeat", "and", "or"),
    ),
    LanguageSpec(
        id="elixir",
        name="Elixir",
        extensions=(".ex", ".exs"),
        aliases=("ex", "exs"),
        line_comments=_HASH,
        strings=(_TRIPLE_DQ, _DQ, _SQ),
        doc_comment="@doc",
        function_patterns=(r"^\s*(?:defp?|defmacrop?)\s+(?P<name>[a-z_][\w!?]*)",),
        class_patterns=(r"^\s*(?:defmodule|defprotocol|defimpl)\s+(?P<name>[A-Z][\w.]*)",),
        visibility_keywords=(
            ("defp", Visibility.PRIVATE),
            ("defmacrop", Visibility.PRIVATE),
            ("def", Visibility.PUBLIC),
            ("defmacro", Visibility.PUBLIC),
        ),
        block_openers=r"\bdo\b(?!:)|\bfn\b",
        block_closers=r"(?<![.\w:])end\b",
        decision_keywords=("if", "unless", "case", "cond", "with", "rescue", "catch", "and", "or"),
        decision_operators=(_AND, _OR),
    ),
    # ── Counted only ──
    LanguageSpec(
        id="shell",
        name="Shell",
        extensions=(".sh", ".bash", ".zsh", ".fish", ".ksh"),
        aliases=("sh", "bash", "zsh"),
        filenames=(".bashrc", ".zshrc", ".profile"),
        line_comments=_HASH,
        comment_needs_space=True,
        strings=(
            StringDelimiter('"', '"', multiline=True),
            StringDelimiter("'", "'", escapes=False, multiline=True),
        ),
    ),
    LanguageSpec(
        id="powershell",
        name="PowerShell",
        extensions=(".ps1", ".psm1", ".psd1"),
        aliases=("ps1", "pwsh"),
        line_comments=_HASH,
        block_comments=(("<#", "#>"),),
        comment_needs_space=True,
        strings=(StringDelimiter('"', '"', escapes=False), _SQ_RAW),
    ),
    LanguageSpec(
        id="sql",
        name="SQL",
        extensions=(".sql", ".psql", ".ddl"),
        line_comments=("--",),
        block_comments=_C_BLOCK,
        strings=(StringDelimiter("'", "'", escapes=False, multiline=True), _DQ),
    ),
    LanguageSpec(
        id="html",
        name="HTML",
        extensions=(".html", ".htm", ".xhtml"),
        block_comments=_HTML_BLOCK,
    ),
    LanguageSpec(
        id="xml",
        name="XML",
        extensions=(".xml", ".xsd", ".xsl", ".svg", ".plist"),
        block_comments=_HTML_BLOCK,
    ),
    LanguageSpec(
        id="vue",
        name="Vue",
        extensions=(".vue",),
        line_comments=_C_LINE,
        block_comments=_HTML_BLOCK + _C_BLOCK,
    ),
    LanguageSpec(
        id="svelte",
        name="Svelte",
        extensions=(".svelte",),
        line_comments=_C_LINE,
        block_comments=_HTML_BLOCK + _C_BLOCK,
    ),
    LanguageSpec(
        id="css",
        name="CSS",
        extensions=(".css", ".scss", ".sass", ".less"),
        aliases=("scss",),
        block_comments=_C_BLOCK,
        strings=(_DQ, _SQ),
    ),
    LanguageSpec(
        id="markdown",
        name="Markdown",
        extensions=(".md", ".markdown", ".mdx"),
        aliases=("md",),
        block_comments=_HTML_BLOCK,
    ),
    LanguageSpec(
        id="json",
        name="JSON",
        extensions=(".json", ".jsonc"),
        strings=(_DQ,),
    ),
    LanguageSpec(
        id="yaml",
        name="YAML",
        extensions=(".yaml", ".yml"),
        aliases=("yml",),
        line_comments=_HASH,
        comment_needs_space=True,
        strings=(_DQ, _SQ_RAW),
    ),
    LanguageSpec(
        id="toml",
        name="TOML",
        extensions=(".toml",),
        line_comments=_HASH,
        strings=(
            _TRIPLE_DQ,
            StringDelimiter("'''", "'''", escapes=False, multiline=True),
            _DQ,
            _SQ_RAW,
        ),
    ),
    LanguageSpec(
        id="ini",
        name="INI",
        extensions=(".ini", ".cfg", ".conf", ".properties"),
        line_comments=(";", "#"),
    ),
    LanguageSpec(
        id="haskell",
        name="Haskell",
        extensions=(".hs", ".lhs"),
        aliases=("hs",),
        line_comments=("--",),
        block_comments=(("{-", "-}"),),
        nested_comments=True,
        strings=(_DQ, _CHAR),
    ),
    LanguageSpec(
        id="erlang",
        name="Erlang",
        extensions=(".erl", ".hrl"),
        aliases=("erl",),
        line_comments=("%",),
        strings=(_DQ,),
    ),
    LanguageSpec(
        id="r",
        name="R",
        extensions=(".r", ".rmd"),
        line_comments=_HASH,
        strings=(StringDelimiter('"', '"', multiline=True), StringDelimiter("'", "'", multiline=True)),
    ),
    LanguageSpec(
        id="julia",
        name="Julia",
        extensions=(".jl",),
        aliases=("jl",),
        line_comments=_HASH,
        block_comments=(("#=", "=#"),),
        nested_comments=True,
        strings=(_TRIPLE_DQ, _DQ, _CHAR),
    ),
    LanguageSpec(
        id="perl",
        name="Perl",
        extensions=(".pl", ".pm", ".t"),
        aliases=("pl",),
        line_comments=_HASH,
        block_comments=(("=pod", "=cut"), ("=head1", "=cut")),
        comment_needs_space=True,
        strings=(_DQ, _SQ),
    ),
    LanguageSpec(
        id="ocaml",
        name="OCaml",
        extensions=(".ml", ".mli"),
        aliases=("ml",),
        block_comments=(("(*", "*)"),),
        nested_comments=True,
        strings=(StringDelimiter('"', '"', multiline=True),),
    ),
    LanguageSpec(
        id="clojure",
        name="Clojure",
        extensions=(".clj", ".cljs", ".cljc", ".edn"),
        aliases=("clj",),
        line_comments=(";",),
        strings=(StringDelimiter('"', '"', multiline=True),),
    ),
    LanguageSpec(
        id="protobuf",
        name="Protocol Buffers",
        extensions=(".proto",),
        aliases=("proto",),
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        strings=(_DQ, _SQ),
    ),
    LanguageSpec(
        id="makefile",
        name="Makefile",
        extensions=(".mk", ".mak"),
        aliases=("make",),
        filenames=("Makefile", "makefile", "GNUmakefile"),
        line_comments=_HASH,
    ),
    LanguageSpec(
        id="dockerfile",
        name="Dockerfile",
        extensions=(".dockerfile",),
        aliases=("docker",),
        filenames=("Dockerfile", "Containerfile"),
        line_comments=_HASH,
        strings=(_DQ,),
    ),
    LanguageSpec(
        id="cmake",
        name="CMake",
        extensions=(".cmake",),
        filenames=("CMakeLists.txt",),
        line_comments=_HASH,
        block_comments=(("#[[", "]]"),),
        strings=(StringDelimiter('"', '"', multiline=True),),
    ),
]

LANGUAGES: dict[str, LanguageSpec] = {spec.id: spec for spec in _SPECS}


# Lookup tables (built from LANGUAGES)
_EXTENSION_TO_LANGUAGE: dict[str, LanguageSpec] = {}
_ALIAS_TO_LANGUAGE: dict[str, LanguageSpec] = {}
_FILENAME_TO_LANGUAGE: dict[str, LanguageSpec] = {}
for _spec in _SPECS:
    for _ext in _spec.extensions:
        _EXTENSION_TO_LANGUAGE.setdefault(_ext, _spec)
    for _alias in (_spec.id,) + _spec.aliases:
        _ALIAS_TO_LANGUAGE.setdefault(_alias, _spec)
    for _filename in _spec.filenames:
        _FILENAME_TO_LANGUAGE.setdefault(_filename.lower(), _spec)


def resolve(key: str) -> Optional[LanguageSpec]:
    """Resolve an extension, language id or alias to a LanguageSpec.

    Case-insensitive. ``.py``, ``py`` and ``python`` all resolve to Python.

    Returns:
        The matching spec or None if nothing is registered under that key
    """
    key = key.strip().lower()
    if not key:
        return None
    if key.startswith("."):
        return _EXTENSION_TO_LANGUAGE.get(key)
    spec = _ALIAS_TO_LANGUAGE.get(key)
    if spec is not None:
        return spec
    return _EXTENSION_TO_LANGUAGE.get(f".{key}")


def detect_language(filepath: Union[str, PurePath]) -> Optional[LanguageSpec]:
    """Detect the language of a file from its name, then its extension."""
    path = PurePath(filepath)
    spec = _FILENAME_TO_LANGUAGE.get(path.name.lower())
    if spec is not None:
        return spec
    suffix = path.suffix.lower()
    if not suffix:
        return None
    return _EXTENSION_TO_LANGUAGE.get(suffix)


def resolve_extensions(name: str) -> list[str]:
    """Return the extensions registered for a language or alias.

    Unknown names fall back to the bare extension ``.<name>``.
    """
    spec = resolve(name)
    if spec is None:
        return [f".{name.strip().lower().lstrip('.')}"]
    return list(spec.extensions)


def all_languages() -> list[str]:
    """Return sorted ids of every registered language."""
    return sorted(LANGUAGES)


def get_language(language_id: str) -> LanguageSpec:
    """Look up a language by id. Raises KeyError if unknown."""
    return LANGUAGES[language_id]
