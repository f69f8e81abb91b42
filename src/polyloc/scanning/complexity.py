"""Heuristic cyclomatic complexity.

McCabe's E - N + 2 equals one plus the number of binary decision points of
a single-entry routine, so the estimate is 1 plus a count of decision tokens
in the body. Tokens are matched on masked text, so keywords inside strings
and comments never count.

Each language lists its own tokens (LanguageSpec.decision_keywords and
decision_operators). Languages without a table fall back to their family
default below.
"""

import re
from functools import lru_cache

from .languages import LanguageSpec, StructuralFamily
from .lexer import mask_text

_AND = r"&&"
_OR = r"\|\|"

FAMILY_DEFAULTS: dict[StructuralFamily, tuple[tuple[str, ...], tuple[str, ...]]] = {
    StructuralFamily.BRACE: (
        ("if", "for", "while", "case", "catch"),
        (_AND, _OR, r"(?<=\s)\?(?=\s)"),
    ),
    StructuralFamily.INDENT: (
        ("if", "elif", "for", "while", "except", "case", "and", "or"),
        (),
    ),
    StructuralFamily.OTHER: (
        ("if", "for", "while", "case"),
        (_AND, _OR),
    ),
}


@lru_cache(maxsize=None)
def decision_pattern(spec: LanguageSpec) -> "re.Pattern[str]":
    """Compile the decision-point alternation for a language."""
    keywords, operators = spec.decision_keywords, spec.decision_operators
    if not keywords and not operators:
        keywords, operators = FAMILY_DEFAULTS[spec.family]
    parts = []
    if keywords:
        words = "|".join(re.escape(word) for word in sorted(keywords, key=len, reverse=True))
        parts.append(rf"(?<![\w$])(?:{words})(?![\w$])")
    parts.extend(operators)
    return re.compile("|".join(f"(?:{part})" for part in parts))


def count_decision_points(masked: str, spec: LanguageSpec) -> int:
    """Count decision tokens in already-masked text."""
    return sum(1 for _ in decision_pattern(spec).finditer(masked))


def estimate(body: str, spec: LanguageSpec) -> int:
    """Estimate the cyclomatic complexity of a function body.

    Args:
        body: Source text of the function, header included
        spec: Language of the source

    Returns:
        1 plus the number of decision points, never less than 1
    """
    return 1 + count_decision_points(mask_text(body, spec), spec)
