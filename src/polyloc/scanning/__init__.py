"""Language-aware line classification and structural extraction."""

from .classifier import DecodedText, classify, classify_decoded, decode
from .complexity import estimate
from .extractor import Extraction, StructuralExtractor, extract
from .languages import (
    LANGUAGES,
    LanguageSpec,
    StringDelimiter,
    StructuralFamily,
    all_languages,
    detect_language,
    get_language,
    resolve,
    resolve_extensions,
)
from .lexer import LexedLine, LineKind, RegionLexer, lex_lines, split_lines
from .models import FileLineStats, FileRecord, FunctionKind, FunctionRecord, Visibility

__all__ = [
    # Registry
    "LANGUAGES",
    "LanguageSpec",
    "StringDelimiter",
    "StructuralFamily",
    "all_languages",
    "detect_language",
    "get_language",
    "resolve",
    "resolve_extensions",
    # Lexer
    "LexedLine",
    "LineKind",
    "RegionLexer",
    "lex_lines",
    "split_lines",
    # Classifier
    "DecodedText",
    "classify",
    "classify_decoded",
    "decode",
    # Extraction and complexity
    "Extraction",
    "StructuralExtractor",
    "extract",
    "estimate",
    # Records
    "FileLineStats",
    "FileRecord",
    "FunctionKind",
    "FunctionRecord",
    "Visibility",
]
