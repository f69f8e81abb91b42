"""Line classifier: decode a byte stream and partition its lines.

Decoding order:
  1. Byte-order marks, longest first (UTF-32 before UTF-16 since the
     UTF-32LE mark starts with the UTF-16LE one).
  2. Without a BOM, a NUL byte in the first 8 KiB marks the file binary.
  3. Strict UTF-8. Failure marks the file binary (and undecodable).
  4. Too many control characters in the decoded head marks it binary.

Text files are then lexed once and every line gets exactly one verdict:
code, comment or blank.
"""

from dataclasses import dataclass
from typing import Optional

from .languages import LanguageSpec
from .lexer import LineKind, lex_lines, split_lines
from .models import FileLineStats

SNIFF_BYTES = 8192
SNIFF_CHARS = 8192
CONTROL_RATIO = 0.10

_BOMS = (
    (b"\xff\xfe\x00\x00", "utf-32-le"),
    (b"\x00\x00\xfe\xff", "utf-32-be"),
    (b"\xef\xbb\xbf", "utf-8-sig"),
    (b"\xff\xfe", "utf-16-le"),
    (b"\xfe\xff", "utf-16-be"),
)

# Control characters that legitimately appear in text files.
_TEXT_CONTROLS = frozenset("\t\n\r\f\v\x1b")


@dataclass(frozen=True)
class DecodedText:
    """Result of decoding a byte stream.

    Attributes:
        text: Decoded text, None when binary
        encoding: Codec used, None when binary
        binary: Not classified as text
        undecodable: Binary because decoding failed (reported as an encoding issue)
    """

    text: Optional[str]
    encoding: Optional[str]
    binary: bool = False
    undecodable: bool = False


def _is_control(ch: str) -> bool:
    code = ord(ch)
    if ch in _TEXT_CONTROLS:
        return False
    return code < 0x20 or code == 0x7F or 0x80 <= code < 0xA0


def _looks_binary(text: str) -> bool:
    head = text[:SNIFF_CHARS]
    if not head:
        return False
    controls = sum(1 for ch in head if _is_control(ch))
    return controls / len(head) > CONTROL_RATIO


def decode(data: bytes) -> DecodedText:
    """Decode raw bytes, deciding between text and binary."""
    for bom, codec in _BOMS:
        if data.startswith(bom):
            payload = data if codec == "utf-8-sig" else data[len(bom):]
            try:
                text = payload.decode(codec)
            except UnicodeDecodeError:
                return DecodedText(None, None, binary=True, undecodable=True)
            if _looks_binary(text):
                return DecodedText(None, None, binary=True)
            return DecodedText(text, codec)

    if b"\x00" in data[:SNIFF_BYTES]:
        return DecodedText(None, None, binary=True)

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return DecodedText(None, None, binary=True, undecodable=True)
    if _looks_binary(text):
        return DecodedText(None, None, binary=True)
    return DecodedText(text, "utf-8")


def count_raw_lines(data: bytes) -> int:
    """Newline count plus one for an unterminated final line."""
    if not data:
        return 0
    count = data.count(b"\n")
    if not data.endswith(b"\n"):
        count += 1
    return count


def classify_lines(lines: list[str], spec: Optional[LanguageSpec]) -> FileLineStats:
    """Partition already-decoded lines into code, comment and blank."""
    code = comment = blank = 0
    if spec is None:
        for line in lines:
            if line.strip():
                code += 1
            else:
                blank += 1
    else:
        for lexed in lex_lines(lines, spec):
            kind = lexed.kind
            if kind is LineKind.CODE:
                code += 1
            elif kind is LineKind.COMMENT:
                comment += 1
            else:
                blank += 1
    return FileLineStats(total=len(lines), code=code, comment=comment, blank=blank)


def classify_decoded(decoded: DecodedText, data: bytes, spec: Optional[LanguageSpec]) -> FileLineStats:
    """Classify a byte stream that has already been decoded."""
    if decoded.binary:
        return FileLineStats(total=count_raw_lines(data), binary=True)

    stats = classify_lines(split_lines(decoded.text), spec)
    return FileLineStats(
        total=stats.total,
        code=stats.code,
        comment=stats.comment,
        blank=stats.blank,
        encoding=decoded.encoding,
    )


def classify(data: bytes, spec: Optional[LanguageSpec]) -> FileLineStats:
    """Classify every line of a byte stream.

    Args:
        data: Raw file contents
        spec: Language of the file, None for unrecognized files

    Returns:
        FileLineStats; binary files report only their raw line count
    """
    return classify_decoded(decode(data), data, spec)
