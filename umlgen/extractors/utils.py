"""Shared helper utilities for extractor implementations."""

from __future__ import annotations

import re
from typing import List, Optional

from ..models import Visibility

# Words that start statements or expressions; they never name a member or its type.
NON_TYPE_WORDS = frozenset(
    {
        "await",
        "break",
        "case",
        "catch",
        "continue",
        "default",
        "do",
        "else",
        "finally",
        "for",
        "foreach",
        "goto",
        "if",
        "lock",
        "nameof",
        "namespace",
        "new",
        "return",
        "sizeof",
        "switch",
        "throw",
        "try",
        "typeof",
        "using",
        "while",
        "yield",
    }
)

_LITERALS_AND_COMMENTS = re.compile(
    r"(?P<block>/\*.*?\*/)"
    r"|(?P<line>//[^\n]*)"
    r'|(?P<text>""".*?""")'
    r'|(?P<verbatim>@"(?:[^"]|"")*")'
    r'|(?P<string>"(?:[^"\\\n]|\\.)*")'
    r"|(?P<char>'(?:[^'\\\n]|\\.)*')",
    re.DOTALL,
)

_DEFAULT_VALUE = re.compile(r"\s*=.*$", re.DOTALL)
_INLINE_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_ANNOTATION = re.compile(r"@[\w.]+(?:\([^)]*\))?")
_ATTRIBUTE = re.compile(r"^\s*\[[^\]]*\]")


def strip_comments_and_literals(text: str) -> str:
    """Remove C-style comments and blank string/char literal contents."""

    def _replace(match: re.Match[str]) -> str:
        kind = match.lastgroup
        if kind == "block":
            # keep line numbering stable
            return "\n" * match.group().count("\n")
        if kind == "line":
            return ""
        if kind == "char":
            return "''"
        if kind == "verbatim":
            return '@""'
        return '""'

    return _LITERALS_AND_COMMENTS.sub(_replace, text)


def find_matching_brace(text: str, start: int) -> int:
    """Return the index of the brace closing the one at `start`, or -1."""
    depth = 0
    for index in range(start, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return -1


def flatten_blocks(body: str) -> str:
    """Empty every nested `{...}` block so only the body's own level remains."""
    pieces: List[str] = []
    depth = 0
    for char in body:
        if char == "{":
            if depth == 0:
                pieces.append(char)
            depth += 1
        elif char == "}":
            if depth == 0:
                continue
            depth -= 1
            if depth == 0:
                pieces.append(char)
        elif depth == 0:
            pieces.append(char)
    return "".join(pieces)


def split_targets(value: str) -> List[str]:
    """Split a supertype clause on commas."""
    return [token.strip() for token in value.split(",") if token.strip()]


def normalize_params(params: str) -> str:
    """Render a brace-language parameter list as `name: type, ...`."""
    if not params.strip():
        return ""

    rendered: List[str] = []
    for param in params.split(","):
        param = param.strip()
        if not param:
            continue
        cleaned = _DEFAULT_VALUE.sub("", param)
        cleaned = _INLINE_COMMENT.sub("", cleaned)
        cleaned = _ANNOTATION.sub("", cleaned)
        cleaned = _ATTRIBUTE.sub("", cleaned).strip()
        segments = cleaned.split()
        if len(segments) <= 1:
            if cleaned:
                rendered.append(cleaned)
            continue
        name = segments.pop()
        rendered.append(f"{name}: {' '.join(segments)}")
    return ", ".join(rendered)


def to_visibility(value: Optional[str], default: Visibility) -> Visibility:
    """Collapse an access-modifier run to a canonical visibility."""
    if not value:
        return default
    normalized = value.lower()
    if "public" in normalized:
        return "public"
    if "private" in normalized:
        return "private"
    if "protected" in normalized:
        return "protected"
    if "internal" in normalized:
        return "internal"
    return default


def indent_width(prefix: str) -> int:
    """Measure leading whitespace, counting a tab as four columns."""
    return len(prefix.replace("\t", "    "))


def preceded_by_new(text: str, index: int) -> bool:
    """True when the identifier at `index` is the target of a `new` expression."""
    window = text[max(0, index - 12) : index]
    return re.search(r"\bnew\s+$", window) is not None


__all__ = [
    "NON_TYPE_WORDS",
    "find_matching_brace",
    "flatten_blocks",
    "indent_width",
    "normalize_params",
    "preceded_by_new",
    "split_targets",
    "strip_comments_and_literals",
    "to_visibility",
]
