"""Extractor for Python sources based on indentation tracking."""

from __future__ import annotations

import keyword
import re
from typing import Iterator, List, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import Member, Visibility
from .base import LanguageExtractor, RawDeclaration
from .utils import indent_width, split_targets

_LITERALS_AND_COMMENTS = re.compile(
    r"(?P<triple>'''.*?'''|\"\"\".*?\"\"\")"
    r"|(?P<string>'(?:[^'\\\n]|\\.)*'|\"(?:[^\"\\\n]|\\.)*\")"
    r"|(?P<comment>#[^\n]*)",
    re.DOTALL,
)

_CLASS_START = re.compile(r"^([ \t]*)class\s+[A-Za-z_]\w*")
_CLASS_HEADER = re.compile(
    r"^([ \t]*)class\s+([A-Za-z_]\w*)\s*(?:\[[^\]]*\])?\s*(?:\((.*)\))?\s*:(.*)$"
)
_DEF_START = re.compile(r"^(?:async\s+)?def\s+[A-Za-z_]\w*")
_DEF_HEADER = re.compile(
    r"^(?:async\s+)?def\s+([A-Za-z_]\w*)\s*(?:\[[^\]]*\])?\s*\((.*)\)\s*(?:->\s*(.+?))?\s*:"
)
_DECORATOR = re.compile(r"^@\s*([\w.]+)")
_CLASS_ATTRIBUTE = re.compile(r"^([A-Za-z_]\w*)\s*:\s*([^=]+?)\s*(?:=.*)?$")
_SELF_ASSIGNMENT = re.compile(r"\bself\.([A-Za-z_]\w*)\s*(?::\s*([^=\n]+?))?\s*=(?!=)")
_LEADING_WS = re.compile(r"^[ \t]*")
_STRING_LITERAL = re.compile(r"'(?:[^'\\\n]|\\.)*'|\"(?:[^\"\\\n]|\\.)*\"")

_PROPERTY_DECORATORS = {"property", "cached_property", "functools.cached_property"}
_RECEIVERS = {"self", "cls"}


class PythonExtractor(LanguageExtractor):
    """Finds classes and their members in Python code."""

    language = "python"

    def __init__(self) -> None:
        self.logger = get_logger("extractors.python")

    def preprocess(self, text: str) -> str:
        def _replace(match: re.Match[str]) -> str:
            kind = match.lastgroup
            if kind == "triple":
                # a docstring-only body must still count as an indented body
                return '""' + "\n" * match.group().count("\n")
            if kind == "comment":
                return ""
            return match.group()

        return _LITERALS_AND_COMMENTS.sub(_replace, text)

    def scan(self, text: str) -> Iterator[RawDeclaration]:
        lines = text.splitlines()
        index = 0
        while index < len(lines):
            if not _CLASS_START.match(lines[index]):
                index += 1
                continue

            header, header_end = _join_logical_line(lines, index)
            match = _CLASS_HEADER.match(header)
            if match is None:
                index += 1
                continue

            indent = indent_width(match.group(1))
            name = match.group(2)
            inline_suite = match.group(4).strip()

            body_lines: List[str] = []
            pointer = header_end + 1
            while pointer < len(lines):
                current = lines[pointer]
                if current.strip() and _indent_of(current) <= indent:
                    break
                body_lines.append(current)
                pointer += 1

            if not any(line.strip() for line in body_lines):
                if not inline_suite:
                    self.logger.debug("Skipping class %s: no indented body", name)
                    index = pointer
                    continue
                body_lines = [" " * (indent + 4) + inline_suite]

            yield RawDeclaration(
                kind="class",
                raw_name=name,
                body="\n".join(body_lines),
                inherits_from=tuple(_split_bases(match.group(3) or "")),
            )
            index = pointer

    def extract_members(self, body: str, owner: str) -> List[Member]:
        lines = body.splitlines()
        member_indent = _member_indent(lines)
        members: List[Member] = []
        attributes: List[Member] = []
        decorators: List[str] = []

        index = 0
        while index < len(lines):
            line = lines[index]
            stripped = line.strip()
            if not stripped or _indent_of(line) != member_indent:
                index += 1
                continue

            decorator = _DECORATOR.match(stripped)
            if decorator:
                decorators.append(decorator.group(1))
                index += 1
                continue

            if _DEF_START.match(stripped):
                header, header_end = _join_logical_line(lines, index)
                member = _build_method(header.strip(), decorators)
                if member is not None:
                    members.append(member)
                decorators = []
                index = header_end + 1
                continue

            decorators = []
            attribute = _CLASS_ATTRIBUTE.match(stripped)
            if attribute and not keyword.iskeyword(attribute.group(1)):
                name = attribute.group(1)
                attributes.append(
                    Member(
                        kind="field",
                        name=name,
                        declared_type=_clean_annotation(attribute.group(2)),
                        visibility=_visibility(name),
                    )
                )
            index += 1

        members.extend(attributes)
        for match in _SELF_ASSIGNMENT.finditer("\n".join(_without_nested_classes(lines))):
            name = match.group(1)
            members.append(
                Member(
                    kind="field",
                    name=name,
                    declared_type=_clean_annotation(match.group(2)),
                    visibility=_visibility(name),
                )
            )
        return members


def _build_method(header: str, decorators: Sequence[str]) -> Optional[Member]:
    match = _DEF_HEADER.match(header)
    if match is None:
        return None
    name, params, annotation = match.groups()
    if any(decorator.endswith((".setter", ".deleter")) for decorator in decorators):
        return None
    return_type = _clean_annotation(annotation)
    if any(decorator in _PROPERTY_DECORATORS for decorator in decorators):
        return Member(
            kind="property",
            name=name,
            declared_type=return_type,
            visibility=_visibility(name),
        )
    if name == "__init__":
        return_type = ""
    return Member(
        kind="method",
        name=name,
        return_type=return_type,
        parameters=_normalize_params(params),
        visibility=_visibility(name),
    )


def _normalize_params(params: str) -> str:
    rendered: List[str] = []
    for param in _split_top_level(_STRING_LITERAL.sub('""', params)):
        param = param.strip()
        if not param or param in {"*", "/"}:
            continue
        name_part = re.sub(r"=.*$", "", param, flags=re.DOTALL).strip()
        name, _, annotation = name_part.partition(":")
        name = name.strip().lstrip("*").strip()
        if not name or name in _RECEIVERS:
            continue
        annotation_text = _clean_annotation(annotation)
        rendered.append(f"{name}: {annotation_text}" if annotation_text else name)
    return ", ".join(rendered)


def _split_top_level(value: str) -> List[str]:
    # parentheses are respected; commas inside [] stay separators, like supertype lists
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in value:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        elif char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def _split_bases(value: str) -> List[str]:
    bases: List[str] = []
    for token in split_targets(value):
        if token == "object" or "=" in token or token.startswith("*"):
            continue
        bases.append(token)
    return bases


def _join_logical_line(lines: Sequence[str], start: int) -> Tuple[str, int]:
    """Join a header whose parentheses span several physical lines."""
    header = lines[start]
    end = start
    while _open_parens(header) > 0 and end + 1 < len(lines):
        end += 1
        header = f"{header} {lines[end].strip()}"
    return header, end


def _open_parens(text: str) -> int:
    unquoted = _STRING_LITERAL.sub('""', text)
    return unquoted.count("(") - unquoted.count(")")


def _without_nested_classes(lines: Sequence[str]) -> List[str]:
    """Drop nested class blocks so their `self.x` fields stay with them."""
    kept: List[str] = []
    nested_indent: Optional[int] = None
    for line in lines:
        if nested_indent is not None:
            if not line.strip() or _indent_of(line) > nested_indent:
                continue
            nested_indent = None
        if _CLASS_START.match(line):
            nested_indent = _indent_of(line)
            continue
        kept.append(line)
    return kept


def _member_indent(lines: Sequence[str]) -> int:
    for line in lines:
        if line.strip():
            return _indent_of(line)
    return 0


def _indent_of(line: str) -> int:
    match = _LEADING_WS.match(line)
    return indent_width(match.group() if match else "")


def _clean_annotation(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = " ".join(value.split()).strip("'\"")
    return cleaned or None


def _visibility(name: str) -> Visibility:
    if name.startswith("__") and name.endswith("__"):
        return "public"
    if name.startswith("_"):
        return "private"
    return "public"


__all__ = ["PythonExtractor"]
