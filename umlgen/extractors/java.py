"""Extractor for Java sources."""

from __future__ import annotations

import re
from typing import Iterator, List

from ..logging import get_logger
from ..models import EntityKind, Member
from .base import LanguageExtractor, RawDeclaration
from .utils import (
    NON_TYPE_WORDS,
    find_matching_brace,
    flatten_blocks,
    normalize_params,
    preceded_by_new,
    split_targets,
    strip_comments_and_literals,
    to_visibility,
)

_TYPE_HEADER = re.compile(
    r"(?<![\w.@$-])((?:public|protected|private)\s+)?"
    r"(?:(?:abstract|static|final|sealed|non-sealed|strictfp)\s+)*"
    r"\b(class|interface|record|enum)\s+"
    r"([A-Za-z_$][\w$]*(?:\s*<[^{};()]*?>)?)\s*"
    r"(?:\(([^)]*)\))?\s*"
    r"(?:extends\s+([\w$<>.,?\s]+?))?\s*"
    r"(?:implements\s+([\w$<>.,?\s]+?))?\s*"
    r"(?:permits\s+[\w$<>.,\s]+?)?\s*\{"
)

_ANNOTATION = re.compile(r"@(?!interface\b)[\w.]+(?:\s*\([^)]*\))?")

_LEAD = r"(?<![\w.$<>\[\]?])"
_ACCESS = r"(?:(public|protected|private)\s+)?"
_TYPE = (
    r"(?!(?:class|interface|record|enum)\b)"
    r"([\w$.]+(?:\s*<[^;{}()=]*?>)?(?:\s*\[\s*\])*)"
)
_THROWS = r"(?:throws\s+[\w$.,\s]+?)?\s*"

_METHOD = re.compile(
    _LEAD
    + _ACCESS
    + r"(?:(?:static|final|abstract|synchronized|default|native|strictfp)\s+)*"
    + r"(?:<[^(){};=]*?>\s*)?"
    + _TYPE
    + r"\s+([A-Za-z_$][\w$]*)\s*\(([^)]*)\)\s*"
    + _THROWS
    + r"(?:\{|;)"
)
_CONSTRUCTOR = re.compile(
    _LEAD
    + _ACCESS
    + r"(?:<[^(){};]*?>\s*)?"
    + r"([A-Za-z_$][\w$]*)\s*\(([^)]*)\)\s*"
    + _THROWS
    + r"(?:\{|;)"
)
_FIELD = re.compile(
    _LEAD
    + _ACCESS
    + r"(?:(?:static|final|volatile|transient)\s+)*"
    + _TYPE
    + r"\s+([A-Za-z_$][\w$]*)\s*(?:=\s*[^;]+)?;"
)

_KINDS = {
    "class": "class",
    "interface": "interface",
    "record": "record",
    "enum": "class",
}


class JavaExtractor(LanguageExtractor):
    """Finds classes, interfaces, records and enums in Java code."""

    language = "java"

    def __init__(self) -> None:
        self.logger = get_logger("extractors.java")

    def preprocess(self, text: str) -> str:
        return strip_comments_and_literals(text)

    def scan(self, text: str) -> Iterator[RawDeclaration]:
        position = 0
        while True:
            match = _TYPE_HEADER.search(text, position)
            if match is None:
                return
            kind: EntityKind = _KINDS[match.group(2)]  # type: ignore[assignment]
            raw_name = re.sub(r"\s+", "", match.group(3))
            open_index = match.end() - 1
            close_index = find_matching_brace(text, open_index)
            if close_index == -1:
                self.logger.debug("Skipping %s %s: no closing brace", kind, raw_name)
                position = match.end()
                continue

            yield RawDeclaration(
                kind=kind,
                raw_name=raw_name,
                body=text[open_index + 1 : close_index],
                inherits_from=tuple(split_targets(match.group(5) or "")),
                realizes=tuple(split_targets(match.group(6) or "")),
                record_parameters=(match.group(4) or "") if kind == "record" else "",
            )
            position = close_index + 1

    def extract_members(self, body: str, owner: str) -> List[Member]:
        clean_body = flatten_blocks(_ANNOTATION.sub("", body))
        members: List[Member] = []

        for match in _METHOD.finditer(clean_body):
            access, return_type, name, params = match.groups()
            if name == owner or return_type in NON_TYPE_WORDS or name in NON_TYPE_WORDS:
                continue
            members.append(
                Member(
                    kind="method",
                    name=name,
                    return_type=" ".join(return_type.split()),
                    parameters=normalize_params(params),
                    visibility=to_visibility(access, "package"),
                )
            )

        for match in _CONSTRUCTOR.finditer(clean_body):
            access, name, params = match.groups()
            if name != owner or preceded_by_new(clean_body, match.start(2)):
                continue
            members.append(
                Member(
                    kind="method",
                    name=name,
                    return_type="",
                    parameters=normalize_params(params),
                    visibility=to_visibility(access, "package"),
                )
            )

        captured = {member.name for member in members}
        for match in _FIELD.finditer(clean_body):
            access, declared_type, name = match.groups()
            if name in captured or declared_type in NON_TYPE_WORDS or name in NON_TYPE_WORDS:
                continue
            captured.add(name)
            members.append(
                Member(
                    kind="field",
                    name=name,
                    declared_type=" ".join(declared_type.split()),
                    visibility=to_visibility(access, "package"),
                )
            )

        return members


__all__ = ["JavaExtractor"]
