"""Extractor for C# sources."""

from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Optional, Tuple

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

_DIRECTIVE_LINE = re.compile(r"^[ \t]*#[ \t]*\w+.*$", re.MULTILINE)
_RECORD_VARIANT = re.compile(r"\brecord\s+(?:struct|class)\b")
_ATTRIBUTE_LINE = re.compile(r"^\s*\[[^\]]*\]\s*", re.MULTILINE)

_TYPE_HEADER = re.compile(
    r"(?<![\w.])((?:public|protected|internal|private)(?:\s+(?:protected|internal|private))?\s+)?"
    r"(?:(?:static|sealed|abstract|partial|readonly|ref|unsafe|new|file)\s+)*"
    r"\b(class|interface|record|struct)\s+"
    r"([A-Za-z_][\w.]*(?:\s*<[^{};()]*?>)?)\s*"
    r"(?:\(([^)]*)\))?\s*"
    r"(?::\s*([^{;]+?))?\s*"
    r"(?:where\s[^{;]*)?[{;]"
)

_LEAD = r"(?<![\w.<>\[\]?])"
_ACCESS = r"(?:(public|protected|internal|private)(?:\s+(?:protected|internal|private))?\s+)?"
_TYPE = (
    r"(?!(?:class|interface|record|struct|enum|delegate)\b)"
    r"([\w.]+(?:\s*<[^;{}()=]*?>)?(?:\[[,\s]*\])*\??)"
)
# `<T>` or `<TKey, TValue>` after a method name; never spans an initializer
_GENERIC_PARAMETERS = r"(?:<[^(){};=\s]*(?:\s*,\s*[^(){};=\s]*)*>)?"

_PROPERTY = re.compile(
    _LEAD
    + _ACCESS
    + r"(?:(?:static|virtual|override|abstract|sealed|new|required|readonly|unsafe|extern)\s+)*"
    + _TYPE
    + r"\s+([A-Za-z_]\w*)\s*\{[^{}]*\}"
)
_EXPRESSION_PROPERTY = re.compile(
    _LEAD
    + _ACCESS
    + r"(?:(?:static|virtual|override|abstract|sealed|new|readonly|unsafe)\s+)*"
    + _TYPE
    + r"\s+([A-Za-z_]\w*)\s*=>[^;]*;"
)
_METHOD = re.compile(
    _LEAD
    + _ACCESS
    + r"(?:(?:static|virtual|override|abstract|sealed|async|partial|new|extern|unsafe)\s+)*"
    + _TYPE
    + r"\s+([A-Za-z_]\w*)\s*"
    + _GENERIC_PARAMETERS
    + r"\s*\(([^)]*)\)\s*(?:\{|=>|where\b|;)"
)
_CONSTRUCTOR = re.compile(
    _LEAD
    + _ACCESS
    + r"(?:(?:static|extern|unsafe)\s+)*"
    + r"([A-Za-z_]\w*)\s*\(([^)]*)\)\s*(?:\{|:|=>|;)"
)
_FIELD = re.compile(
    _LEAD
    + _ACCESS
    + r"(?:(?:static|readonly|volatile|new|const|event|required|unsafe|fixed)\s+)*"
    + _TYPE
    + r"\s+([A-Za-z_]\w*)\s*(?:=\s*[^;]+)?;"
)

_BASE_ARGUMENTS = re.compile(r"\(.*?\)")
_INTERFACE_NAME = re.compile(r"^I[A-Z]")
_OPERATOR_WORDS = frozenset({"explicit", "implicit", "operator"})

_KINDS = {
    "class": "class",
    "interface": "interface",
    "record": "record",
    "struct": "struct",
}


class CSharpExtractor(LanguageExtractor):
    """Finds classes, interfaces, records and structs in C# code."""

    language = "csharp"

    def __init__(self) -> None:
        self.logger = get_logger("extractors.csharp")

    def preprocess(self, text: str) -> str:
        cleaned = strip_comments_and_literals(text)
        cleaned = _DIRECTIVE_LINE.sub("", cleaned)
        return _RECORD_VARIANT.sub("record", cleaned)

    def scan(self, text: str) -> Iterator[RawDeclaration]:
        position = 0
        while True:
            match = _TYPE_HEADER.search(text, position)
            if match is None:
                return
            kind: EntityKind = _KINDS[match.group(2)]  # type: ignore[assignment]
            raw_name = re.sub(r"\s+", "", match.group(3))
            inherits, realizes = _classify_supertypes(split_targets(match.group(5) or ""))
            open_index = match.end() - 1
            if text[open_index] == ";":
                # only positional records may end at `;`
                if kind == "record" and match.group(4) is not None:
                    yield RawDeclaration(
                        kind=kind,
                        raw_name=raw_name,
                        body="",
                        inherits_from=inherits,
                        realizes=realizes,
                        record_parameters=match.group(4),
                    )
                position = match.end()
                continue


            close_index = find_matching_brace(text, open_index)
            if close_index == -1:
                self.logger.debug("Skipping %s %s: no closing brace", kind, raw_name)
                position = match.end()
                continue

            yield RawDeclaration(
                kind=kind,
                raw_name=raw_name,
                body=text[open_index + 1 : close_index],
                inherits_from=inherits,
                realizes=realizes,
                record_parameters=(match.group(4) or "") if kind == "record" else "",
            )
            position = close_index + 1

    def extract_members(self, body: str, owner: str) -> List[Member]:
        clean_body = flatten_blocks(_ATTRIBUTE_LINE.sub("", body))
        members: List[Member] = []

        for pattern in (_PROPERTY, _EXPRESSION_PROPERTY):
            for access, declared_type, name in _typed_matches(pattern, clean_body):
                members.append(
                    Member(
                        kind="property",
                        name=name,
                        declared_type=declared_type,
                        visibility=to_visibility(access, "internal"),
                    )
                )

        for match in _METHOD.finditer(clean_body):
            access, return_type, name, params = match.groups()
            if name == owner or _is_statement(return_type, name):
                continue
            members.append(
                Member(
                    kind="method",
                    name=name,
                    return_type=_compact(return_type),
                    parameters=normalize_params(params),
                    visibility=to_visibility(access, "internal"),
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
                    visibility=to_visibility(access, "internal"),
                )
            )

        captured = {member.name for member in members}
        for access, declared_type, name in _typed_matches(_FIELD, clean_body):
            if name in captured:
                continue
            captured.add(name)
            members.append(
                Member(
                    kind="field",
                    name=name,
                    declared_type=declared_type,
                    visibility=to_visibility(access, "internal"),
                )
            )

        return members


def _classify_supertypes(tokens: Iterable[str]) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    # C# shares one list for base class and interfaces; the harmonizer corrects guesses later.
    inherits: List[str] = []
    realizes: List[str] = []
    for token in tokens:
        token = _BASE_ARGUMENTS.sub("", token).strip()
        if not token:
            continue
        simple_name = token.split("<", 1)[0].rsplit(".", 1)[-1]
        if _INTERFACE_NAME.match(simple_name) or "<" in token:
            realizes.append(token)
        elif not inherits:
            inherits.append(token)
        else:
            realizes.append(token)
    return tuple(inherits), tuple(realizes)


def _typed_matches(pattern: re.Pattern[str], body: str) -> Iterator[Tuple[Optional[str], str, str]]:
    for match in pattern.finditer(body):
        access, declared_type, name = match.group(1), match.group(2), match.group(3)
        if _is_statement(declared_type, name):
            continue
        yield access, _compact(declared_type), name


def _is_statement(type_text: str, name: str) -> bool:
    words = NON_TYPE_WORDS | _OPERATOR_WORDS
    return type_text in words or name in words


def _compact(type_text: str) -> str:
    return " ".join(type_text.split())


__all__ = ["CSharpExtractor"]
