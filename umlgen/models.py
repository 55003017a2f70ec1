"""Core data models shared across umlgen components."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Literal, Optional, Tuple

EntityKind = Literal["class", "interface", "record", "struct"]
MemberKind = Literal["property", "field", "method"]
Visibility = Literal["public", "protected", "internal", "private", "package"]

VISIBILITY_MARKERS: Dict[str, str] = {
    "public": "+",
    "protected": "#",
    "internal": "~",
    "private": "-",
    "package": "~",
}

_GENERIC_ARGUMENTS = re.compile(r"<[^<>]*>|\[[^\[\]]*\]")


def strip_generics(name: str) -> str:
    """Drop generic argument lists so `Repo<T>` and `Repo` share a key."""
    stripped = name
    while True:
        # innermost brackets first so nested arguments collapse completely
        reduced = _GENERIC_ARGUMENTS.sub("", stripped)
        if reduced == stripped:
            return reduced.strip()
        stripped = reduced


def unique(values: Iterable[str]) -> Tuple[str, ...]:
    """Return values as an ordered set, keeping first occurrences."""
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True)
class SourceUnit:
    """One file or snippet handed to the pipeline."""

    name: str
    content: str


@dataclass(frozen=True)
class Member:
    """A field, property or method belonging to an entity."""

    kind: MemberKind
    name: str
    visibility: Visibility
    declared_type: Optional[str] = None
    return_type: Optional[str] = None
    parameters: Optional[str] = None

    @property
    def identity(self) -> Tuple[str, str, Optional[str]]:
        return (self.kind, self.name, self.parameters)

    @property
    def marker(self) -> str:
        return VISIBILITY_MARKERS.get(self.visibility, "~")

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "kind": self.kind,
            "name": self.name,
            "visibility": self.visibility,
        }
        if self.declared_type is not None:
            payload["declaredType"] = self.declared_type
        if self.return_type is not None:
            payload["returnType"] = self.return_type
        if self.parameters is not None:
            payload["parameterList"] = self.parameters
        return payload


@dataclass(frozen=True)
class Entity:
    """A recognised type declaration with its members and supertypes."""

    name: str
    kind: EntityKind
    members: Tuple[Member, ...] = ()
    inherits_from: Tuple[str, ...] = ()
    realizes: Tuple[str, ...] = ()
    origin_unit: Optional[str] = None

    @property
    def normalized_name(self) -> str:
        return strip_generics(self.name)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "kind": self.kind,
            "members": [member.to_dict() for member in self.members],
            "inheritsFrom": list(self.inherits_from),
            "realizes": list(self.realizes),
        }
        if self.origin_unit is not None:
            payload["originUnit"] = self.origin_unit
        return payload


@dataclass(frozen=True)
class DiagramDocument:
    """Serialized diagram text plus the entities it was built from."""

    text: str = ""
    entities: Tuple[Entity, ...] = field(default_factory=tuple)

    def stats(self) -> Dict[str, int]:
        """Summarise entity kinds and member totals for display."""
        counts = {"classes": 0, "interfaces": 0, "records": 0, "structs": 0}
        plural = {
            "class": "classes",
            "interface": "interfaces",
            "record": "records",
            "struct": "structs",
        }
        members = 0
        for entity in self.entities:
            counts[plural[entity.kind]] += 1
            members += len(entity.members)
        counts["members"] = members
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "diagramText": self.text,
            "entities": [entity.to_dict() for entity in self.entities],
        }


__all__ = [
    "DiagramDocument",
    "Entity",
    "EntityKind",
    "Member",
    "MemberKind",
    "SourceUnit",
    "VISIBILITY_MARKERS",
    "Visibility",
    "strip_generics",
    "unique",
]
