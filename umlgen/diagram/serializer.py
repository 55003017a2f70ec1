"""Render harmonized entities as a Mermaid class diagram."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set, Tuple

from ..models import Entity, Member, strip_generics

HEADER = "classDiagram"
INHERITANCE_ARROW = "<|--"
REALIZATION_ARROW = "<|.."

_NON_WORD = re.compile(r"[^\w]")

_STEREOTYPES = {
    "interface": "<<interface>>",
    "record": "<<record>>",
    "struct": "<<struct>>",
}


def sanitize_identifier(name: str) -> str:
    """Strip generics and replace every non-word character with `_`."""
    return _NON_WORD.sub("_", strip_generics(name))


@dataclass
class IdentifierRegistry:
    """Identifier bookkeeping for a single diagram build."""

    ids: Dict[str, str] = field(default_factory=dict)
    counts: Dict[str, int] = field(default_factory=dict)
    declared: Set[str] = field(default_factory=set)
    placeholders: Set[str] = field(default_factory=set)

    def declare(self, entity: Entity) -> str:
        """Assign a collision-free identifier to a declared entity."""
        base = sanitize_identifier(entity.name) or "Type"
        count = self.counts.get(base, 0)
        identifier = base if count == 0 else f"{base}_{count + 1}"
        # a suffixed id may already belong to an entity literally named that way
        while identifier in self.declared:
            count += 1
            identifier = f"{base}_{count + 1}"
        self.counts[base] = count + 1
        self.ids[entity.normalized_name] = identifier
        self.declared.add(identifier)
        return identifier

    def resolve(self, target: str) -> Tuple[str, bool]:
        """Return `(identifier, created)` for a relationship target."""
        key = strip_generics(target)
        existing = self.ids.get(key)
        if existing is not None:
            return existing, False
        identifier = sanitize_identifier(target) or "External"
        self.ids[key] = identifier
        if identifier in self.declared or identifier in self.placeholders:
            # declared entities keep their identifier; the edge reuses it
            return identifier, False
        self.placeholders.add(identifier)
        return identifier, True


def format_member(member: Member) -> str:
    """Render one member line without indentation."""
    if member.kind == "method":
        params = member.parameters or ""
        suffix = f" : {member.return_type}" if member.return_type else ""
        return f"{member.marker}{member.name}({params}){suffix}"
    suffix = f" : {member.declared_type}" if member.declared_type else ""
    return f"{member.marker}{member.name}{suffix}"


def serialize_diagram(
    entities: Sequence[Entity], registry: IdentifierRegistry | None = None
) -> str:
    """Emit entity blocks, then relationship edges, as Mermaid text."""
    if not entities:
        return ""

    registry = registry if registry is not None else IdentifierRegistry()
    lines: List[str] = [HEADER]
    sources: List[str] = []

    for entity in entities:
        identifier = registry.declare(entity)
        sources.append(identifier)
        lines.append(f"    class {identifier} {{")
        stereotype = _STEREOTYPES.get(entity.kind)
        if stereotype:
            lines.append(f"        {stereotype}")
        for member in entity.members:
            lines.append(f"        {format_member(member)}")
        lines.append("    }")

    emitted: Set[Tuple[str, str, str]] = set()
    for entity, source in zip(entities, sources):
        edges = [(target, INHERITANCE_ARROW) for target in entity.inherits_from]
        edges.extend((target, REALIZATION_ARROW) for target in entity.realizes)
        for target, arrow in edges:
            identifier, created = registry.resolve(target)
            if created:
                lines.append(f"    class {identifier}")
            edge = (identifier, arrow, source)
            if edge in emitted:
                continue
            emitted.add(edge)
            lines.append(f"    {identifier} {arrow} {source}")

    return "\n".join(lines)


__all__ = [
    "HEADER",
    "INHERITANCE_ARROW",
    "IdentifierRegistry",
    "REALIZATION_ARROW",
    "format_member",
    "sanitize_identifier",
    "serialize_diagram",
]
