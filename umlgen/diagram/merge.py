"""Merge partial declarations of the same type into one entity."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List

from ..models import Entity, unique


def merge_entities(entities: Iterable[Entity]) -> List[Entity]:
    """Fold raw entities into one per normalized name, keeping first-seen order.

    The first declaration decides the displayed name, kind and origin unit.
    Members from later declarations are appended unless an earlier member
    already has the same `(kind, name, parameters)` identity; supertypes are
    unioned in order of appearance.
    """
    merged: Dict[str, Entity] = {}
    for entity in entities:
        key = entity.normalized_name
        existing = merged.get(key)
        if existing is None:
            merged[key] = entity
            continue

        identities = {member.identity for member in existing.members}
        members = list(existing.members)
        for member in entity.members:
            if member.identity in identities:
                continue
            identities.add(member.identity)
            members.append(member)

        merged[key] = replace(
            existing,
            members=tuple(members),
            inherits_from=unique((*existing.inherits_from, *entity.inherits_from)),
            realizes=unique((*existing.realizes, *entity.realizes)),
        )
    return list(merged.values())


__all__ = ["merge_entities"]
