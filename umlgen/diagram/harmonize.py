"""Reclassify supertype references once every declared kind is known."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List

from ..models import Entity, strip_generics, unique


def harmonize_entities(entities: Iterable[Entity]) -> List[Entity]:
    """Move realization targets that name known non-interface types to inheritance.

    Targets that are interfaces, or that were never declared in the batch,
    stay realizations. The result keeps `inherits_from` and `realizes`
    disjoint, and running it again changes nothing.
    """
    entities = list(entities)
    kinds: Dict[str, str] = {entity.normalized_name: entity.kind for entity in entities}

    harmonized: List[Entity] = []
    for entity in entities:
        inherits = list(entity.inherits_from)
        realizes: List[str] = []
        for target in entity.realizes:
            kind = kinds.get(strip_generics(target))
            if kind is not None and kind != "interface":
                inherits.append(target)
            else:
                realizes.append(target)

        inherits_from = unique(inherits)
        harmonized.append(
            replace(
                entity,
                inherits_from=inherits_from,
                realizes=unique(target for target in realizes if target not in inherits_from),
            )
        )
    return harmonized


__all__ = ["harmonize_entities"]
