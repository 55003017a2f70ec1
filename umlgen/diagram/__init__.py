"""Cross-language diagram assembly: merge, harmonize and serialize."""

from __future__ import annotations

from typing import Iterable

from ..logging import get_logger
from ..models import DiagramDocument, Entity
from .harmonize import harmonize_entities
from .merge import merge_entities
from .serializer import IdentifierRegistry, format_member, sanitize_identifier, serialize_diagram

logger = get_logger("diagram")


def finalize_diagram(entities: Iterable[Entity]) -> DiagramDocument:
    """Merge, harmonize and serialize raw entities into a diagram document."""
    raw = list(entities)
    if not raw:
        return DiagramDocument(text="", entities=())

    merged = merge_entities(raw)
    harmonized = harmonize_entities(merged)
    logger.debug("Merged %d declarations into %d entities", len(raw), len(harmonized))
    text = serialize_diagram(harmonized, IdentifierRegistry())
    return DiagramDocument(text=text, entities=tuple(harmonized))


__all__ = [
    "IdentifierRegistry",
    "finalize_diagram",
    "format_member",
    "harmonize_entities",
    "merge_entities",
    "sanitize_identifier",
    "serialize_diagram",
]
