"""Base classes for language extractor plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..logging import get_logger
from ..models import Entity, EntityKind, Member, SourceUnit, strip_generics, unique
from .utils import normalize_params


@dataclass(frozen=True)
class RawDeclaration:
    """A type header found by a scanner together with its isolated body."""

    kind: EntityKind
    raw_name: str
    body: str
    inherits_from: Tuple[str, ...] = ()
    realizes: Tuple[str, ...] = ()
    record_parameters: str = ""


class LanguageExtractor(ABC):
    """Contract for per-language scanners and member extractors."""

    language: str = ""

    @abstractmethod
    def preprocess(self, text: str) -> str:
        """Strip comments and normalise language sugar before scanning."""

    @abstractmethod
    def scan(self, text: str) -> Iterable[RawDeclaration]:
        """Yield type declarations found in preprocessed text, in source order."""

    @abstractmethod
    def extract_members(self, body: str, owner: str) -> List[Member]:
        """Return the members declared in `body` for the type named `owner`."""

    def parse(self, unit: SourceUnit) -> List[Entity]:
        """Turn one source unit into raw, unmerged entities."""
        logger = get_logger(f"extractors.{self.language or 'unknown'}")
        cleaned = self.preprocess(unit.content)
        entities: List[Entity] = []
        for declaration in self.scan(cleaned):
            owner = strip_generics(declaration.raw_name)
            members = self.record_members(declaration.record_parameters)
            members.extend(self.extract_members(declaration.body, owner))
            entities.append(
                Entity(
                    name=declaration.raw_name,
                    kind=declaration.kind,
                    members=_first_writer_wins(members),
                    inherits_from=unique(declaration.inherits_from),
                    realizes=unique(declaration.realizes),
                    origin_unit=unit.name,
                )
            )
        logger.debug("Found %d declarations in %s", len(entities), unit.name)
        return entities

    def record_members(self, parameters: str) -> List[Member]:
        """Expose positional record components as public properties."""
        members: List[Member] = []
        if not parameters.strip():
            return members
        for param in normalize_params(parameters).split(","):
            name, _, declared_type = param.partition(":")
            name = name.strip()
            if not name:
                continue
            members.append(
                Member(
                    kind="property",
                    name=name,
                    declared_type=declared_type.strip() or None,
                    visibility="public",
                )
            )
        return members


def _first_writer_wins(members: Iterable[Member]) -> Tuple[Member, ...]:
    # fields never shadow a name captured by another member kind
    kept: List[Member] = []
    identities = set()
    names = set()
    for member in members:
        if member.identity in identities:
            continue
        if member.kind == "field" and member.name in names:
            continue
        identities.add(member.identity)
        names.add(member.name)
        kept.append(member)
    return tuple(kept)


__all__ = ["LanguageExtractor", "RawDeclaration"]
