"""Pipeline entry points turning source units into diagram documents."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence

from .diagram import finalize_diagram
from .extractors import LanguageExtractor, UnsupportedLanguageError, discover_extractors
from .languages import normalise_language
from .logging import get_logger
from .models import DiagramDocument, Entity, SourceUnit


class ExtractionError(RuntimeError):
    """Raised when diagram generation fails for an unexpected internal reason."""


class DiagramGenerator:
    """Routes source units to a language extractor and assembles the diagram."""

    def __init__(self, extractors: Optional[Mapping[str, LanguageExtractor]] = None) -> None:
        self._extractors: Dict[str, LanguageExtractor] = (
            dict(extractors) if extractors is not None else discover_extractors()
        )
        self.logger = get_logger("pipeline")

    @property
    def languages(self) -> List[str]:
        return sorted(self._extractors)

    def extractor_for(self, language: str) -> LanguageExtractor:
        key = normalise_language(language) or language.strip().lower()
        extractor = self._extractors.get(key)
        if extractor is None:
            supported = ", ".join(self.languages)
            raise UnsupportedLanguageError(
                f"Unsupported language '{language}'. Supported: {supported}"
            )
        return extractor

    def generate(self, language: str, units: Sequence[SourceUnit]) -> DiagramDocument:
        """Build a diagram document for `units` written in `language`."""
        extractor = self.extractor_for(language)
        if not units:
            return DiagramDocument(text="", entities=())

        self.logger.debug("Generating %s diagram from %d source units", extractor.language, len(units))
        try:
            entities: List[Entity] = []
            for unit in units:
                entities.extend(extractor.parse(unit))
            document = finalize_diagram(entities)
        except Exception as exc:
            self.logger.exception("Diagram generation failed for %s sources", extractor.language)
            raise ExtractionError("diagram generation failed") from exc

        self.logger.info(
            "Diagram built with %d entities from %d source units",
            len(document.entities),
            len(units),
        )
        return document


def generate_diagram(language: str, units: Sequence[SourceUnit]) -> DiagramDocument:
    """Convenience wrapper around `DiagramGenerator.generate`."""
    return DiagramGenerator().generate(language, units)


__all__ = ["DiagramGenerator", "ExtractionError", "generate_diagram"]
