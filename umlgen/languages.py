"""Supported language selectors and extension routing."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Dict, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class LanguageOption:
    """A language selector with its display label and file extensions."""

    id: str
    label: str
    extensions: Tuple[str, ...]


LANGUAGES: Tuple[LanguageOption, ...] = (
    LanguageOption(id="csharp", label="C#", extensions=(".cs",)),
    LanguageOption(id="java", label="Java", extensions=(".java",)),
    LanguageOption(id="python", label="Python", extensions=(".py", ".pyi")),
)

_BY_ID: Dict[str, LanguageOption] = {option.id: option for option in LANGUAGES}

_ALIASES = {
    "c#": "csharp",
    "cs": "csharp",
    "py": "python",
}


def normalise_language(value: str) -> Optional[str]:
    """Return the canonical selector for `value`, or None when unknown."""
    key = value.strip().lower()
    key = _ALIASES.get(key, key)
    return key if key in _BY_ID else None


def get_language(language_id: str) -> LanguageOption:
    canonical = normalise_language(language_id)
    if canonical is None:
        raise KeyError(language_id)
    return _BY_ID[canonical]


def extensions_for(
    language_id: str, overrides: Mapping[str, Sequence[str]] | None = None
) -> Tuple[str, ...]:
    """Return lower-cased extensions for a language, honouring config overrides."""
    option = get_language(language_id)
    if overrides and overrides.get(option.id):
        return tuple(ext.lower() for ext in overrides[option.id])
    return option.extensions


def language_for_path(
    path: str | PurePath, overrides: Mapping[str, Sequence[str]] | None = None
) -> Optional[str]:
    """Route a file name to a language selector by its extension."""
    suffix = PurePath(path).suffix.lower()
    if not suffix:
        return None
    for option in LANGUAGES:
        if suffix in extensions_for(option.id, overrides):
            return option.id
    return None


__all__ = [
    "LANGUAGES",
    "LanguageOption",
    "extensions_for",
    "get_language",
    "language_for_path",
    "normalise_language",
]
