"""Language extractor implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, List, Sequence

from .base import LanguageExtractor, RawDeclaration
from .csharp import CSharpExtractor
from .java import JavaExtractor
from .python import PythonExtractor

_ENTRY_POINT_GROUP = "umlgen.extractors"

_BUILTIN_FACTORIES: Dict[str, Callable[[], LanguageExtractor]] = {
    "csharp": CSharpExtractor,
    "java": JavaExtractor,
    "python": PythonExtractor,
}


class UnsupportedLanguageError(ValueError):
    """Raised when no extractor is registered for a language selector."""


def discover_extractors(enabled: Sequence[str] | None = None) -> Dict[str, LanguageExtractor]:
    """Instantiate built-in and plugin extractors keyed by language.

    Built-ins win over plugins that register the same language. When `enabled`
    is given only those languages are built, and an unknown one is an error.
    """
    factories = dict(_BUILTIN_FACTORIES)
    for entry in _plugin_entry_points():
        key = entry.name.lower()
        if key not in factories:
            factories[key] = _plugin_factory(entry)

    wanted = list(factories) if enabled is None else [name.lower() for name in enabled]
    unknown = sorted(name for name in set(wanted) if name not in factories)
    if unknown:
        raise UnsupportedLanguageError(f"Unknown languages requested: {', '.join(unknown)}")

    return {name: factories[name]() for name in factories if name in wanted}


def _plugin_factory(entry: metadata.EntryPoint) -> Callable[[], LanguageExtractor]:
    def _build() -> LanguageExtractor:
        try:
            loaded = entry.load()
        except Exception as exc:
            raise RuntimeError(f"Failed to load extractor plugin '{entry.name}': {exc}") from exc
        if isinstance(loaded, LanguageExtractor):
            return loaded
        if isinstance(loaded, type) and issubclass(loaded, LanguageExtractor):
            return loaded()
        raise TypeError(f"Extractor plugin '{entry.name}' is not a LanguageExtractor")

    return _build


def _plugin_entry_points() -> List[metadata.EntryPoint]:
    found = metadata.entry_points()
    if hasattr(found, "select"):
        return list(found.select(group=_ENTRY_POINT_GROUP))
    # Python 3.9 returns a dict keyed by group
    return list(found.get(_ENTRY_POINT_GROUP, []))  # type: ignore[attr-defined]


__all__ = [
    "CSharpExtractor",
    "JavaExtractor",
    "LanguageExtractor",
    "PythonExtractor",
    "RawDeclaration",
    "UnsupportedLanguageError",
    "discover_extractors",
]
