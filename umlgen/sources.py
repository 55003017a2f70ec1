"""Expand files and directories into source units for one language."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .config import UmlGenConfig
from .languages import extensions_for
from .logging import get_logger
from .models import SourceUnit

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
    ".vs",
    "bin",
    "obj",
}

logger = get_logger("sources")


@dataclass
class ExcludeRule:
    """A gitignore-style pattern taken from .gitignore or exclude_paths."""

    pattern: str
    directory_only: bool = False
    anchored: bool = False
    negate: bool = False

    @classmethod
    def parse(cls, raw: str, negate: bool = False) -> Optional["ExcludeRule"]:
        pattern = raw.strip()
        if not pattern:
            return None
        directory_only = pattern.endswith("/")
        pattern = pattern.rstrip("/")
        anchored = pattern.startswith("/") or "/" in pattern
        pattern = pattern.lstrip("/")
        if not pattern:
            return None
        return cls(pattern=pattern, directory_only=directory_only, anchored=anchored, negate=negate)

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if self.anchored:
            return fnmatchcase(rel_path, self.pattern)
        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


@dataclass
class SourceCollection:
    """Source units gathered for a run, plus the paths that were left out."""

    units: List[SourceUnit] = field(default_factory=list)
    ignored: List[str] = field(default_factory=list)
    unreadable: List[str] = field(default_factory=list)


def collect_sources(
    paths: Sequence[Path],
    language: str,
    config: Optional[UmlGenConfig] = None,
) -> SourceCollection:
    """Read every file under `paths` whose extension belongs to `language`.

    Directories are walked in sorted order so the unit sequence, and with it
    the merged diagram, is stable between runs.
    """
    overrides = config.extensions if config is not None else None
    suffixes = set(extensions_for(language, overrides))
    collection = SourceCollection()

    for raw_path in paths:
        path = Path(raw_path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Source path not found: {raw_path}")
        if path.is_dir():
            rules = _load_rules(path, config)
            for file_path in _iter_files(path, rules):
                if file_path.suffix.lower() not in suffixes:
                    continue
                name = file_path.relative_to(path).as_posix()
                _read_unit(file_path, name, collection)
        elif path.suffix.lower() in suffixes:
            _read_unit(path, path.as_posix(), collection)
        else:
            logger.info("Ignoring %s: not a %s source file", path, language)
            collection.ignored.append(path.as_posix())

    logger.debug(
        "Collected %d %s source units (%d ignored, %d unreadable)",
        len(collection.units),
        language,
        len(collection.ignored),
        len(collection.unreadable),
    )
    return collection


def _read_unit(path: Path, name: str, collection: SourceCollection) -> None:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Skipping unreadable source %s: %s", path, exc)
        collection.unreadable.append(path.as_posix())
        return
    collection.units.append(SourceUnit(name=name, content=content))


def _load_rules(root: Path, config: Optional[UmlGenConfig]) -> List[ExcludeRule]:
    rules: List[ExcludeRule] = []
    gitignore = root / ".gitignore"
    if gitignore.is_file():
        for line in gitignore.read_text(encoding="utf-8", errors="ignore").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            negate = line.startswith("!")
            rule = ExcludeRule.parse(line[1:] if negate else line, negate=negate)
            if rule is not None:
                rules.append(rule)
    if config is not None:
        for pattern in config.exclude_paths:
            rule = ExcludeRule.parse(pattern)
            if rule is not None:
                rules.append(rule)
    return rules


def _is_excluded(rel_path: str, is_dir: bool, rules: Sequence[ExcludeRule]) -> bool:
    excluded = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            excluded = not rule.negate
    return excluded


def _iter_files(root: Path, rules: Sequence[ExcludeRule]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        rel_dir = current.relative_to(root).as_posix() if current != root else ""

        kept = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _is_excluded(rel_path, True, rules):
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _is_excluded(rel_path, False, rules):
                continue
            yield current / filename


__all__ = ["ExcludeRule", "SourceCollection", "collect_sources"]
