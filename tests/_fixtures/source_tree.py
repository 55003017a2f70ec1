"""Helper utilities for writing throwaway source trees in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from umlgen.models import SourceUnit


def unit(name: str, content: str) -> SourceUnit:
    """Build a source unit from an indented triple-quoted snippet."""
    return SourceUnit(name=name, content=textwrap.dedent(content).lstrip("\n"))


class SourceTree:
    """Utility for writing files into a temporary project directory."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries below the project root."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")

    def path(self, relative: str = "") -> Path:
        """Return the project root, or a path below it."""
        return self.root / relative if relative else self.root


__all__ = ["SourceTree", "unit"]
