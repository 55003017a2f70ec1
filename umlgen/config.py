"""Configuration loading for umlgen (.umlgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .languages import normalise_language

CONFIG_FILENAME = ".umlgen.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class UmlGenConfig:
    """Represents the settings defined in .umlgen.yml."""

    root: Path
    language: Optional[str] = None
    output: Optional[Path] = None
    exclude_paths: List[str] = field(default_factory=list)
    extensions: Dict[str, List[str]] = field(default_factory=dict)


def load_config(config_path: Path) -> UmlGenConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return UmlGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    language = _as_str(data.get("language"))
    if language is not None:
        canonical = normalise_language(language)
        if canonical is None:
            raise ConfigError(f"Unknown language in {CONFIG_FILENAME}: {language}")
        language = canonical

    output_str = _as_str(data.get("output"))
    output = root / output_str if output_str else None

    extensions: Dict[str, List[str]] = {}
    for name, values in _as_dict(data.get("extensions")).items():
        canonical = normalise_language(str(name))
        if canonical is None:
            raise ConfigError(f"Unknown language in {CONFIG_FILENAME} extensions: {name}")
        suffixes = [_as_suffix(value) for value in _as_str_list(values)]
        extensions[canonical] = [suffix for suffix in suffixes if suffix]

    return UmlGenConfig(
        root=root,
        language=language,
        output=output,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        extensions=extensions,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_suffix(value: str) -> str:
    value = value.strip().lower()
    if value and not value.startswith("."):
        value = f".{value}"
    return value


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "UmlGenConfig", "load_config"]
