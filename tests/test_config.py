"""Tests for umlgen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from umlgen.config import ConfigError, UmlGenConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, UmlGenConfig)
    assert config.root == tmp_path.resolve()
    assert config.language is None
    assert config.output is None
    assert config.exclude_paths == []
    assert config.extensions == {}


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".umlgen.yml"
    config_file.write_text(
        """
language: "C#"
output: docs/classes.mmd
exclude_paths:
  - "build/"
  - "generated/"
extensions:
  python: [".py", "pyi", ".PYW"]
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.language == "csharp"
    assert config.output == tmp_path.resolve() / "docs" / "classes.mmd"
    assert config.exclude_paths == ["build/", "generated/"]
    assert config.extensions == {"python": [".py", ".pyi", ".pyw"]}


def test_load_config_accepts_directory_and_empty_file(tmp_path: Path) -> None:
    (tmp_path / ".umlgen.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.language is None
    assert config.exclude_paths == []


def test_load_config_single_exclude_string(tmp_path: Path) -> None:
    (tmp_path / ".umlgen.yml").write_text("exclude_paths: vendor/\n", encoding="utf-8")

    assert load_config(tmp_path).exclude_paths == ["vendor/"]


@pytest.mark.parametrize(
    "content, message",
    [
        ("- just\n- a list\n", "mapping"),
        ("language: cobol\n", "Unknown language"),
        ("extensions:\n  ruby: ['.rb']\n", "Unknown language"),
        ("language: [unclosed\n", "Failed to parse"),
    ],
)
def test_load_config_rejects_invalid_files(tmp_path: Path, content: str, message: str) -> None:
    (tmp_path / ".umlgen.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path)
