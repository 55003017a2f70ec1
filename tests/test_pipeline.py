"""End-to-end tests for the diagram pipeline."""

from __future__ import annotations

from typing import Iterable, List

import pytest

from tests._fixtures.source_tree import unit
from umlgen import DiagramGenerator, ExtractionError, SourceUnit, generate_diagram
from umlgen.extractors import LanguageExtractor, RawDeclaration, UnsupportedLanguageError
from umlgen.models import Member


class _ExplodingExtractor(LanguageExtractor):
    language = "csharp"

    def preprocess(self, text: str) -> str:
        raise RuntimeError("boom")

    def scan(self, text: str) -> Iterable[RawDeclaration]:  # pragma: no cover - never reached
        return []

    def extract_members(self, body: str, owner: str) -> List[Member]:  # pragma: no cover - never reached
        return []


def test_generate_minimal_csharp_round_trip() -> None:
    document = generate_diagram(
        "csharp",
        [
            unit(
                "Widget.cs",
                """
                public class Widget
                {
                    public void Render() { }
                    private int size;
                }
                """,
            )
        ],
    )

    assert document.text == (
        "classDiagram\n"
        "    class Widget {\n"
        "        +Render() : void\n"
        "        -size : int\n"
        "    }"
    )
    assert [entity.name for entity in document.entities] == ["Widget"]


def test_generate_merges_partial_classes_across_units(generator: DiagramGenerator) -> None:
    units = [
        unit("Order.Fields.cs", "public partial class Order { private decimal total; }"),
        unit("Order.Logic.cs", "public partial class Order : IValidatable { public bool Validate() { return true; } }"),
    ]

    document = generator.generate("C#", units)

    [order] = document.entities
    assert [(member.kind, member.name) for member in order.members] == [
        ("field", "total"),
        ("method", "Validate"),
    ]
    assert order.realizes == ("IValidatable",)
    assert document.text.splitlines()[-2:] == ["    class IValidatable", "    IValidatable <|.. Order"]


def test_generate_harmonizes_i_prefixed_classes(generator: DiagramGenerator) -> None:
    document = generator.generate(
        "csharp",
        [unit("Model.cs", "public class IOBuffer { }\npublic class Special : IOBuffer, IComparable { }")],
    )

    special = document.entities[1]
    assert special.inherits_from == ("IOBuffer",)
    assert special.realizes == ("IComparable",)
    assert "    IOBuffer <|-- Special" in document.text.splitlines()


def test_generate_java_interface_realization(generator: DiagramGenerator) -> None:
    units = [
        unit("Shape.java", "public interface Shape { double area(); }"),
        unit("Circle.java", "public class Circle implements Shape { private double radius; }"),
    ]

    document = generator.generate("java", units)

    assert document.text.splitlines()[-1] == "    Shape <|.. Circle"
    assert "    class Shape" not in document.text.splitlines()


def test_generate_empty_batch_returns_empty_document(generator: DiagramGenerator) -> None:
    document = generator.generate("python", [])

    assert document.to_dict() == {"diagramText": "", "entities": []}


def test_generate_without_declarations_returns_empty_document(generator: DiagramGenerator) -> None:
    document = generator.generate("python", [SourceUnit(name="empty.py", content="x = 1\n")])

    assert document.text == ""
    assert document.entities == ()


def test_unknown_language_is_rejected(generator: DiagramGenerator) -> None:
    with pytest.raises(UnsupportedLanguageError):
        generator.generate("cobol", [SourceUnit(name="a.cbl", content="")])


def test_internal_failures_surface_as_extraction_error() -> None:
    generator = DiagramGenerator({"csharp": _ExplodingExtractor()})

    with pytest.raises(ExtractionError, match="diagram generation failed") as excinfo:
        generator.generate("csharp", [SourceUnit(name="a.cs", content="class A {}")])

    assert isinstance(excinfo.value.__cause__, RuntimeError)
