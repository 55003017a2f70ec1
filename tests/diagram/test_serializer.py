"""Tests for Mermaid serialization and the diagram finalizer."""

from __future__ import annotations

from umlgen.diagram import IdentifierRegistry, finalize_diagram, serialize_diagram
from umlgen.models import DiagramDocument, Entity, Member


def test_round_trip_lists_members_with_visibility_markers() -> None:
    entity = Entity(
        name="Widget",
        kind="class",
        members=(
            Member(kind="method", name="Render", visibility="public", return_type="void", parameters=""),
            Member(kind="field", name="size", visibility="private", declared_type="int"),
        ),
    )

    text = serialize_diagram([entity])

    assert text == "\n".join(
        [
            "classDiagram",
            "    class Widget {",
            "        +Render() : void",
            "        -size : int",
            "    }",
        ]
    )


def test_inheritance_edge_after_harmonization() -> None:
    document = finalize_diagram(
        [Entity(name="B", kind="class"), Entity(name="A", kind="class", realizes=("B",))]
    )

    a = document.entities[1]
    assert a.inherits_from == ("B",)
    assert a.realizes == ()
    assert document.text.splitlines()[-1] == "    B <|-- A"
    assert document.text.count("<|") == 1


def test_empty_input_produces_empty_document() -> None:
    document = finalize_diagram([])

    assert document == DiagramDocument(text="", entities=())
    assert document.to_dict() == {"diagramText": "", "entities": []}


def test_stereotypes_and_constructor_rendering() -> None:
    entities = [
        Entity(name="IShape", kind="interface"),
        Entity(
            name="Point",
            kind="record",
            members=(
                Member(kind="property", name="X", visibility="public", declared_type="int"),
                Member(kind="method", name="Point", visibility="protected", return_type="", parameters="x: int"),
                Member(kind="method", name="Hash", visibility="internal", parameters=""),
            ),
        ),
        Entity(name="Pair", kind="struct"),
    ]

    lines = serialize_diagram(entities).splitlines()

    assert lines[1:4] == ["    class IShape {", "        <<interface>>", "    }"]
    assert lines[4:10] == [
        "    class Point {",
        "        <<record>>",
        "        +X : int",
        "        #Point(x: int)",
        "        ~Hash()",
        "    }",
    ]
    assert lines[10:13] == ["    class Pair {", "        <<struct>>", "    }"]


def test_colliding_identifiers_get_numeric_suffix() -> None:
    text = serialize_diagram([Entity(name="Foo.Bar", kind="class"), Entity(name="Foo_Bar", kind="class")])

    assert "    class Foo_Bar {" in text
    assert "    class Foo_Bar_2 {" in text


def test_numeric_suffix_skips_identifier_of_real_entity() -> None:
    registry = IdentifierRegistry()
    entities = [
        Entity(name="A.B", kind="class"),
        Entity(name="A_B", kind="class"),
        Entity(name="A_B_2", kind="class"),
    ]

    lines = serialize_diagram(entities, registry).splitlines()

    blocks = [line for line in lines if line.startswith("    class ")]
    assert len(blocks) == 3
    assert len(set(blocks)) == 3
    assert len(set(registry.ids.values())) == 3


def test_unresolved_target_gets_single_placeholder() -> None:
    entities = [
        Entity(name="A", kind="class", realizes=("IDisposable",)),
        Entity(name="B", kind="class", realizes=("IDisposable",), inherits_from=("Base<int>",)),
    ]

    lines = serialize_diagram(entities).splitlines()

    assert lines.count("    class IDisposable") == 1
    assert lines.count("    class Base") == 1
    assert lines[-5:] == [
        "    class IDisposable",
        "    IDisposable <|.. A",
        "    class Base",
        "    Base <|-- B",
        "    IDisposable <|.. B",
    ]


def test_placeholder_reuses_declared_identifier_and_generic_targets() -> None:
    entities = [
        Entity(name="Repository<T>", kind="class"),
        Entity(name="Users", kind="class", inherits_from=("Repository<User>",)),
    ]

    lines = serialize_diagram(entities).splitlines()

    assert "    class Repository" not in lines
    assert lines[-1] == "    Repository <|-- Users"


def test_registry_is_scoped_per_build() -> None:
    registry = IdentifierRegistry()
    serialize_diagram([Entity(name="Node", kind="class")], registry)

    assert registry.ids == {"Node": "Node"}
    assert "    class Node {" in serialize_diagram([Entity(name="Node", kind="class")])


def test_document_stats_count_kinds_and_members() -> None:
    document = finalize_diagram(
        [
            Entity(name="A", kind="class", members=(Member(kind="field", name="x", visibility="private"),)),
            Entity(name="I", kind="interface"),
            Entity(name="R", kind="record"),
        ]
    )

    assert document.stats() == {
        "classes": 1,
        "interfaces": 1,
        "records": 1,
        "structs": 0,
        "members": 1,
    }
