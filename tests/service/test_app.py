"""Tests for the FastAPI service mode."""

from __future__ import annotations

from typing import Iterable, List

import pytest

from fastapi.testclient import TestClient

from umlgen.extractors import LanguageExtractor, RawDeclaration
from umlgen.models import Member
from umlgen.pipeline import DiagramGenerator
from umlgen.service import create_app


class _BrokenExtractor(LanguageExtractor):
    language = "java"

    def preprocess(self, text: str) -> str:
        raise ValueError("unexpected")

    def scan(self, text: str) -> Iterable[RawDeclaration]:  # pragma: no cover - never reached
        return []

    def extract_members(self, body: str, owner: str) -> List[Member]:  # pragma: no cover - never reached
        return []


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_languages_endpoint(client: TestClient) -> None:
    response = client.get("/languages")
    assert response.status_code == 200
    assert response.json()[0] == {"id": "csharp", "label": "C#", "extensions": [".cs"]}


def test_diagram_endpoint_returns_text_entities_and_stats(client: TestClient) -> None:
    response = client.post(
        "/diagram",
        json={
            "language": "csharp",
            "files": [
                {"name": "Animal.cs", "content": "public abstract class Animal { public abstract void Speak(); }"},
                {"name": "Dog.cs", "content": "public class Dog : Animal { private int legs; }"},
            ],
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["diagramText"].splitlines()[-1] == "    Animal <|-- Dog"
    assert [entity["name"] for entity in payload["entities"]] == ["Animal", "Dog"]
    assert payload["entities"][1]["inheritsFrom"] == ["Animal"]
    assert payload["entities"][1]["originUnit"] == "Dog.cs"
    assert payload["stats"] == {"classes": 2, "interfaces": 0, "records": 0, "structs": 0, "members": 2}


def test_diagram_endpoint_filters_invalid_files_and_names_blank_ones(client: TestClient) -> None:
    response = client.post(
        "/diagram",
        json={
            "language": "python",
            "files": [
                {"name": "  ", "content": "class Snippet:\n    pass\n"},
                {"name": "broken.py"},
                {"name": 3, "content": "class Ignored:\n    pass\n"},
                "not-an-object",
            ],
        },
    )

    assert response.status_code == 200
    [entity] = response.json()["entities"]
    assert entity["name"] == "Snippet"
    assert entity["originUnit"] == "Untitled.py"


def test_diagram_endpoint_empty_files(client: TestClient) -> None:
    response = client.post("/diagram", json={"language": "java", "files": []})

    assert response.status_code == 200
    assert response.json() == {
        "diagramText": "",
        "entities": [],
        "stats": {"classes": 0, "interfaces": 0, "records": 0, "structs": 0, "members": 0},
    }


def test_diagram_endpoint_rejects_unknown_language(client: TestClient) -> None:
    response = client.post("/diagram", json={"language": "cobol", "files": []})

    assert response.status_code == 400
    assert "Unsupported language" in response.json()["detail"]


def test_diagram_endpoint_hides_internal_failures() -> None:
    app = create_app(lambda: DiagramGenerator({"java": _BrokenExtractor()}))
    client = TestClient(app)

    response = client.post(
        "/diagram",
        json={"language": "java", "files": [{"name": "A.java", "content": "class A {}"}]},
    )

    assert response.status_code == 500
    assert response.json() == {"detail": "diagram generation failed"}
