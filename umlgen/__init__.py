"""Heuristic class-structure extraction rendered as Mermaid class diagrams."""

from .models import DiagramDocument, Entity, Member, SourceUnit
from .pipeline import DiagramGenerator, ExtractionError, generate_diagram

__version__ = "0.1.0"

__all__ = [
    "DiagramDocument",
    "DiagramGenerator",
    "Entity",
    "ExtractionError",
    "Member",
    "SourceUnit",
    "generate_diagram",
]
