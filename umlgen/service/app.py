"""FastAPI application entrypoint for umlgen service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..extractors import UnsupportedLanguageError
from ..languages import LANGUAGES, extensions_for
from ..logging import get_logger
from ..models import DiagramDocument, SourceUnit
from ..pipeline import DiagramGenerator, ExtractionError

logger = get_logger("service")


class DiagramRequest(BaseModel):
    language: str
    files: List[Any] = []


class DiagramResponse(BaseModel):
    diagramText: str
    entities: List[Dict[str, Any]]
    stats: Dict[str, int]


class LanguageItem(BaseModel):
    id: str
    label: str
    extensions: List[str]


class HealthResponse(BaseModel):
    status: str


def _default_generator() -> DiagramGenerator:
    return DiagramGenerator()


def _source_units(language: str, files: List[Any]) -> List[SourceUnit]:
    """Keep well-formed `{name, content}` items, naming blank ones after the language."""
    try:
        default_name = f"Untitled{extensions_for(language)[0]}"
    except KeyError:
        default_name = "Untitled"

    units: List[SourceUnit] = []
    for item in files:
        if not isinstance(item, dict):
            continue
        name = item.get("name")
        content = item.get("content")
        if not isinstance(name, str) or not isinstance(content, str):
            continue
        units.append(SourceUnit(name=name.strip() or default_name, content=content))
    return units


def create_app(
    generator_factory: Callable[[], DiagramGenerator] = _default_generator,
) -> FastAPI:
    """Create the FastAPI application exposing diagram generation."""
    app = FastAPI(title="umlgen Service", version="1.0.0")

    async def get_generator() -> DiagramGenerator:
        return generator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/languages", response_model=List[LanguageItem])
    async def languages() -> List[LanguageItem]:
        return [
            LanguageItem(id=option.id, label=option.label, extensions=list(option.extensions))
            for option in LANGUAGES
        ]

    @app.post("/diagram", response_model=DiagramResponse)
    async def diagram(
        payload: DiagramRequest,
        generator: DiagramGenerator = Depends(get_generator),
    ) -> DiagramResponse:
        generator.extractor_for(payload.language)
        units = _source_units(payload.language, payload.files)

        def _run() -> DiagramDocument:
            return generator.generate(payload.language, units)

        loop = asyncio.get_running_loop()
        document = await loop.run_in_executor(None, _run)
        body = document.to_dict()
        return DiagramResponse(
            diagramText=body["diagramText"],
            entities=body["entities"],
            stats=document.stats(),
        )

    @app.exception_handler(UnsupportedLanguageError)
    async def unsupported_language_handler(
        _: Any, exc: UnsupportedLanguageError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ExtractionError)
    async def extraction_error_handler(_: Any, exc: ExtractionError) -> JSONResponse:
        logger.error("Diagram request failed: %s", exc.__cause__ or exc)
        return JSONResponse(status_code=500, content={"detail": "diagram generation failed"})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    logger.info("Serving umlgen on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port)
