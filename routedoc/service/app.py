"""FastAPI application entrypoint for routedoc service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ConfigError, parse_framework
from ..errors import RouteDocError
from ..pipeline import GenerationResult, Pipeline


class GenerateRequest(BaseModel):
    path: str
    framework: Optional[str] = None
    title: Optional[str] = None
    version: Optional[str] = None


class GenerateResponse(BaseModel):
    routes: int
    frameworks: List[str]
    document: Dict[str, Any]
    warnings: List[str] = []


class HealthResponse(BaseModel):
    status: str


def _default_pipeline() -> Pipeline:
    return Pipeline()


def create_app(
    pipeline_factory: Callable[[], Pipeline] = _default_pipeline,
) -> FastAPI:
    """Create the FastAPI application exposing OpenAPI generation."""

    app = FastAPI(title="routedoc service", version="1.0.0")

    async def get_pipeline() -> Pipeline:
        # One pipeline per request so no run state is shared.
        return pipeline_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
        pipeline: Pipeline = Depends(get_pipeline),
    ) -> GenerateResponse:
        framework = parse_framework(payload.framework) if payload.framework else None

        def _run() -> GenerationResult:
            return pipeline.run(
                payload.path,
                framework=framework,
                title=payload.title,
                version=payload.version,
            )

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run)
        return GenerateResponse(
            routes=len(result.routes),
            frameworks=[item.value for item in result.frameworks],
            document=result.document,
            warnings=result.warnings,
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RouteDocError)
    async def routedoc_error_handler(_: Any, exc: RouteDocError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]
