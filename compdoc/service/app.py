"""FastAPI application entrypoint for compdoc service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List

try:  # pragma: no cover - optional dependency
    from fastapi import Body, Depends, FastAPI
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel

    _FASTAPI_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - service mode optional
    Body = None  # type: ignore[assignment]
    Depends = None  # type: ignore[assignment]
    FastAPI = None  # type: ignore[assignment]
    JSONResponse = None  # type: ignore[assignment]
    BaseModel = object  # type: ignore[assignment]
    _FASTAPI_AVAILABLE = False

from ..orchestrator import GenerationResult, Orchestrator
from ..validators import DumpValidationError, check_dump


class HealthResponse(BaseModel):
    status: str


class IssueModel(BaseModel):
    field: str
    detail: str


class ValidateResponse(BaseModel):
    valid: bool
    issues: List[IssueModel] = []


class GenerateResponse(BaseModel):
    docs: List[Dict[str, Any]]
    markdown: Dict[str, str]
    index: str
    failures: List[Dict[str, Any]]
    stats: Dict[str, int]


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing compdoc operations."""
    if not _FASTAPI_AVAILABLE:
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install compdoc[service]`."
        )
    app = FastAPI(title="compdoc Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # Fresh orchestrator per request; runs share no state.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/validate", response_model=ValidateResponse)
    async def validate(payload: Any = Body(...)) -> ValidateResponse:
        issues = check_dump(payload)
        return ValidateResponse(
            valid=not issues,
            issues=[IssueModel(field=issue.field, detail=issue.detail) for issue in issues],
        )

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: Any = Body(...),
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> GenerateResponse:
        def _run() -> GenerationResult:
            return orchestrator.generate(payload)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run)
        return GenerateResponse(
            docs=[doc.to_dict() for doc in result.docs],
            markdown=result.markdown(),
            index=result.index_markdown(),
            failures=[failure.to_dict() for failure in result.failures],
            stats=result.stats,
        )

    @app.exception_handler(DumpValidationError)
    async def validation_error_handler(
        _: Any, exc: DumpValidationError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(
            status_code=400,
            content={
                "detail": str(exc),
                "issues": [{"field": i.field, "detail": i.detail} for i in exc.issues],
            },
        )

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    app = create_app()
    try:
        import uvicorn
    except ModuleNotFoundError as exc:
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install compdoc[service]`."
        ) from exc

    uvicorn.run(app, host=host, port=port)
